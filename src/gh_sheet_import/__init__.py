"""
gh-sheet-import: Create GitHub issues from Excel rows and add them to a project.

This package reads a two-column workbook (title, body), creates one issue
per row through the GitHub GraphQL API and links every new issue to a
GitHub Projects (V2) board.
"""

__version__ = "1.0.0"
