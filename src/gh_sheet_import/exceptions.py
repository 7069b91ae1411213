"""
Exception hierarchy for gh-sheet-import.

This module defines custom exceptions with clear messages and
actionable guidance for users.
"""


class SheetImportError(Exception):
    """Base exception for all gh-sheet-import errors."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        self.message = message
        self.hint = hint
        super().__init__(message)

    def __str__(self) -> str:
        if self.hint:
            return f"{self.message}\n\nHint: {self.hint}"
        return self.message


# GitHub API Errors


class GitHubClientError(SheetImportError):
    """Base class for GitHub API related errors."""


class GitHubAuthError(GitHubClientError):
    """GitHub rejected the credentials."""

    def __init__(self, details: str = "") -> None:
        message = "GitHub authentication failed"
        if details:
            message = f"{message}: {details}"
        super().__init__(
            message,
            "Pass a valid token with --token or set GITHUB_TOKEN "
            "(scopes: repo, project)",
        )


class GitHubNotFoundError(GitHubClientError):
    """A requested GitHub object does not exist or is not visible."""

    def __init__(self, details: str = "") -> None:
        message = "GitHub object not found"
        if details:
            message = f"{message}: {details}"
        super().__init__(
            message,
            "Check the name and that your token has access to it",
        )


class GitHubAPIError(GitHubClientError):
    """GitHub API returned an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        self.status_code = status_code
        status_info = f" (HTTP {status_code})" if status_code else ""
        super().__init__(
            f"GitHub API error{status_info}: {message}",
            "Check that the API URL is correct and GitHub is reachable",
        )


class GitHubNetworkError(GitHubClientError):
    """Network error communicating with GitHub."""

    def __init__(self, details: str = "") -> None:
        message = "Network error connecting to GitHub"
        if details:
            message = f"{message}: {details}"
        super().__init__(
            message,
            "Check your internet connection and try again",
        )


class GitHubRateLimitError(GitHubClientError):
    """GitHub API rate limit exceeded."""

    def __init__(self, reset_time: str | None = None) -> None:
        message = "GitHub API rate limit exceeded"
        hint = "Wait a few minutes and try again"
        if reset_time:
            hint = f"Rate limit resets at {reset_time}. Wait and try again."
        super().__init__(message, hint)


class GitHubTimeoutError(GitHubClientError):
    """A GitHub API request timed out."""

    def __init__(self, timeout_seconds: int) -> None:
        super().__init__(
            f"GitHub API request timed out after {timeout_seconds} seconds",
            "Raise --timeout or check your network",
        )


class GitHubGraphQLError(GitHubClientError):
    """The GraphQL response carried an error array."""

    def __init__(self, messages: list[str]) -> None:
        self.messages = messages
        joined = "; ".join(messages) if messages else "unknown error"
        super().__init__(f"GraphQL request failed: {joined}")


class GitHubResponseError(GitHubClientError):
    """The GraphQL response is missing a field the operation needs."""

    def __init__(self, operation: str, details: str = "") -> None:
        self.operation = operation
        message = f"Unexpected response to {operation}"
        if details:
            message = f"{message}: {details}"
        super().__init__(message)


# Lookup Errors


class RepositoryNotFoundError(SheetImportError):
    """The target repository could not be resolved."""

    def __init__(self, owner: str, repo: str) -> None:
        super().__init__(
            f"Repository '{owner}/{repo}' not found",
            "Check the owner/repo spelling and that your token can see it",
        )


class ProjectNotFoundError(SheetImportError):
    """No project matched the given name."""

    def __init__(self, project_name: str) -> None:
        super().__init__(
            f"Project '{project_name}' not found",
            "Projects are searched on the repository; link the project to it first",
        )


# Spreadsheet Errors


class SpreadsheetError(SheetImportError):
    """Failed to open or read the workbook."""

    def __init__(self, file_path: str, details: str = "") -> None:
        message = f"Failed to read workbook '{file_path}'"
        if details:
            message = f"{message}: {details}"
        super().__init__(
            message,
            "Check that the file exists and is a valid .xlsx workbook",
        )


class RowProcessingError(SheetImportError):
    """A single spreadsheet row could not be imported."""

    def __init__(self, row_index: int, cause: SheetImportError) -> None:
        self.row_index = row_index
        self.cause = cause
        super().__init__(f"Error processing row {row_index}: {cause.message}")


# Configuration Errors


class ConfigError(SheetImportError):
    """Configuration error."""

    def __init__(self, message: str, hint: str | None = None) -> None:
        super().__init__(message, hint)


class InvalidRepositoryError(ConfigError):
    """Invalid repository format."""

    def __init__(self, repo: str) -> None:
        super().__init__(
            f"Invalid repository format: '{repo}'",
            "Use format 'owner/repo', e.g., 'octocat/Hello-World'",
        )
