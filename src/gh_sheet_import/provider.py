"""
Abstract interface for the project API.

This module defines the operations the import workflow needs from the
hosting platform. ``GitHubClient`` implements it over GraphQL; tests
substitute an in-memory fake.
"""

from abc import ABC, abstractmethod


class ProjectsAPI(ABC):
    """
    Abstract base class for the remote API used by ``ProjectUpdater``.

    Implementations raise ``GitHubClientError`` subclasses on failure.
    """

    @abstractmethod
    async def close(self) -> None:
        """Close any resources held by the client."""
        ...

    @abstractmethod
    async def get_repository_id(self, owner: str, repo: str) -> str:
        """
        Look up the node id of a repository.

        Args:
            owner: Repository owner (user or organization)
            repo: Repository name

        Returns:
            The repository node id

        Raises:
            GitHubNotFoundError: If the repository does not exist or is hidden
        """
        ...

    @abstractmethod
    async def find_project_id(
        self,
        owner: str,
        repo: str,
        project_name: str,
    ) -> str | None:
        """
        Find the first project on the repository matching a name.

        Returns:
            The project node id, or None if nothing matched
        """
        ...

    @abstractmethod
    async def create_issue(self, repository_id: str, title: str, body: str) -> str:
        """
        Create an issue.

        Returns:
            The new issue's node id
        """
        ...

    @abstractmethod
    async def add_project_item(self, project_id: str, content_id: str) -> str:
        """
        Add an existing issue (or other content node) to a project.

        Returns:
            The new project item's node id
        """
        ...
