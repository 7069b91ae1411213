"""
GitHub GraphQL client.

This module handles all interactions with the GitHub GraphQL API:
sending the four operations the importer needs, mapping HTTP and
GraphQL failures onto the exception hierarchy and extracting typed
results from the responses.
"""

import json
import logging
from typing import Any, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from . import queries
from .exceptions import (
    GitHubAPIError,
    GitHubAuthError,
    GitHubGraphQLError,
    GitHubNetworkError,
    GitHubNotFoundError,
    GitHubRateLimitError,
    GitHubResponseError,
    GitHubTimeoutError,
)
from .provider import ProjectsAPI
from .responses import (
    AddProjectItemData,
    CreateIssueData,
    GraphQLEnvelope,
    ProjectIdData,
    RepositoryIdData,
)

logger = logging.getLogger(__name__)

SchemaT = TypeVar("SchemaT", bound=BaseModel)

DEFAULT_API_URL = "https://api.github.com/graphql"


class GitHubClient(ProjectsAPI):
    """
    Client for the GitHub GraphQL API.

    One request is in flight at a time. There is no retry: a non-2xx
    status or a GraphQL error array is final for that call.
    """

    DEFAULT_TIMEOUT = 60  # seconds

    def __init__(
        self,
        token: str,
        api_url: str = DEFAULT_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """
        Initialize the GitHub client.

        Args:
            token: Personal access token sent as a bearer token
            api_url: GraphQL endpoint (override for GitHub Enterprise)
            timeout: Request timeout in seconds
            transport: Optional httpx transport, used by tests to mock the API
        """
        if not token:
            raise GitHubAuthError("no token provided")
        self.token = token
        self.api_url = api_url
        self.timeout = timeout
        self._transport = transport
        self._client: httpx.AsyncClient | None = None

    async def _get_client(self) -> httpx.AsyncClient:
        """Get or create the HTTP client."""
        if self._client is None or self._client.is_closed:
            self._client = httpx.AsyncClient(
                headers={
                    "Authorization": f"Bearer {self.token}",
                    "Accept": "application/json",
                },
                timeout=httpx.Timeout(self.timeout),
                transport=self._transport,
            )
        return self._client

    async def close(self) -> None:
        """Close the HTTP client."""
        if self._client is not None and not self._client.is_closed:
            await self._client.aclose()
            self._client = None

    async def _execute(
        self,
        operation: str,
        query: str,
        variables: dict[str, Any],
    ) -> GraphQLEnvelope:
        """
        Send one GraphQL operation and return the parsed envelope.

        Args:
            operation: Short operation name, used in logs and errors
            query: GraphQL document
            variables: Operation variables

        Returns:
            The response envelope, errors not yet inspected

        Raises:
            Various GitHubClientError subclasses based on failure type
        """
        client = await self._get_client()
        logger.debug(f"Sending {operation} with variables {variables}")

        try:
            response = await client.post(
                self.api_url,
                json={"query": query, "variables": variables},
            )
        except httpx.TimeoutException as e:
            raise GitHubTimeoutError(self.timeout) from e
        except httpx.RequestError as e:
            raise GitHubNetworkError(str(e)) from e

        if response.status_code == 401:
            raise GitHubAuthError("Bad credentials")

        if response.status_code == 403:
            if "rate limit" in response.text.lower():
                raise GitHubRateLimitError(response.headers.get("x-ratelimit-reset"))
            raise GitHubAuthError(f"Access forbidden: {response.text}")

        if response.status_code >= 400:
            raise GitHubAPIError(response.text, response.status_code)

        try:
            payload = response.json()
        except ValueError as e:
            raise GitHubAPIError(f"Invalid JSON response: {e}") from e

        logger.debug(f"{operation} response:\n{json.dumps(payload, indent=2)}")

        try:
            return GraphQLEnvelope.model_validate(payload)
        except ValidationError as e:
            raise GitHubResponseError(operation, str(e)) from e

    def _raise_for_errors(self, envelope: GraphQLEnvelope, operation: str) -> None:
        """Raise if the response carries an error array, even on HTTP 200."""
        if not envelope.errors:
            return

        for message in envelope.error_messages:
            logger.error(f"GraphQL Error ({operation}): {message}")

        if envelope.is_not_found:
            raise GitHubNotFoundError("; ".join(envelope.error_messages))
        raise GitHubGraphQLError(envelope.error_messages)

    def _extract(
        self,
        schema: type[SchemaT],
        envelope: GraphQLEnvelope,
        operation: str,
    ) -> SchemaT:
        """Validate the ``data`` payload against the operation's schema."""
        if envelope.data is None:
            raise GitHubResponseError(operation, "response has no data")
        try:
            return schema.model_validate(envelope.data)
        except ValidationError as e:
            raise GitHubResponseError(operation, str(e)) from e

    async def get_repository_id(self, owner: str, repo: str) -> str:
        """
        Look up the node id of a repository.

        Raises:
            GitHubNotFoundError: If the repository does not exist or is hidden
        """
        operation = "repository lookup"
        envelope = await self._execute(
            operation,
            queries.REPOSITORY_ID,
            {"owner": owner, "repo": repo},
        )
        self._raise_for_errors(envelope, operation)

        data = self._extract(RepositoryIdData, envelope, operation)
        if data.repository is None:
            raise GitHubNotFoundError(f"repository '{owner}/{repo}'")

        logger.debug(f"Repository {owner}/{repo} has id {data.repository.id}")
        return data.repository.id

    async def find_project_id(
        self,
        owner: str,
        repo: str,
        project_name: str,
    ) -> str | None:
        """
        Find the first project on the repository matching a name.

        The name is passed to GitHub's project search, so any project
        whose title contains it may match; the first one returned wins.
        """
        operation = "project lookup"
        envelope = await self._execute(
            operation,
            queries.PROJECT_ID,
            {"owner": owner, "repo": repo, "projectName": project_name},
        )
        self._raise_for_errors(envelope, operation)

        data = self._extract(ProjectIdData, envelope, operation)
        return data.first_project_id

    async def create_issue(self, repository_id: str, title: str, body: str) -> str:
        """Create an issue and return its node id."""
        operation = "createIssue"
        envelope = await self._execute(
            operation,
            queries.CREATE_ISSUE,
            {"repositoryId": repository_id, "title": title, "body": body},
        )
        self._raise_for_errors(envelope, operation)

        data = self._extract(CreateIssueData, envelope, operation)
        return data.create_issue.issue.id

    async def add_project_item(self, project_id: str, content_id: str) -> str:
        """Add a content node to a project and return the item id."""
        operation = "addProjectV2ItemById"
        envelope = await self._execute(
            operation,
            queries.ADD_PROJECT_ITEM,
            {"projectId": project_id, "contentId": content_id},
        )
        self._raise_for_errors(envelope, operation)

        data = self._extract(AddProjectItemData, envelope, operation)
        return data.add_project_v2_item_by_id.item.id
