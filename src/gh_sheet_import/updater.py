"""
Import orchestrator.

This module coordinates an import run:
1. Resolve the repository and the project
2. Read issue rows from the workbook
3. For each row, create an issue and add it to the project

Rows are processed strictly in sheet order. A failing row is logged and
skipped; it never aborts the batch.
"""

import asyncio
import logging
from pathlib import Path

from .exceptions import (
    GitHubGraphQLError,
    GitHubNotFoundError,
    InvalidRepositoryError,
    RepositoryNotFoundError,
    RowProcessingError,
    SheetImportError,
    SpreadsheetError,
)
from .models import ImportConfig, ImportResult, IssueRow, RowOutcome, RowState
from .provider import ProjectsAPI
from .spreadsheet import open_issue_rows

logger = logging.getLogger(__name__)


def validate_repo(repo: str) -> tuple[str, str]:
    """Split ``owner/repo`` into its parts, rejecting anything else."""
    if repo.count("/") != 1:
        raise InvalidRepositoryError(repo)

    owner, name = repo.split("/")
    if not owner or not name:
        raise InvalidRepositoryError(repo)
    return owner, name


class ProjectUpdater:
    """
    Creates issues from workbook rows and adds them to a project.

    The API client is passed in and owned by the caller, who is also
    responsible for closing it.
    """

    def __init__(
        self,
        client: ProjectsAPI,
        owner: str,
        repo: str,
        sheet: str | None = None,
        copy_workbook: bool = True,
    ) -> None:
        """
        Initialize the updater.

        Args:
            client: API client used for every remote call
            owner: Repository owner
            repo: Repository name
            sheet: Worksheet name; None selects the first worksheet
            copy_workbook: Read the workbook from a temporary copy
        """
        self.client = client
        self.owner = owner
        self.repo = repo
        self.sheet = sheet
        self.copy_workbook = copy_workbook

    async def resolve_repository_id(self) -> str | None:
        """
        Resolve the repository's node id.

        Returns:
            The id, or None if the repository does not exist or is hidden

        Raises:
            GitHubClientError: On auth, transport or other API failures
        """
        try:
            return await self.client.get_repository_id(self.owner, self.repo)
        except GitHubNotFoundError:
            logger.error(f"Repository '{self.owner}/{self.repo}' not found.")
            return None

    async def resolve_project_id(self, project_name: str) -> str | None:
        """
        Resolve a project's node id by name.

        The first project GitHub returns for the name wins; there is no
        tie-breaking between several matches.

        Returns:
            The id, or None if no project matched or the lookup reported
            GraphQL errors
        """
        try:
            project_id = await self.client.find_project_id(
                self.owner, self.repo, project_name
            )
        except (GitHubGraphQLError, GitHubNotFoundError) as e:
            logger.error(f"Project lookup failed: {e.message}")
            return None

        if project_id is None:
            logger.error(f"Project '{project_name}' not found.")
            return None

        logger.info(f"Resolved project '{project_name}' to {project_id}")
        return project_id

    async def create_issue(self, title: str, body: str) -> str:
        """
        Create an issue in the repository.

        The repository id is resolved again on every call.

        Returns:
            The new issue's node id

        Raises:
            RepositoryNotFoundError: If the repository cannot be resolved
            GitHubClientError: If the mutation fails
        """
        repository_id = await self.resolve_repository_id()
        if repository_id is None:
            raise RepositoryNotFoundError(self.owner, self.repo)

        issue_id = await self.client.create_issue(repository_id, title, body)
        logger.info(f"Created issue '{title}' ({issue_id})")
        return issue_id

    async def add_item_to_project(self, project_id: str, content_id: str) -> str:
        """
        Add an issue to the project.

        Calling this twice for the same issue is not guarded against.

        Returns:
            The project item's node id
        """
        item_id = await self.client.add_project_item(project_id, content_id)
        logger.info(f"Item added to project. Item ID: {item_id}")
        return item_id

    async def _process_row(self, row: IssueRow, project_id: str) -> RowOutcome:
        """Create and link one row, recording how far it got."""
        outcome = RowOutcome(row_index=row.row_index, title=row.title)
        try:
            outcome.issue_id = await self.create_issue(row.title, row.body)
            outcome.state = RowState.ISSUE_CREATED

            outcome.item_id = await self.add_item_to_project(project_id, outcome.issue_id)
            outcome.state = RowState.LINKED
        except SheetImportError as e:
            error = RowProcessingError(row.row_index, e)
            logger.error(error.message)
            if outcome.issue_id is not None:
                logger.warning(
                    f"Issue {outcome.issue_id} from row {row.row_index} "
                    "was created but not added to the project"
                )
            outcome.state = RowState.FAILED
            outcome.error = e.message
        return outcome

    async def update_from_spreadsheet(
        self,
        path: str | Path,
        project_id: str,
    ) -> ImportResult:
        """
        Import every data row of a workbook into the project.

        Args:
            path: Path to the .xlsx workbook
            project_id: Node id of the target project

        Returns:
            ImportResult with one outcome per data row

        Raises:
            SpreadsheetError: If the workbook cannot be read
        """
        result = ImportResult(project_id=project_id)

        with open_issue_rows(path, sheet=self.sheet, copy=self.copy_workbook) as rows:
            for row in rows:
                logger.debug(f"Processing row {row.row_index}: {row.title!r}")
                result.outcomes.append(await self._process_row(row, project_id))

        return result

    async def run(self, path: str | Path, project_name: str) -> ImportResult | None:
        """
        Run a complete import.

        Returns:
            ImportResult, or None if no project matched (nothing is created)

        Raises:
            RepositoryNotFoundError: If the repository cannot be resolved
            GitHubClientError: On auth or transport failures during lookup
            SpreadsheetError: If the workbook cannot be read
        """
        if not Path(path).is_file():
            raise SpreadsheetError(str(path), "file not found")

        logger.info(f"Starting import: {path} -> {self.owner}/{self.repo}")

        if await self.resolve_repository_id() is None:
            raise RepositoryNotFoundError(self.owner, self.repo)

        project_id = await self.resolve_project_id(project_name)
        if project_id is None:
            return None

        return await self.update_from_spreadsheet(path, project_id)


def run_import(config: ImportConfig, client: ProjectsAPI) -> ImportResult | None:
    """
    Synchronous wrapper for ProjectUpdater.run().

    This is a convenience function for running an import from non-async code.
    The client is closed once the run is over.

    Args:
        config: Import configuration
        client: API client to use

    Returns:
        ImportResult, or None if no project matched
    """
    validate_repo(config.repo)
    updater = ProjectUpdater(
        client=client,
        owner=config.owner,
        repo=config.repo_name,
        sheet=config.sheet,
        copy_workbook=config.copy_workbook,
    )

    async def _run() -> ImportResult | None:
        try:
            return await updater.run(config.workbook, config.project_name)
        finally:
            await client.close()

    return asyncio.run(_run())
