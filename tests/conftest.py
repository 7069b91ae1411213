"""Pytest configuration and fixtures."""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import pytest
from openpyxl import Workbook

from gh_sheet_import.exceptions import GitHubGraphQLError, GitHubNotFoundError
from gh_sheet_import.provider import ProjectsAPI


class FakeProjectsAPI(ProjectsAPI):
    """
    In-memory stand-in for the GitHub API.

    Records every call. Titles listed in ``fail_create`` or ``fail_link``
    make the corresponding mutation raise a GraphQL error.
    """

    def __init__(
        self,
        repositories: dict[str, str] | None = None,
        projects: list[tuple[str, str]] | None = None,
        fail_create: set[str] | None = None,
        fail_link: set[str] | None = None,
    ) -> None:
        self.repositories = (
            repositories if repositories is not None else {"owner/repo": "R_repo"}
        )
        self.projects = projects if projects is not None else [("Kanban", "PVT_kanban")]
        self.fail_create = fail_create or set()
        self.fail_link = fail_link or set()
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.issues: dict[str, tuple[str, str]] = {}
        self.items: list[tuple[str, str, str]] = []
        self.closed = False

    def call_names(self) -> list[str]:
        return [name for name, _ in self.calls]

    async def close(self) -> None:
        self.closed = True

    async def get_repository_id(self, owner: str, repo: str) -> str:
        self.calls.append(("get_repository_id", (owner, repo)))
        try:
            return self.repositories[f"{owner}/{repo}"]
        except KeyError:
            raise GitHubNotFoundError(f"repository '{owner}/{repo}'") from None

    async def find_project_id(
        self,
        owner: str,
        repo: str,
        project_name: str,
    ) -> str | None:
        self.calls.append(("find_project_id", (owner, repo, project_name)))
        for title, project_id in self.projects:
            if project_name.lower() in title.lower():
                return project_id
        return None

    async def create_issue(self, repository_id: str, title: str, body: str) -> str:
        self.calls.append(("create_issue", (repository_id, title, body)))
        if title in self.fail_create:
            raise GitHubGraphQLError([f"could not create '{title}'"])
        issue_id = f"I_{len(self.issues) + 1}"
        self.issues[issue_id] = (title, body)
        return issue_id

    async def add_project_item(self, project_id: str, content_id: str) -> str:
        self.calls.append(("add_project_item", (project_id, content_id)))
        title, _ = self.issues[content_id]
        if title in self.fail_link:
            raise GitHubGraphQLError([f"could not link '{title}'"])
        item_id = f"PVTI_{len(self.items) + 1}"
        self.items.append((item_id, project_id, content_id))
        return item_id


@pytest.fixture
def fake_api() -> FakeProjectsAPI:
    """API fake with one repository (owner/repo) and one project (Kanban)."""
    return FakeProjectsAPI()


@pytest.fixture
def make_workbook(tmp_path: Path) -> Callable[..., Path]:
    """Factory writing an .xlsx with a header row followed by the given rows."""

    def _make(
        rows: list[tuple[Any, ...]],
        name: str = "issues.xlsx",
        sheet_title: str = "Issues",
        header: tuple[Any, ...] | None = ("Title", "Body"),
    ) -> Path:
        workbook = Workbook()
        worksheet = workbook.active
        worksheet.title = sheet_title
        if header is not None:
            worksheet.append(header)
        for row in rows:
            worksheet.append(row)
        path = tmp_path / name
        workbook.save(path)
        return path

    return _make


@pytest.fixture
def two_row_workbook(make_workbook: Callable[..., Path]) -> Path:
    """Workbook with two bug rows."""
    return make_workbook([("Bug A", "desc A"), ("Bug B", "desc B")])


@pytest.fixture(autouse=True)
def _no_github_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep real credentials out of the tests."""
    monkeypatch.delenv("GITHUB_TOKEN", raising=False)
    monkeypatch.delenv("GITHUB_GRAPHQL_URL", raising=False)
