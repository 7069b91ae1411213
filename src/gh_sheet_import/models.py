"""
Pydantic models for the import workflow.

This module defines the data models used throughout the application:
the remote objects we resolve, the rows read from the workbook and the
per-row bookkeeping of an import run.
"""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class Repository(BaseModel):
    """GitHub repository resolved by owner and name."""

    model_config = ConfigDict(frozen=True)

    id: str
    owner: str
    name: str

    @property
    def full_name(self) -> str:
        """Get the owner/name form."""
        return f"{self.owner}/{self.name}"


class Project(BaseModel):
    """GitHub Projects (V2) board."""

    model_config = ConfigDict(frozen=True)

    id: str
    name: str


class IssueRow(BaseModel):
    """
    One data row of the workbook.

    Cells are already coerced to text; ``row_index`` is the 1-based
    worksheet row the values came from.
    """

    model_config = ConfigDict(frozen=True)

    title: str
    body: str = ""
    row_index: int = Field(ge=2)


class RowState(str, Enum):
    """Progress of a single row through create-then-link."""

    PENDING = "pending"
    ISSUE_CREATED = "issue_created"
    LINKED = "linked"
    FAILED = "failed"


class RowOutcome(BaseModel):
    """Record of what happened to one workbook row."""

    model_config = ConfigDict(frozen=False)

    row_index: int
    title: str
    state: RowState = RowState.PENDING
    issue_id: str | None = None
    item_id: str | None = None
    error: str | None = None

    @property
    def is_orphaned(self) -> bool:
        """Issue exists remotely but never made it onto the project."""
        return self.state == RowState.FAILED and self.issue_id is not None


class ImportResult(BaseModel):
    """Result of importing one workbook."""

    model_config = ConfigDict(frozen=False)

    project_id: str
    outcomes: list[RowOutcome] = Field(default_factory=list)

    @property
    def rows_processed(self) -> int:
        return len(self.outcomes)

    @property
    def issues_created(self) -> int:
        return sum(1 for o in self.outcomes if o.issue_id is not None)

    @property
    def items_linked(self) -> int:
        return sum(1 for o in self.outcomes if o.state == RowState.LINKED)

    @property
    def failed(self) -> list[RowOutcome]:
        return [o for o in self.outcomes if o.state == RowState.FAILED]

    @property
    def orphaned(self) -> list[RowOutcome]:
        return [o for o in self.outcomes if o.is_orphaned]


class ImportConfig(BaseModel):
    """Configuration for an import run."""

    model_config = ConfigDict(frozen=True)

    repo: str  # Format: owner/repo
    workbook: str
    project_name: str
    sheet: str | None = None  # None selects the first worksheet
    copy_workbook: bool = True

    @property
    def owner(self) -> str:
        """Get repository owner."""
        return self.repo.split("/")[0]

    @property
    def repo_name(self) -> str:
        """Get repository name."""
        parts = self.repo.split("/")
        return parts[1] if len(parts) > 1 else parts[0]
