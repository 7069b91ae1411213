"""
Response schemas for the GraphQL operations.

Each operation gets an explicit pydantic model of the ``data`` payload it
expects, so a missing field surfaces as a validation failure instead of a
KeyError deep inside the client.
"""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class _Schema(BaseModel):
    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")


class GraphQLErrorEntry(_Schema):
    """One element of the response-level ``errors`` array."""

    message: str = "Unknown error"
    type: str | None = None
    path: list[str | int] | None = None


class GraphQLEnvelope(_Schema):
    """Top-level GraphQL response: ``data`` and/or ``errors``."""

    data: dict[str, Any] | None = None
    errors: list[GraphQLErrorEntry] = Field(default_factory=list)

    @property
    def error_messages(self) -> list[str]:
        return [e.message for e in self.errors]

    @property
    def is_not_found(self) -> bool:
        return any(e.type == "NOT_FOUND" for e in self.errors)


class Node(_Schema):
    id: str = Field(min_length=1)


# repository(owner:, name:) { id }


class RepositoryIdData(_Schema):
    repository: Node | None = None


# repository { projectsV2(query:, first: 1) { nodes { id } } }


class ProjectConnection(_Schema):
    nodes: list[Node | None] = Field(default_factory=list)


class RepositoryProjects(_Schema):
    projects_v2: ProjectConnection = Field(alias="projectsV2")


class ProjectIdData(_Schema):
    repository: RepositoryProjects | None = None

    @property
    def first_project_id(self) -> str | None:
        if self.repository is None:
            return None
        for node in self.repository.projects_v2.nodes:
            if node is not None:
                return node.id
        return None


# createIssue(input:) { issue { id } }


class CreateIssuePayload(_Schema):
    issue: Node


class CreateIssueData(_Schema):
    create_issue: CreateIssuePayload = Field(alias="createIssue")


# addProjectV2ItemById(input:) { item { id } }


class AddProjectItemPayload(_Schema):
    item: Node


class AddProjectItemData(_Schema):
    add_project_v2_item_by_id: AddProjectItemPayload = Field(
        alias="addProjectV2ItemById"
    )
