"""GraphQL documents sent to the GitHub API."""

REPOSITORY_ID = """
query ($owner: String!, $repo: String!) {
  repository(owner: $owner, name: $repo) {
    id
  }
}
"""

# projectsV2(query:) is a substring search; only the first match is used.
PROJECT_ID = """
query ($owner: String!, $repo: String!, $projectName: String!) {
  repository(owner: $owner, name: $repo) {
    projectsV2(query: $projectName, first: 1) {
      nodes {
        id
      }
    }
  }
}
"""

CREATE_ISSUE = """
mutation ($repositoryId: ID!, $title: String!, $body: String!) {
  createIssue(input: {repositoryId: $repositoryId, title: $title, body: $body}) {
    issue {
      id
    }
  }
}
"""

ADD_PROJECT_ITEM = """
mutation ($projectId: ID!, $contentId: ID!) {
  addProjectV2ItemById(input: {projectId: $projectId, contentId: $contentId}) {
    item {
      id
    }
  }
}
"""
