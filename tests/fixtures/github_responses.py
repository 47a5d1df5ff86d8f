"""Mock GitHub API response fixtures.

These fixtures represent realistic GitHub REST API responses for testing
schema parsing and aggregation logic. Structure matches the GitHub REST API v3;
fields the package does not read are kept to check they pass through.

See: https://docs.github.com/en/rest/pulls/pulls
"""

from tests.conftest import (
    JAN_10_ISO,
    JAN_12_ISO,
    JAN_15_ISO,
    JAN_20_ISO,
)

# -----------------------------------------------------------------------------
# User Response
# -----------------------------------------------------------------------------
GITHUB_USER_RESPONSE = {
    "login": "octocat",
    "id": 583231,
    "node_id": "MDQ6VXNlcjU4MzIzMQ==",
    "avatar_url": "https://avatars.githubusercontent.com/u/583231?v=4",
    "html_url": "https://github.com/octocat",
    "type": "User",
    "site_admin": False,
    "name": "The Octocat",
    "company": "@github",
    "public_repos": 8,
    "followers": 9999,
}

GITHUB_REVIEWER_RESPONSE = {
    "login": "hubot",
    "id": 480938,
    "type": "User",
}

# -----------------------------------------------------------------------------
# Repository Response
# -----------------------------------------------------------------------------
GITHUB_REPO_RESPONSE = {
    "id": 1296269,
    "node_id": "MDEwOlJlcG9zaXRvcnkxMjk2MjY5",
    "name": "Hello-World",
    "full_name": "octocat/Hello-World",
    "owner": {"login": "octocat", "id": 583231, "type": "User"},
    "private": False,
    "html_url": "https://github.com/octocat/Hello-World",
    "description": "My first repository on GitHub!",
    "fork": False,
    "default_branch": "master",
    "stargazers_count": 2500,
}

# -----------------------------------------------------------------------------
# Pull Request Response (Open)
# -----------------------------------------------------------------------------
GITHUB_PR_RESPONSE = {
    "number": 1347,
    "html_url": "https://github.com/octocat/Hello-World/pull/1347",
    "state": "open",
    "title": "Amazing new feature",
    "body": "Please pull these awesome changes in!",
    "user": GITHUB_USER_RESPONSE,
    "created_at": JAN_15_ISO,
    "updated_at": JAN_20_ISO,
    "closed_at": None,
    "merged_at": None,
    "draft": False,
}

# -----------------------------------------------------------------------------
# Pull Request Response (Merged)
# -----------------------------------------------------------------------------
GITHUB_PR_MERGED_RESPONSE = {
    "number": 1348,
    "html_url": "https://github.com/octocat/Hello-World/pull/1348",
    "state": "closed",
    "title": "Fix typo in README",
    "body": None,
    "user": GITHUB_USER_RESPONSE,
    "created_at": JAN_10_ISO,
    "updated_at": JAN_12_ISO,
    "closed_at": JAN_12_ISO,
    "merged_at": JAN_12_ISO,
    "draft": False,
}

# -----------------------------------------------------------------------------
# Pull Request Response (Closed without merge)
# -----------------------------------------------------------------------------
GITHUB_PR_CLOSED_RESPONSE = {
    "number": 1349,
    "html_url": "https://github.com/octocat/Hello-World/pull/1349",
    "state": "closed",
    "title": "Experimental change",
    "body": "Superseded.",
    "user": GITHUB_USER_RESPONSE,
    "created_at": JAN_10_ISO,
    "updated_at": JAN_15_ISO,
    "closed_at": JAN_15_ISO,
    "merged_at": None,
    "draft": False,
}

# -----------------------------------------------------------------------------
# Reviews Endpoint Response
# -----------------------------------------------------------------------------
GITHUB_REVIEWS_RESPONSE = [
    {
        "id": 80,
        "user": GITHUB_REVIEWER_RESPONSE,
        "body": "Here is the body for the review.",
        "state": "CHANGES_REQUESTED",
        "submitted_at": JAN_15_ISO,
    },
    {
        "id": 81,
        "user": GITHUB_REVIEWER_RESPONSE,
        "body": "",
        "state": "APPROVED",
        "submitted_at": JAN_20_ISO,
    },
    {
        "id": 82,
        "user": None,
        "body": "Review by a deleted account",
        "state": "COMMENTED",
        "submitted_at": JAN_20_ISO,
    },
]

# -----------------------------------------------------------------------------
# Search Endpoint Response
# -----------------------------------------------------------------------------
GITHUB_SEARCH_RESPONSE = {
    "total_count": 2,
    "incomplete_results": False,
    "items": [
        {
            "number": 1347,
            "state": "open",
            "title": "Amazing new feature",
            "user": {"login": "octocat", "id": 583231, "type": "User"},
            "pull_request": {"url": "https://api.github.com/repos/octocat/Hello-World/pulls/1347"},
        },
        {
            "number": 1350,
            "state": "closed",
            "title": "Update docs",
            "user": GITHUB_REVIEWER_RESPONSE,
            "pull_request": {"url": "https://api.github.com/repos/octocat/Hello-World/pulls/1350"},
        },
    ],
}
