# GitHub API integration module

from .github_api import NO_GITHUB_PROFILE_MESSAGE, GitHubClient, RepoListing

__all__ = [
    "GitHubClient",
    "NO_GITHUB_PROFILE_MESSAGE",
    "RepoListing",
]
