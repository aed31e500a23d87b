"""Shared fixtures: an in-memory stand-in for GitHubClient."""

import pytest

from github_mcp_server.github import GitHubError


def entry(path, type="file", size=10, **extra):
    """A contents API entry as GitHub returns it."""
    name = path.rsplit("/", 1)[-1]
    data = {
        "name": name,
        "path": path,
        "type": type,
        "size": size,
        "sha": f"sha-{name}",
        "html_url": f"https://github.com/octo/demo/blob/main/{path}",
        "download_url": f"https://raw.githubusercontent.com/octo/demo/main/{path}" if type == "file" else None,
    }
    data.update(extra)
    return data


class FakeGitHubClient:
    """
    Serves canned responses. Unknown paths raise GitHubError(404), and
    every call is recorded in order.
    """

    def __init__(self):
        self.repository = {}
        self.languages = {}
        self.directories = {}
        self.files = {}
        self.pull = {}
        self.pull_files = []
        self.commits = []
        self.comments = []
        self.calls = []
        self.fail = set()

    def _check(self, operation, *args):
        self.calls.append((operation,) + args)
        if operation in self.fail:
            raise GitHubError(f"{operation} failed", 500)

    async def get_repository(self, owner, repo):
        self._check("get_repository", owner, repo)
        return self.repository

    async def get_languages(self, owner, repo):
        self._check("get_languages", owner, repo)
        return self.languages

    async def get_contents(self, owner, repo, path=""):
        self._check("get_contents", path)
        if path not in self.directories:
            raise GitHubError("Not Found", 404)
        return self.directories[path]

    async def get_raw_content(self, owner, repo, path):
        self._check("get_raw_content", path)
        if path not in self.files:
            raise GitHubError("Not Found", 404)
        return self.files[path]

    async def get_pull_request(self, owner, repo, number):
        self._check("get_pull_request", number)
        return self.pull

    async def list_pull_request_files(self, owner, repo, number):
        self._check("list_pull_request_files", number)
        return self.pull_files

    async def list_pull_request_commits(self, owner, repo, number):
        self._check("list_pull_request_commits", number)
        return self.commits

    async def list_review_comments(self, owner, repo, number):
        self._check("list_review_comments", number)
        return self.comments


@pytest.fixture
def fake_client():
    return FakeGitHubClient()


@pytest.fixture
def make_entry():
    return entry
