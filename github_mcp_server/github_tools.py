"""
GitHub tools.

Repository analysis, pull request review and repository contents, each a
thin shaping layer over GitHubClient calls.
"""

import logging
import posixpath
from typing import Any, Dict, List, Optional

from .github import GitHubClient, GitHubError
from .protocol import ToolParameter
from .tools import BaseTool, ToolError, ToolRegistry, get_bool, get_int, get_string
from .traversal import get_contents_tree


logger = logging.getLogger(__name__)

README_LIMIT = 2000
PATCH_LIMIT = 1000

KEY_FILE_PATTERNS = (
    "readme", "license", "changelog", "contributing", "dockerfile", "makefile",
    ".gitignore", "package.json", "requirements.txt", "setup.py", "cargo.toml",
    "go.mod", "pom.xml", "build.gradle", "composer.json", "gemfile",
)


def _truncate(text: Optional[str], limit: int) -> Optional[str]:
    if text is not None and len(text) > limit:
        return text[:limit] + "..."
    return text


def _owner_and_repo(arguments: Dict[str, Any]):
    owner = get_string(arguments, "owner").strip()
    repo = get_string(arguments, "repo").strip()
    if not owner or not repo:
        raise ToolError("Both 'owner' and 'repo' must be non-empty strings")
    return owner, repo


def _repository_parameters() -> List[ToolParameter]:
    return [
        ToolParameter(
            name="owner",
            type="string",
            description="Repository owner (username or organization)",
            required=True,
        ),
        ToolParameter(
            name="repo",
            type="string",
            description="Repository name",
            required=True,
        ),
    ]


def detect_project_type(files: List[str]) -> str:
    """Guess the primary ecosystem from root-level file names."""
    names = set(files)
    if any(f.endswith(".csproj") or f.endswith(".sln") for f in files):
        return ".NET/C#"
    if "package.json" in names:
        return "Node.js/JavaScript"
    if names & {"requirements.txt", "setup.py", "pyproject.toml"}:
        return "Python"
    if "Cargo.toml" in names:
        return "Rust"
    if "go.mod" in names:
        return "Go"
    if names & {"pom.xml", "build.gradle"}:
        return "Java"
    if "Gemfile" in names:
        return "Ruby"
    if "composer.json" in names:
        return "PHP"
    return "Unknown"


class RepositoryAnalyzerTool(BaseTool):
    """Summarize a repository's metadata, languages and root layout."""

    def __init__(self, client: GitHubClient):
        self.client = client

    @property
    def name(self) -> str:
        return "github_analyze_repository"

    @property
    def description(self) -> str:
        return (
            "Analyze a GitHub repository and provide a summary of its structure, "
            "technologies, and key files"
        )

    @property
    def parameters(self) -> List[ToolParameter]:
        return _repository_parameters()

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        owner, repo = _owner_and_repo(arguments)

        try:
            repository = await self.client.get_repository(owner, repo)
            contents = await self.client.get_contents(owner, repo)
            languages = await self.client.get_languages(owner, repo)
        except GitHubError as e:
            raise ToolError(f"Failed to analyze repository: {e}") from e

        readme = await self._readme(owner, repo, contents)

        return {
            "repository": {
                "name": repository.get("name"),
                "fullName": repository.get("full_name"),
                "description": repository.get("description"),
                "url": repository.get("html_url"),
                "stars": repository.get("stargazers_count"),
                "forks": repository.get("forks_count"),
                "language": repository.get("language"),
                "createdAt": repository.get("created_at"),
                "updatedAt": repository.get("updated_at"),
                "size": repository.get("size"),
            },
            "languages": languages,
            "projectStructure": self._structure(contents),
            "keyFiles": self._key_files(contents),
            "readmeContent": _truncate(readme, README_LIMIT),
        }

    async def _readme(self, owner: str, repo: str, contents: List[Dict[str, Any]]) -> Optional[str]:
        for entry in contents:
            if entry.get("name", "").lower().startswith("readme"):
                try:
                    raw = await self.client.get_raw_content(owner, repo, entry["path"])
                except GitHubError as e:
                    logger.debug(f"README not readable for {owner}/{repo}: {e}")
                    return None
                return raw.decode("utf-8", errors="replace")
        return None

    @staticmethod
    def _structure(contents: List[Dict[str, Any]]) -> dict:
        directories = [c.get("name") for c in contents if c.get("type") == "dir"]
        files = [c.get("name") for c in contents if c.get("type") == "file"]
        return {
            "projectType": detect_project_type(files),
            "directories": directories,
            "rootFiles": files,
            "totalItems": len(contents),
        }

    @staticmethod
    def _key_files(contents: List[Dict[str, Any]]) -> List[str]:
        key_files = []
        for entry in contents:
            if entry.get("type") != "file":
                continue
            lowered = entry.get("name", "").lower()
            if any(pattern in lowered for pattern in KEY_FILE_PATTERNS):
                key_files.append(entry["name"])
        return key_files


class PullRequestReviewerTool(BaseTool):
    """Summarize a pull request's changes and suggest review points."""

    def __init__(self, client: GitHubClient):
        self.client = client

    @property
    def name(self) -> str:
        return "github_review_pull_request"

    @property
    def description(self) -> str:
        return (
            "Review a GitHub pull request and provide analysis of changes, "
            "files modified, and suggestions"
        )

    @property
    def parameters(self) -> List[ToolParameter]:
        return _repository_parameters() + [
            ToolParameter(
                name="pullNumber",
                type="integer",
                description="Pull request number",
                required=True,
            ),
        ]

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        owner, repo = _owner_and_repo(arguments)
        number = get_int(arguments, "pullNumber")
        if number <= 0:
            raise ToolError("'pullNumber' must be a positive integer")

        try:
            pull = await self.client.get_pull_request(owner, repo, number)
            files = await self.client.list_pull_request_files(owner, repo, number)
            comments = await self.client.list_review_comments(owner, repo, number)
            commits = await self.client.list_pull_request_commits(owner, repo, number)
        except GitHubError as e:
            raise ToolError(f"Failed to review pull request: {e}") from e

        return {
            "pullRequest": {
                "number": pull.get("number"),
                "title": pull.get("title"),
                "description": pull.get("body"),
                "state": pull.get("state"),
                "author": (pull.get("user") or {}).get("login"),
                "createdAt": pull.get("created_at"),
                "updatedAt": pull.get("updated_at"),
                "mergeable": pull.get("mergeable"),
                "additions": pull.get("additions"),
                "deletions": pull.get("deletions"),
                "changedFiles": pull.get("changed_files"),
                "url": pull.get("html_url"),
            },
            "commits": [self._commit(c) for c in commits],
            "filesChanged": [
                {
                    "filename": f.get("filename"),
                    "status": f.get("status"),
                    "additions": f.get("additions", 0),
                    "deletions": f.get("deletions", 0),
                    "changes": f.get("changes", 0),
                    "patch": _truncate(f.get("patch"), PATCH_LIMIT),
                }
                for f in files
            ],
            "changeAnalysis": analyze_changes(files),
            "existingComments": len(comments),
            "reviewSuggestions": review_suggestions(pull, files),
        }

    @staticmethod
    def _commit(commit: Dict[str, Any]) -> dict:
        detail = commit.get("commit") or {}
        author = detail.get("author") or {}
        return {
            "sha": commit.get("sha"),
            "message": detail.get("message"),
            "author": author.get("name"),
            "date": author.get("date"),
        }


def _extension(filename: str) -> str:
    return posixpath.splitext(posixpath.basename(filename))[1]


def analyze_changes(files: List[Dict[str, Any]]) -> dict:
    """Aggregate line counts, extensions and directories of changed files."""
    breakdown: Dict[str, int] = {}
    directories: List[str] = []
    for f in files:
        filename = f.get("filename", "")
        ext = _extension(filename)
        breakdown[ext] = breakdown.get(ext, 0) + 1

        directory = posixpath.dirname(filename)
        if directory and directory not in directories:
            directories.append(directory)

    additions = sum(f.get("additions", 0) for f in files)
    deletions = sum(f.get("deletions", 0) for f in files)
    largest = sorted(files, key=lambda f: f.get("changes", 0), reverse=True)[:5]

    return {
        "totalFiles": len(files),
        "totalAdditions": additions,
        "totalDeletions": deletions,
        "netChanges": additions - deletions,
        "fileTypeBreakdown": breakdown,
        "modifiedDirectories": directories,
        "largestFiles": [
            {"filename": f.get("filename"), "changes": f.get("changes", 0)}
            for f in largest
        ],
    }


def review_suggestions(pull: Dict[str, Any], files: List[Dict[str, Any]]) -> List[str]:
    suggestions = []

    if len(files) > 20:
        suggestions.append(
            "This PR modifies a large number of files. Consider breaking it into "
            "smaller, focused PRs for easier review."
        )

    if sum(f.get("changes", 0) for f in files) > 500:
        suggestions.append(
            "This PR has a large number of changes. Ensure all changes are related "
            "and necessary."
        )

    if not (pull.get("body") or "").strip():
        suggestions.append(
            "Consider adding a description to explain the purpose and scope of these changes."
        )

    names = [f.get("filename", "").lower() for f in files]
    has_tests = any("test" in n or "spec" in n for n in names)
    if not has_tests and any("test" not in n for n in names):
        suggestions.append("Consider adding or updating tests for the changes made.")

    return suggestions


class RepositoryContentsTool(BaseTool):
    """Return files and directories under a repository path."""

    def __init__(self, client: GitHubClient):
        self.client = client

    @property
    def name(self) -> str:
        return "github_get_repository_contents"

    @property
    def description(self) -> str:
        return (
            "Get the raw contents of files and directories from a GitHub repository "
            "for client-side analysis"
        )

    @property
    def parameters(self) -> List[ToolParameter]:
        return _repository_parameters() + [
            ToolParameter(
                name="path",
                type="string",
                description="Path within the repository (empty string or '.' for root)",
                default="",
            ),
            ToolParameter(
                name="recursive",
                type="boolean",
                description="Whether to recursively fetch contents of subdirectories",
                default=False,
            ),
            ToolParameter(
                name="includeContent",
                type="boolean",
                description="Whether to include file contents (for text files only)",
                default=True,
            ),
            ToolParameter(
                name="maxFileSize",
                type="integer",
                description="Maximum file size in bytes to include content for (default 100KB)",
                default=102400,
            ),
        ]

    async def execute(self, arguments: Dict[str, Any]) -> Any:
        owner, repo = _owner_and_repo(arguments)
        path = get_string(arguments, "path", "")

        contents = await get_contents_tree(
            self.client,
            owner,
            repo,
            path=path,
            recursive=get_bool(arguments, "recursive", False),
            include_content=get_bool(arguments, "includeContent", True),
            max_file_size=get_int(arguments, "maxFileSize", 102400),
        )

        return {
            "repository": {"owner": owner, "name": repo, "path": path},
            "contents": contents,
        }


def create_default_registry(client: GitHubClient) -> ToolRegistry:
    """Build the fixed registry of GitHub tools."""
    return ToolRegistry([
        RepositoryAnalyzerTool(client),
        PullRequestReviewerTool(client),
        RepositoryContentsTool(client),
    ])
