"""
Repository content traversal.

Walks a repository directory depth-first through the GitHub contents API,
attaching file text where the file is small enough and looks like text.
"""

import logging
from typing import Any, Dict, List

from .github import GitHubClient


logger = logging.getLogger(__name__)

BINARY_PLACEHOLDER = "[Binary file - content not included]"
UNREADABLE_PLACEHOLDER = "[Could not retrieve file content]"

TEXT_EXTENSIONS = frozenset(ext.lower() for ext in (
    ".txt", ".md", ".markdown", ".json", ".xml", ".yml", ".yaml", ".toml",
    ".cs", ".js", ".ts", ".py", ".java", ".cpp", ".c", ".h", ".hpp",
    ".rb", ".php", ".go", ".rs", ".swift", ".kt", ".scala", ".clj",
    ".html", ".htm", ".css", ".scss", ".sass", ".less", ".vue", ".jsx", ".tsx",
    ".sql", ".sh", ".bat", ".ps1", ".cmd", ".dockerfile", ".gitignore",
    ".gitattributes", ".editorconfig", ".env", ".ini", ".cfg", ".conf",
    ".log", ".csv", ".tsv", ".r", ".m", ".pl", ".lua", ".vim",
))

TEXT_FILENAMES = frozenset(name.lower() for name in (
    "README", "LICENSE", "CHANGELOG", "CONTRIBUTING", "AUTHORS", "COPYING",
    "INSTALL", "NEWS", "TODO", "MANIFEST", "Makefile", "Dockerfile",
    "Jenkinsfile", "Vagrantfile", "Gemfile", "Rakefile", "Procfile",
))


def too_large_placeholder(size: int) -> str:
    return f"[File too large ({size} bytes) - content not included]"


def _split_extension(filename: str):
    # ".gitignore" is its own extension
    stem, dot, ext = filename.rpartition(".")
    if not dot:
        return filename, ""
    return stem, dot + ext


def is_likely_text_file(filename: str) -> bool:
    """Guess from the name alone whether a file holds text."""
    stem, extension = _split_extension(filename)
    if extension.lower() in TEXT_EXTENSIONS:
        return True
    return filename.lower() in TEXT_FILENAMES or stem.lower() in TEXT_FILENAMES


def looks_like_text(content: str) -> bool:
    """
    Printable-character check on decoded content.

    Content is binary when more than 1% of characters are NUL or more than
    5% are control characters other than CR, LF and TAB.
    """
    if not content:
        return True

    null_count = 0
    control_count = 0
    for char in content:
        if char == "\0":
            null_count += 1
        if char < " " and char not in "\r\n\t":
            control_count += 1

    length = len(content)
    return null_count <= length * 0.01 and control_count <= length * 0.05


class ContentWalker:
    """Depth-first walk of a repository path."""

    def __init__(
        self,
        client: GitHubClient,
        owner: str,
        repo: str,
        recursive: bool = False,
        include_content: bool = True,
        max_file_size: int = 102400,
    ):
        self.client = client
        self.owner = owner
        self.repo = repo
        self.recursive = recursive
        self.include_content = include_content
        self.max_file_size = max_file_size

    async def walk(self, path: str = "") -> List[Dict[str, Any]]:
        """
        Describe the entries under path.

        A failure listing path itself is reported as a single node holding
        the error and the path.
        """
        try:
            return await self._walk(path)
        except Exception as e:
            logger.warning(f"Could not access path '{path}': {e}")
            return [{"error": f"Could not access path '{path}': {e}", "path": path}]

    async def _walk(self, path: str) -> List[Dict[str, Any]]:
        listing_path = "" if path in ("", ".") else path
        entries = await self.client.get_contents(self.owner, self.repo, listing_path)

        nodes = []
        for entry in entries:
            node = self._describe(entry)
            nodes.append(node)

            if node["type"] == "file" and self.include_content:
                node["content"] = await self._file_content(entry)

            if node["type"] == "dir" and self.recursive:
                try:
                    node["children"] = await self._walk(node["path"])
                except Exception as e:
                    logger.warning(f"Could not access directory '{node['path']}': {e}")
                    node["children"] = []
                    node["error"] = f"Could not access directory: {e}"

        return nodes

    @staticmethod
    def _describe(entry: Dict[str, Any]) -> Dict[str, Any]:
        return {
            "name": entry.get("name", ""),
            "path": entry.get("path", ""),
            "type": str(entry.get("type", "")).lower(),
            "size": entry.get("size", 0),
            "sha": entry.get("sha", ""),
            "url": entry.get("html_url"),
            "downloadUrl": entry.get("download_url") or "",
        }

    async def _file_content(self, entry: Dict[str, Any]) -> str:
        size = entry.get("size") or 0
        if size > self.max_file_size:
            return too_large_placeholder(size)
        if not is_likely_text_file(entry.get("name", "")):
            return BINARY_PLACEHOLDER

        try:
            raw = await self.client.get_raw_content(self.owner, self.repo, entry["path"])
        except Exception as e:
            logger.debug(f"Could not fetch {entry.get('path')}: {e}")
            return UNREADABLE_PLACEHOLDER

        text = raw.decode("utf-8", errors="replace")
        if not looks_like_text(text):
            return BINARY_PLACEHOLDER
        return text


async def get_contents_tree(
    client: GitHubClient,
    owner: str,
    repo: str,
    path: str = "",
    recursive: bool = False,
    include_content: bool = True,
    max_file_size: int = 102400,
) -> List[Dict[str, Any]]:
    """Walk path in owner/repo and return the node descriptors."""
    walker = ContentWalker(
        client,
        owner,
        repo,
        recursive=recursive,
        include_content=include_content,
        max_file_size=max_file_size,
    )
    return await walker.walk(path)
