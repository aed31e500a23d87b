"""
GitHub REST API client.

A small async wrapper over the endpoints the tools need. Responses are
returned as decoded JSON; failures are raised as GitHubError.
"""

import logging
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx


logger = logging.getLogger(__name__)

DEFAULT_API_URL = "https://api.github.com"
USER_AGENT = "github-mcp-server"
PAGE_SIZE = 100


class GitHubError(Exception):
    """A GitHub API call failed."""

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.status_code = status_code


class GitHubClient:
    """
    Async GitHub client.

    Usage::

        async with GitHubClient(token) as client:
            repo = await client.get_repository("octocat", "hello-world")
    """

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_API_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self._base_url = base_url.rstrip("/")
        self._headers = {
            "Accept": "application/vnd.github+json",
            "Authorization": f"Bearer {token}",
            "User-Agent": USER_AGENT,
            "X-GitHub-Api-Version": "2022-11-28",
        }
        self._timeout = timeout
        self._transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "GitHubClient":
        self._client = httpx.AsyncClient(
            base_url=self._base_url,
            headers=self._headers,
            timeout=self._timeout,
            transport=self._transport,
        )
        return self

    async def __aexit__(self, *_: object) -> None:
        await self.close()

    async def close(self) -> None:
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    def _http(self) -> httpx.AsyncClient:
        if self._client is None:
            raise RuntimeError("GitHubClient must be used as an async context manager")
        return self._client

    async def _request(
        self,
        url: str,
        params: Optional[Dict[str, Any]] = None,
        headers: Optional[Dict[str, str]] = None,
    ) -> httpx.Response:
        logger.debug(f"GET {url}")
        try:
            response = await self._http().get(url, params=params, headers=headers)
        except httpx.HTTPError as e:
            raise GitHubError(f"Request to {url} failed: {e}") from e

        if response.is_error:
            raise GitHubError(_error_message(response), response.status_code)
        return response

    async def _get_json(self, url: str, params: Optional[Dict[str, Any]] = None) -> Any:
        response = await self._request(url, params=params)
        return response.json()

    async def _get_paginated(self, url: str) -> List[Any]:
        """Collect every page of a list endpoint by following Link: rel=next."""
        items: List[Any] = []
        next_url: Optional[str] = url
        params: Optional[Dict[str, Any]] = {"per_page": PAGE_SIZE}

        while next_url:
            response = await self._request(next_url, params=params)
            items.extend(response.json())
            next_url = response.links.get("next", {}).get("url")
            # the next link already carries the query string
            params = None

        return items

    async def get_repository(self, owner: str, repo: str) -> Dict[str, Any]:
        return await self._get_json(_repo_path(owner, repo))

    async def get_languages(self, owner: str, repo: str) -> Dict[str, int]:
        """Bytes of code per language."""
        return await self._get_json(f"{_repo_path(owner, repo)}/languages")

    async def get_contents(self, owner: str, repo: str, path: str = "") -> List[Dict[str, Any]]:
        """List the entries at path. A file path yields a single entry."""
        url = f"{_repo_path(owner, repo)}/contents"
        path = path.strip("/")
        if path:
            url = f"{url}/{quote(path, safe='/')}"

        data = await self._get_json(url)
        if isinstance(data, dict):
            return [data]
        return data

    async def get_raw_content(self, owner: str, repo: str, path: str) -> bytes:
        response = await self._request(
            f"{_repo_path(owner, repo)}/contents/{quote(path.strip('/'), safe='/')}",
            headers={"Accept": "application/vnd.github.raw"},
        )
        return response.content

    async def get_pull_request(self, owner: str, repo: str, number: int) -> Dict[str, Any]:
        return await self._get_json(f"{_repo_path(owner, repo)}/pulls/{number}")

    async def list_pull_request_files(self, owner: str, repo: str, number: int) -> List[Dict[str, Any]]:
        return await self._get_paginated(f"{_repo_path(owner, repo)}/pulls/{number}/files")

    async def list_pull_request_commits(self, owner: str, repo: str, number: int) -> List[Dict[str, Any]]:
        return await self._get_paginated(f"{_repo_path(owner, repo)}/pulls/{number}/commits")

    async def list_review_comments(self, owner: str, repo: str, number: int) -> List[Dict[str, Any]]:
        return await self._get_paginated(f"{_repo_path(owner, repo)}/pulls/{number}/comments")


def _repo_path(owner: str, repo: str) -> str:
    return f"/repos/{quote(owner, safe='')}/{quote(repo, safe='')}"


def _error_message(response: httpx.Response) -> str:
    detail = response.reason_phrase
    try:
        body = response.json()
    except ValueError:
        body = None
    if isinstance(body, dict) and body.get("message"):
        detail = body["message"]
    return f"GitHub API returned {response.status_code}: {detail}"
