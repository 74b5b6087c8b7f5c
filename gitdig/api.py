"""Access to the GitHub contents API and parsing of repository paths."""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from typing import Any, Mapping
from urllib.parse import urlsplit

import requests

from gitdig import display
from gitdig.config import APP_NAME, APP_VERSION

API_TIMEOUT = 30.0
DEFAULT_BRANCH = "master"
RATE_LIMIT_MESSAGE = (
    "GitHub API rate limit exceeded. Try using authentication with --token"
)


class GitHubError(Exception):
    """Raised when a GitHub request or a repository path cannot be handled."""


@dataclass(frozen=True)
class Content:
    """One entry of a repository directory listing."""

    name: str
    path: str
    type: str
    download_url: str = ""
    size: int = 0
    sha: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Content:
        """Build an entry from a decoded API object."""
        return cls(
            name=data.get("name") or "",
            path=data.get("path") or "",
            type=data.get("type") or "",
            download_url=data.get("download_url") or "",
            size=int(data.get("size") or 0),
            sha=data.get("sha") or "",
        )


@dataclass(frozen=True)
class RepoPath:
    """A repository location: owner, name, branch and a path inside it."""

    owner: str
    repo: str
    branch: str = DEFAULT_BRANCH
    dir_path: str = ""


def _headers(token: str) -> dict[str, str]:
    headers = {"User-Agent": f"{APP_NAME}/{APP_VERSION}"}
    if token:
        headers["Authorization"] = "token " + token
    return headers


def _get(url: str, token: str, what: str = "request") -> requests.Response:
    try:
        return requests.get(url, headers=_headers(token), timeout=API_TIMEOUT)
    except requests.RequestException as exc:
        raise GitHubError(f"failed to execute {what}: {exc}") from exc


def _status(response: requests.Response) -> str:
    return f"{response.status_code} {response.reason or ''}".strip()


def _rate_limit_wait(reset_header: str) -> float | None:
    if not reset_header:
        return None
    try:
        reset = float(reset_header)
    except ValueError:
        return None
    if not math.isfinite(reset):
        return None
    return max(0.0, reset - time.time())


def get_contents(api_url: str, token: str) -> list[Content]:
    """Fetch a directory listing, waiting out rate limits when told when they end."""
    while True:
        response = _get(api_url, token)
        with response:
            if response.status_code in (403, 429):
                wait = _rate_limit_wait(response.headers.get("X-RateLimit-Reset", ""))
                if wait is None:
                    raise GitHubError(RATE_LIMIT_MESSAGE)
                display.yellow(
                    f"Rate limit exceeded. Reset in {wait / 60:.0f} minutes. Waiting...\n"
                )
                time.sleep(wait)
                continue

            if response.status_code != 200:
                raise GitHubError(
                    f"GitHub API error: {_status(response)} - {response.text}"
                )

            try:
                payload = response.json()
            except ValueError as exc:
                raise GitHubError(f"failed to decode response: {exc}") from exc

        if not isinstance(payload, list) or not all(
            isinstance(item, dict) for item in payload
        ):
            raise GitHubError("failed to decode response: expected a list of entries")
        try:
            return [Content.from_json(item) for item in payload]
        except (TypeError, ValueError) as exc:
            raise GitHubError(f"failed to decode response: {exc}") from exc


def parse_path(path: str) -> RepoPath:
    """Parse "owner/repo[/tree/branch][/dir]" or a github.com URL."""
    if path.startswith(("http://", "https://")):
        return _parse_url(path)

    parts = path.strip("/").split("/")
    if len(parts) < 2:
        raise GitHubError("invalid GitHub path format, must be at least owner/repo")

    owner, repo = parts[0], parts[1]
    branch = DEFAULT_BRANCH
    dir_path = ""
    if len(parts) >= 4 and parts[2] == "tree":
        branch = parts[3]
        dir_path = "/".join(parts[4:])
    elif len(parts) > 2:
        dir_path = "/".join(parts[2:])
    return RepoPath(owner, repo, branch, dir_path)


def _parse_url(raw_url: str) -> RepoPath:
    try:
        parsed = urlsplit(raw_url)
    except ValueError as exc:
        raise GitHubError(f"invalid URL: {exc}") from exc

    host = parsed.netloc.rpartition("@")[2]
    if host != "github.com":
        raise GitHubError("not a GitHub URL")

    parts = parsed.path.strip("/").split("/")
    if len(parts) < 2:
        raise GitHubError("invalid GitHub URL format")

    owner, repo = parts[0], parts[1]
    branch = DEFAULT_BRANCH
    dir_path = ""
    if len(parts) >= 4 and parts[2] in ("tree", "blob"):
        branch = parts[3]
        dir_path = "/".join(parts[4:])
    return RepoPath(owner, repo, branch, dir_path)


def download_file_content(url: str, token: str) -> bytes:
    """Download a file's raw bytes."""
    response = _get(url, token, "download request")
    with response:
        if response.status_code != 200:
            raise GitHubError(f"HTTP error: {_status(response)}")
        try:
            return response.content
        except requests.RequestException as exc:
            raise GitHubError(f"failed to read response body: {exc}") from exc