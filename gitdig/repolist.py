"""Repository listings for users and organisations, and download targets."""

from __future__ import annotations

from dataclasses import dataclass
from os import PathLike
from typing import Any, Iterable, Mapping

from gitdig.api import GitHubError, _get, _status, parse_path


@dataclass(frozen=True)
class Repository:
    """A repository as listed by the GitHub API."""

    name: str
    full_name: str
    description: str = ""
    clone_url: str = ""
    html_url: str = ""

    @classmethod
    def from_json(cls, data: Mapping[str, Any]) -> Repository:
        """Build a repository from a decoded API object."""
        return cls(
            name=data.get("name") or "",
            full_name=data.get("full_name") or "",
            description=data.get("description") or "",
            clone_url=data.get("clone_url") or "",
            html_url=data.get("html_url") or "",
        )


@dataclass(frozen=True)
class DownloadTarget:
    """What to download and where to put it."""

    owner: str
    repo: str
    branch: str
    dir_path: str
    local_dir: str


def get_repositories_for_user(user: str, token: str) -> list[Repository]:
    """List the repositories of a user."""
    return _get_repositories(f"https://api.github.com/users/{user}/repos", token)


def get_repositories_for_org(org: str, token: str) -> list[Repository]:
    """List the repositories of an organisation."""
    return _get_repositories(f"https://api.github.com/orgs/{org}/repos", token)


def _get_repositories(api_url: str, token: str) -> list[Repository]:
    response = _get(api_url, token)
    with response:
        if response.status_code != 200:
            raise GitHubError(f"API error: {_status(response)}")
        try:
            payload = response.json()
        except ValueError as exc:
            raise GitHubError(f"failed to decode response: {exc}") from exc

    if payload is None:
        return []
    if not isinstance(payload, list) or not all(
        isinstance(item, dict) for item in payload
    ):
        raise GitHubError("failed to decode response: expected a list of repositories")
    return [Repository.from_json(item) for item in payload]


def read_targets_from_file(file_path: str | PathLike[str]) -> list[str]:
    """Read repository paths from a file, one per line.

    Blank lines and lines starting with "#" are skipped.
    """
    try:
        handle = open(file_path, encoding="utf-8", errors="replace")
    except OSError as exc:
        raise GitHubError(f"failed to open list file: {exc}") from exc

    with handle:
        try:
            lines = [line.strip() for line in handle]
        except OSError as exc:
            raise GitHubError(f"error reading list file: {exc}") from exc

    return [line for line in lines if line and not line.startswith("#")]


def _target_dir_name(repo: str, dir_path: str) -> str:
    if dir_path:
        return f"{repo}-{dir_path.replace('/', '-')}"
    return repo


def parse_targets(paths: Iterable[str], base_dir: str) -> list[DownloadTarget]:
    """Turn repository paths into download targets with local directories."""
    paths = list(paths)
    targets = []
    for path in paths:
        try:
            location = parse_path(path)
        except GitHubError as exc:
            raise GitHubError(f"invalid path '{path}': {exc}") from exc

        if not base_dir:
            local_dir = _target_dir_name(location.repo, location.dir_path)
        elif len(paths) > 1:
            local_dir = f"{base_dir}/{_target_dir_name(location.repo, location.dir_path)}"
        else:
            local_dir = base_dir

        targets.append(
            DownloadTarget(
                owner=location.owner,
                repo=location.repo,
                branch=location.branch,
                dir_path=location.dir_path,
                local_dir=local_dir,
            )
        )
    return targets