"""Command-line entry point: choose repositories and download them."""

from __future__ import annotations

import json
import os
import re
import sys
from dataclasses import dataclass
from typing import Sequence

from gitdig import display
from gitdig.api import GitHubError
from gitdig.config import APP_NAME, APP_VERSION, AppFlags
from gitdig.downloader import DownloadError, Downloader
from gitdig.repolist import (
    Repository,
    get_repositories_for_org,
    get_repositories_for_user,
    parse_targets,
    read_targets_from_file,
)

_DESCRIPTION_LIMIT = 60
_SELECTION_PATTERN = re.compile(r"[+-]?[0-9]+")
_OCTAL_PATTERN = re.compile(r"[+-]?0[0-7]+")
_TRUE_WORDS = {"1", "t", "T", "TRUE", "true", "True"}
_FALSE_WORDS = {"0", "f", "F", "FALSE", "false", "False"}


@dataclass(frozen=True)
class _Flag:
    name: str
    attr: str
    kind: type
    usage: str


_FLAGS = (
    _Flag("u", "url", str, "GitHub repository URL or path (can be specified multiple times)"),
    _Flag("token", "token", str, "GitHub API token for authentication"),
    _Flag("o", "output", str, "Output directory"),
    _Flag("r", "recursive", bool, "Download directories recursively"),
    _Flag("c", "concurrency", int, "Number of concurrent downloads"),
    _Flag("v", "verbose", bool, "Verbose output"),
    _Flag("zip", "zip_output", bool, "Create ZIP archive instead of extracting files"),
    _Flag("preview", "preview", bool, "Preview what would be downloaded without downloading"),
    _Flag("update", "update", bool, "Only download new or changed files"),
    _Flag("list", "list_file", str, "File containing list of repositories to download"),
    _Flag("retries", "retries", int, "Number of retries for failed downloads"),
    _Flag("user", "user", str, "GitHub username or organization for interactive repository selection"),
    _Flag("i", "interactive", bool, "Interactive mode for selecting repositories"),
)
_FLAGS_BY_NAME = {flag.name: flag for flag in _FLAGS}


class _FlagError(Exception):
    """A command-line flag could not be parsed."""


class _HelpRequested(Exception):
    """The user asked for the usage text."""


def _parse_bool(value: str, name: str) -> bool:
    if value in _TRUE_WORDS:
        return True
    if value in _FALSE_WORDS:
        return False
    raise _FlagError(f"invalid boolean value {json.dumps(value)} for -{name}: parse error")


def _parse_int(value: str, name: str) -> int:
    try:
        return int(value, 0)
    except ValueError:
        if _OCTAL_PATTERN.fullmatch(value):
            return int(value, 8)
    raise _FlagError(f"invalid value {json.dumps(value)} for flag -{name}: parse error")


def _parse_flags(args: Sequence[str]) -> tuple[AppFlags, list[str]]:
    """Parse single- or double-dash flags; stop at the first non-flag argument."""
    flags = AppFlags()
    remaining = list(args)
    while remaining:
        arg = remaining[0]
        if len(arg) < 2 or not arg.startswith("-"):
            break
        dashes = 1
        if arg[1] == "-":
            dashes = 2
            if len(arg) == 2:
                remaining.pop(0)
                break
        name = arg[dashes:]
        if not name or name[0] in "-=":
            raise _FlagError(f"bad flag syntax: {arg}")
        remaining.pop(0)

        has_value = "=" in name
        value = ""
        if has_value:
            name, value = name.split("=", 1)

        flag = _FLAGS_BY_NAME.get(name)
        if flag is None:
            if name in ("help", "h"):
                raise _HelpRequested()
            raise _FlagError(f"flag provided but not defined: -{name}")

        if flag.kind is bool:
            setattr(flags, flag.attr, _parse_bool(value, name) if has_value else True)
            continue

        if not has_value:
            if not remaining:
                raise _FlagError(f"flag needs an argument: -{name}")
            value = remaining.pop(0)
        if flag.kind is int:
            setattr(flags, flag.attr, _parse_int(value, name))
        else:
            setattr(flags, flag.attr, value)
    return flags, remaining


def _format_defaults() -> str:
    defaults = AppFlags()
    type_names = {str: "string", int: "int", bool: ""}
    lines = []
    for flag in sorted(_FLAGS, key=lambda item: item.name):
        line = f"  -{flag.name}"
        if type_names[flag.kind]:
            line += " " + type_names[flag.kind]
        line += "\t" if len(line) <= 4 else "\n    \t"
        line += flag.usage.replace("\n", "\n    \t")
        default = getattr(defaults, flag.attr)
        if default:
            if flag.kind is str:
                line += f" (default {json.dumps(default)})"
            elif flag.kind is bool:
                line += " (default true)"
            else:
                line += f" (default {default})"
        lines.append(line + "\n")
    return "".join(lines)


def _print_usage() -> None:
    sys.stderr.write(f"Usage of {APP_NAME}:\n")
    sys.stderr.write(_format_defaults())


def _short_description(repo: Repository) -> str:
    desc = repo.description
    if len(desc) > _DESCRIPTION_LIMIT:
        desc = desc[:57] + "..."
    return desc or "(No description)"


def browse_repositories(user: str, token: str) -> str:
    """List a user's or organisation's repositories and return the chosen full name."""
    display.bold(f"Fetching repositories for {user}...\n")

    try:
        repos = get_repositories_for_org(user, token)
    except GitHubError:
        display.info("Trying as user...\n")
        try:
            repos = get_repositories_for_user(user, token)
        except GitHubError as exc:
            raise GitHubError(f"failed to get repositories: {exc}") from exc

    if not repos:
        raise GitHubError(f"no repositories found for {user}")

    display.bold_cyan(f"\nRepositories for {user}:\n")
    for number, repo in enumerate(repos, 1):
        display.info(f"[{number}] {repo.name} - {_short_description(repo)}\n")

    selection = prompt_for_selection(len(repos))
    if not 1 <= selection <= len(repos):
        raise GitHubError("invalid selection")

    chosen = repos[selection - 1]
    display.success(f"Selected: {chosen.full_name}\n")
    return chosen.full_name


def prompt_for_selection(maximum: int) -> int:
    """Ask until a number from 1 to maximum is entered.

    Raises EOFError when standard input runs out.
    """
    while True:
        display.bold(f"\nEnter repository number (1-{maximum}): ")
        line = sys.stdin.readline()
        if line == "":
            raise EOFError("no selection entered")
        text = line.strip()
        if _SELECTION_PATTERN.fullmatch(text):
            number = int(text)
            if 1 <= number <= maximum:
                return number
        display.error(
            f"Invalid selection. Please enter a number between 1 and {maximum}.\n"
        )


def _read_word() -> str:
    words = sys.stdin.readline().split()
    return words[0] if words else ""


def main(argv: Sequence[str] | None = None) -> int:
    """Run the downloader with the given arguments and return an exit status."""
    args = sys.argv[1:] if argv is None else list(argv)
    try:
        flags, extra_args = _parse_flags(args)
    except _HelpRequested:
        _print_usage()
        return 0
    except _FlagError as exc:
        sys.stderr.write(f"{exc}\n")
        _print_usage()
        return 2

    display.bold_cyan(f"\n{APP_NAME} v{APP_VERSION} - GitHub Repository Downloader\n\n")

    if not flags.token:
        flags.token = os.environ.get("GITHUB_TOKEN", "")

    targets = list(extra_args)
    if flags.url:
        targets.append(flags.url)

    if flags.list_file:
        try:
            targets.extend(read_targets_from_file(flags.list_file))
        except GitHubError as exc:
            display.error(f"Error: {exc}\n")
            return 1

    if flags.user or flags.interactive:
        user = flags.user
        if not user:
            display.bold("Enter GitHub username or organization: ")
            user = _read_word()
        try:
            targets.append(browse_repositories(user, flags.token))
        except (GitHubError, EOFError) as exc:
            display.error(f"Error: {exc}\n")
            return 1

    if not targets:
        display.error(
            "Error: No target specified. Use -u, -list, -user flags or provide a path argument.\n"
        )
        print("Usage:")
        sys.stdout.flush()
        sys.stderr.write(_format_defaults())
        return 1

    try:
        downloader = Downloader(
            flags.token,
            flags.recursive,
            flags.concurrency,
            flags.verbose,
            flags.zip_output,
            flags.preview,
            flags.update,
            flags.retries,
        )
    except ValueError as exc:
        display.error(f"Error: {exc}\n")
        return 1

    try:
        download_targets = parse_targets(targets, flags.output)
    except GitHubError as exc:
        display.error(f"Error: {exc}\n")
        return 1

    total = len(download_targets)
    for index, target in enumerate(download_targets, 1):
        if index > 1 and not flags.preview:
            display.bold_cyan(f"\nProcessing next target ({index}/{total})...\n")

        local_dir = target.local_dir
        if flags.zip_output and not local_dir.endswith(".zip"):
            local_dir += ".zip"

        try:
            downloader.download_repository(
                target.owner, target.repo, target.branch, target.dir_path, local_dir
            )
        except (DownloadError, GitHubError) as exc:
            display.error(f"Error: {exc}\n")
            if index < total:
                display.warning("Continuing to next target...\n")

    display.bold_cyan("\nAll operations completed.\n")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())