"""Application identity and command-line settings."""

from __future__ import annotations

from dataclasses import dataclass

APP_NAME = "gitdig"
APP_VERSION = "1.1.0"


@dataclass
class AppFlags:
    """Settings collected from the command line."""

    url: str = ""
    token: str = ""
    output: str = ""
    recursive: bool = True
    concurrency: int = 5
    verbose: bool = False
    zip_output: bool = False
    preview: bool = False
    update: bool = False
    list_file: str = ""
    retries: int = 3
    user: str = ""
    interactive: bool = False