"""Downloading repository directories to disk or into a ZIP archive."""

from __future__ import annotations

import os
import posixpath
import threading
import time
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass, field

from gitdig import display
from gitdig.api import Content, GitHubError, download_file_content, get_contents
from gitdig.ziputil import ZipWriter


class DownloadError(Exception):
    """Raised when a download cannot be carried out."""


@dataclass
class Stats:
    """Counters for one downloader, shared between worker threads."""

    files: int = 0
    dirs: int = 0
    failures: int = 0
    bytes: int = 0
    lock: threading.Lock = field(
        default_factory=threading.Lock, repr=False, compare=False
    )


def _base_name(path: str) -> str:
    trimmed = path.rstrip("/")
    if not trimmed:
        return "/" if path else "."
    return trimmed.rsplit("/", 1)[-1]


class Downloader:
    """Fetches the contents of repository directories."""

    def __init__(
        self,
        token: str,
        recursive: bool,
        concurrency: int,
        verbose: bool,
        zip_output: bool,
        preview: bool,
        update: bool,
        retries: int,
    ) -> None:
        if concurrency < 1:
            raise ValueError("concurrency must be at least 1")
        self.token = token
        self.recursive = recursive
        self.concurrency = concurrency
        self.verbose = verbose
        self.zip_output = zip_output
        self.preview = preview
        self.update = update
        self.retries = retries
        self.stats = Stats()
        self._zip: ZipWriter | None = None
        self._pool: ThreadPoolExecutor | None = None
        self._pending: list[Future[None]] = []

    def download_repository(
        self, owner: str, repo: str, branch: str, dir_path: str, local_dir: str
    ) -> None:
        """Download a directory of a repository, or preview it in preview mode."""
        if self.preview:
            display.bold(
                f"PREVIEW MODE: Showing what would be downloaded from {owner}/{repo} "
                f"(branch: {branch}, path: {dir_path})\n"
            )
            display.info(f"Would save to: {local_dir}\n")
            self._preview_directory(owner, repo, branch, dir_path, "")
            display.bold_cyan("\nPreview Summary\n")
            display.info(f"Files: {self.stats.files}\n")
            display.info(f"Directories: {self.stats.dirs}\n")
            return

        if self.zip_output:
            zip_path = local_dir if local_dir.endswith(".zip") else local_dir + ".zip"
            parent = os.path.dirname(zip_path)
            if parent:
                try:
                    os.makedirs(parent, exist_ok=True)
                except OSError as exc:
                    raise DownloadError(
                        f"failed to create directory for zip file: {exc}"
                    ) from exc
            try:
                self._zip = ZipWriter(zip_path, "")
            except OSError as exc:
                raise DownloadError(f"failed to create zip archive: {exc}") from exc
            display.bold(
                f"Downloading from {owner}/{repo} (branch: {branch}, path: {dir_path})\n"
            )
            display.info(f"Saving to zip archive: {zip_path}\n")
        else:
            try:
                os.makedirs(local_dir, exist_ok=True)
            except OSError as exc:
                raise DownloadError(
                    f"failed to create output directory: {exc}"
                ) from exc
            display.bold(
                f"Downloading from {owner}/{repo} (branch: {branch}, path: {dir_path})\n"
            )
            display.info(f"Saving to: {local_dir}\n")

        start = time.monotonic()
        try:
            with ThreadPoolExecutor(max_workers=self.concurrency) as pool:
                self._pool = pool
                self._pending = []
                self._download_directory(owner, repo, branch, dir_path, local_dir)
                for future in self._pending:
                    future.result()
        finally:
            self._pool = None
            self._pending = []
            if self._zip is not None:
                self._zip.close()
                self._zip = None

        elapsed = time.monotonic() - start
        display.bold_cyan("\nDownload Summary\n")
        display.info(f"Time: {elapsed:.1f} seconds\n")
        display.info(f"Files: {self.stats.files}\n")
        display.info(f"Directories: {self.stats.dirs}\n")
        display.info(f"Size: {self.stats.bytes / (1024 * 1024):.2f} MB\n")

        if self.stats.failures > 0:
            display.warning(f"Failures: {self.stats.failures}\n")
            raise DownloadError(f"{self.stats.failures} files failed to download")
        display.success("All files downloaded successfully!\n")

    @staticmethod
    def _api_url(owner: str, repo: str, branch: str, dir_path: str) -> str:
        return (
            f"https://api.github.com/repos/{owner}/{repo}/contents/{dir_path}"
            f"?ref={branch}"
        )

    def _list(self, owner: str, repo: str, branch: str, dir_path: str) -> list[Content]:
        try:
            return get_contents(self._api_url(owner, repo, branch, dir_path), self.token)
        except GitHubError as exc:
            raise DownloadError(f"failed to get directory contents: {exc}") from exc

    def _preview_directory(
        self, owner: str, repo: str, branch: str, dir_path: str, prefix: str
    ) -> None:
        with self.stats.lock:
            self.stats.dirs += 1

        display.info(f"{prefix}└── {_base_name(dir_path)}/\n")
        new_prefix = prefix + "    "

        contents = self._list(owner, repo, branch, dir_path)
        last = len(contents) - 1
        for index, content in enumerate(contents):
            is_last = index == last
            if content.type == "file":
                with self.stats.lock:
                    self.stats.files += 1
                branch_mark = "└──" if is_last else "├──"
                display.info(f"{new_prefix}{branch_mark} {content.name}\n")
            elif content.type == "dir" and self.recursive:
                sub_prefix = new_prefix if is_last else new_prefix + "│   "
                self._preview_directory(
                    owner,
                    repo,
                    branch,
                    posixpath.join(dir_path, content.name),
                    sub_prefix,
                )

    def _download_directory(
        self, owner: str, repo: str, branch: str, dir_path: str, local_dir: str
    ) -> None:
        with self.stats.lock:
            self.stats.dirs += 1

        if self.zip_output and dir_path and self._zip is not None:
            try:
                self._zip.create_dir_entry(dir_path)
            except (OSError, ValueError) as exc:
                if self.verbose:
                    display.warning(
                        f"Warning: Could not create zip directory entry: {exc}\n"
                    )

        contents = self._list(owner, repo, branch, dir_path)
        assert self._pool is not None
        for content in contents:
            if content.type == "file":
                self._pending.append(
                    self._pool.submit(self._fetch_file, content, local_dir)
                )
            elif content.type == "dir" and self.recursive:
                sub_dir = os.path.join(local_dir, content.name)
                if not self.zip_output:
                    try:
                        os.makedirs(sub_dir, exist_ok=True)
                    except OSError as exc:
                        display.error(
                            f"Error creating subdirectory {sub_dir}: {exc}\n"
                        )
                        with self.stats.lock:
                            self.stats.failures += 1
                        continue
                sub_path = posixpath.join(dir_path, content.name)
                try:
                    self._download_directory(owner, repo, branch, sub_path, sub_dir)
                except DownloadError as exc:
                    display.warning(
                        f"Warning: Error in subdirectory {content.path}: {exc}\n"
                    )

    def _fetch_file(self, content: Content, local_dir: str) -> None:
        file_path = os.path.join(local_dir, content.name)

        if self.update and not self.zip_output:
            try:
                local_size = os.stat(file_path).st_size
            except OSError:
                local_size = None
            if local_size is not None and not self.should_update(content, local_size):
                if self.verbose:
                    display.info(f"Skipped (up-to-date): {content.path}\n")
                return

        size = 0
        failure: Exception | None = None
        max_attempts = self.retries + 1
        for attempt in range(1, max_attempts + 1):
            if attempt > 1 and self.verbose:
                display.warning(f"Retry {attempt - 1}/{self.retries}: {content.path}\n")
            try:
                if self.zip_output:
                    size = self._download_file_to_zip(content.download_url, content.path)
                else:
                    size = self._download_file(content.download_url, file_path)
                failure = None
                break
            except (GitHubError, DownloadError, OSError, ValueError) as exc:
                failure = exc
                if attempt < max_attempts:
                    time.sleep((1 << (attempt - 1)) * 0.1)

        with self.stats.lock:
            if failure is not None:
                display.error(f"Failed: {content.path} ({failure})\n")
                self.stats.failures += 1
            else:
                if self.verbose:
                    display.success(
                        f"Downloaded: {content.path} ({size / 1024:.2f} KB)\n"
                    )
                self.stats.files += 1
                self.stats.bytes += size

    def should_update(self, content: Content, local_size: int) -> bool:
        """Tell whether a local file of local_size bytes needs downloading again."""
        return local_size == 0 or content.size != local_size

    def _download_file_to_zip(self, url: str, zip_path: str) -> int:
        data = download_file_content(url, self.token)
        assert self._zip is not None
        self._zip.add_file(data, zip_path)
        return len(data)

    def _download_file(self, url: str, file_path: str) -> int:
        data = download_file_content(url, self.token)
        try:
            with open(file_path, "wb") as out:
                return out.write(data)
        except OSError as exc:
            raise DownloadError(f"failed to write file: {exc}") from exc