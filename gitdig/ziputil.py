"""Writing downloaded files into a ZIP archive."""

from __future__ import annotations

import threading
import zipfile
from os import PathLike
from types import TracebackType


class ZipWriter:
    """A ZIP archive that files and directory entries can be added to.

    Entries may be added from several threads at once.
    """

    def __init__(self, output_path: str | PathLike[str], base_dir: str = "") -> None:
        self._archive = zipfile.ZipFile(output_path, "w")
        self._base_dir = base_dir
        self._lock = threading.Lock()

    def _relative(self, path: str) -> str:
        return path.removeprefix(self._base_dir).removeprefix("/")

    def add_file(self, data: bytes, file_path: str) -> None:
        """Add a deflated file entry holding data."""
        info = zipfile.ZipInfo(self._relative(file_path))
        info.compress_type = zipfile.ZIP_DEFLATED
        with self._lock:
            self._archive.writestr(info, data)

    def create_dir_entry(self, dir_path: str) -> None:
        """Add a stored directory entry, its name ending in a slash."""
        name = self._relative(dir_path)
        if not name.endswith("/"):
            name += "/"
        info = zipfile.ZipInfo(name)
        info.compress_type = zipfile.ZIP_STORED
        with self._lock:
            self._archive.writestr(info, b"")

    def close(self) -> None:
        """Finish the archive and close its file."""
        with self._lock:
            self._archive.close()

    def __enter__(self) -> ZipWriter:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()