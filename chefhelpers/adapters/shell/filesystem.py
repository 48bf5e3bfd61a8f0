"""
Local filesystem: UTF-8 text file operations on the real disk.
"""

from __future__ import annotations

import logging
from pathlib import Path

from chefhelpers.adapters.base import Filesystem

logger = logging.getLogger(__name__)


class LocalFilesystem(Filesystem):
    """Read, write and create paths on the local disk.

    Content is written byte-for-byte as given: no newline translation,
    so generated files keep the line endings the helper chose.
    """

    def read_text(self, path: str) -> str:
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()

    def write_text(self, path: str, content: str) -> None:
        with open(path, "w", encoding="utf-8", newline="") as f:
            f.write(content)
        logger.debug("Written %d bytes to %s", len(content), path)

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def make_dir(self, path: str) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)
        logger.debug("Directory ensured: %s", path)
