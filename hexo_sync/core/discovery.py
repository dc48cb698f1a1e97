"""Tree scanning for files eligible for mirroring."""

import logging
import re
from pathlib import Path
from typing import Callable, List

from hexo_sync.core.models import FileKind, PathNotFound, TrackedFile, TreeAccessError

logger = logging.getLogger(__name__)

MARKDOWN_SUFFIX = ".md"

IMAGE_PATTERN = re.compile(r'\.(jpg|jpeg|png|gif|svg|webp)$', re.IGNORECASE)


def is_markdown(name: str) -> bool:
    """Check whether a file name is a Markdown document (case-sensitive)."""
    return name.endswith(MARKDOWN_SUFFIX)


def is_image(name: str) -> bool:
    """Check whether a file name has one of the image extensions."""
    return IMAGE_PATTERN.search(name) is not None


class TreeScanner:
    """Recursively collects files of one kind under a root directory.

    Entries are visited in the order the filesystem yields them. Nothing is
    sorted, so callers must not rely on the order of files sharing a basename.
    """

    def __init__(self, root: Path, kind: FileKind, role: str = "Source directory"):
        """Initialize TreeScanner.

        Args:
            root: Directory to scan
            kind: Which kind of file to collect
            role: Human-readable name of the root, used in error messages
        """
        self.root = Path(root)
        self.kind = kind
        self.role = role
        self._matches: Callable[[str], bool] = (
            is_markdown if kind == FileKind.MARKDOWN else is_image
        )

    def scan(self) -> List[TrackedFile]:
        """Find every matching file under the root.

        Returns:
            List of TrackedFile in filesystem order

        Raises:
            PathNotFound: If the root does not exist or is not a directory
            TreeAccessError: If a directory or file under the root can't be read
        """
        if not self.root.exists():
            raise PathNotFound(self.root, self.role)
        if not self.root.is_dir():
            raise PathNotFound(self.root, self.role, "is not a directory")

        files: List[TrackedFile] = []
        self._walk(self.root, files)
        logger.debug("Found %d %s files under %s", len(files), self.kind.value, self.root)
        return files

    def _walk(self, directory: Path, files: List[TrackedFile]) -> None:
        try:
            entries = list(directory.iterdir())
        except OSError as e:
            raise TreeAccessError(directory, "read", str(e)) from e

        for entry in entries:
            if entry.is_dir():
                self._walk(entry, files)
            elif self._matches(entry.name):
                try:
                    files.append(TrackedFile.from_path(entry, self.root, self.kind))
                except OSError as e:
                    raise TreeAccessError(entry, "read", str(e)) from e
