"""Data models for hexo-sync."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import List, Optional


class SyncError(Exception):
    """Base class for all sync failures."""


class PathNotFound(SyncError, FileNotFoundError):
    """A required root directory does not exist, or is not a directory."""

    def __init__(self, path: Path, role: str, problem: str = "not found"):
        self.path = Path(path)
        self.role = role
        self.problem = problem
        super().__init__(f"{role} {problem}: {self.path}")


class TreeAccessError(SyncError):
    """A directory could not be read or created."""

    def __init__(self, path: Path, action: str, reason: str):
        self.path = Path(path)
        self.action = action
        super().__init__(f"Could not {action} {self.path}: {reason}")


class CopyFailure(SyncError):
    """Copying a single file failed; the rest of the batch is abandoned."""

    def __init__(self, source: Path, destination: Path, reason: str):
        self.source = source
        self.destination = destination
        super().__init__(f"Failed to copy {source} to {destination}: {reason}")


class NestingError(SyncError):
    """An image is not nested exactly one level below its root."""


class DeployError(SyncError):
    """A deploy command exited with an error or could not be started."""

    def __init__(self, command: str, returncode: Optional[int], stderr: str = ""):
        self.command = command
        self.returncode = returncode
        self.stderr = stderr
        detail = stderr.strip() or "no output"
        if returncode is None:
            message = f"Could not run '{command}': {detail}"
        else:
            message = f"'{command}' exited with status {returncode}: {detail}"
        super().__init__(message)


class ConfigError(SyncError):
    """Settings could not be loaded."""


class FileKind(str, Enum):
    """Kinds of files the mirror tracks."""

    MARKDOWN = "markdown"
    IMAGE = "image"


class SyncDirection(str, Enum):
    """Which tree is the source for a mirror invocation."""

    FORWARD = "forward"
    """Vault to site source tree"""

    REVERSE = "reverse"
    """Site source tree back to the vault"""


class ImageGrouping(str, Enum):
    """How the post directory of an image is derived."""

    PARENT = "parent"
    """Name of the image's immediate parent directory"""

    TOP_LEVEL = "top_level"
    """First path segment relative to the source root"""


@dataclass
class TrackedFile:
    """A file found under a tree root."""
    path: Path
    root: Path
    kind: FileKind
    mtime: float

    @classmethod
    def from_path(cls, path: Path, root: Path, kind: FileKind) -> "TrackedFile":
        return cls(path=path, root=root, kind=kind, mtime=path.stat().st_mtime)

    @property
    def name(self) -> str:
        return self.path.name

    @property
    def relative_path(self) -> str:
        """Path relative to the root, with forward slashes."""
        return self.path.relative_to(self.root).as_posix()

    @property
    def parent_name(self) -> str:
        return self.path.parent.name


@dataclass
class CopyRecord:
    """One file the mirror looked at, and what it decided."""
    source: Path
    destination: Path
    reason: str


@dataclass
class MirrorResult:
    """Result of a single mirror pass."""
    kind: FileKind
    direction: SyncDirection
    copied: List[CopyRecord] = field(default_factory=list)
    skipped: List[CopyRecord] = field(default_factory=list)
    dry_run: bool = False

    @property
    def copied_count(self) -> int:
        return len(self.copied)


@dataclass
class CommandOutput:
    """Captured output of one deploy command."""
    command: str
    returncode: int
    stdout: str
    stderr: str


@dataclass
class DeployResult:
    """Result of running the deploy command chain."""
    site_root: Path
    outputs: List[CommandOutput] = field(default_factory=list)


@dataclass
class SyncReport:
    """Result of a push, pull or publish."""
    direction: Optional[SyncDirection]
    markdown: Optional[MirrorResult] = None
    images: Optional[MirrorResult] = None
    deploy: Optional[DeployResult] = None
    dry_run: bool = False

    @property
    def copied_count(self) -> int:
        return sum(r.copied_count for r in (self.markdown, self.images) if r)
