"""Directory mirror: copies Markdown posts and images between two trees."""

import logging
import shutil
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from hexo_sync.core.discovery import TreeScanner
from hexo_sync.core.models import (
    CopyFailure,
    CopyRecord,
    FileKind,
    ImageGrouping,
    MirrorResult,
    NestingError,
    PathNotFound,
    SyncDirection,
    TrackedFile,
    TreeAccessError,
)

logger = logging.getLogger(__name__)

DEFAULT_GROUPING = {
    SyncDirection.FORWARD: ImageGrouping.PARENT,
    SyncDirection.REVERSE: ImageGrouping.TOP_LEVEL,
}


class DirectoryMirror:
    """Copies a filtered set of files from one directory tree to another.

    Forward passes overwrite unconditionally. Reverse passes copy a file only
    when the target copy is missing or strictly older than the source. Files
    are never deleted on either side, and nothing is rolled back when a copy
    fails halfway through a batch.
    """

    def __init__(
        self,
        keep_folder_structure: bool = True,
        apply_folder_structure: bool = False,
        strict_image_nesting: bool = False,
    ):
        """Initialize DirectoryMirror.

        Args:
            keep_folder_structure: Persisted setting; only honoured when
                apply_folder_structure is also set
            apply_folder_structure: Preserve source-relative paths for Markdown
                when keep_folder_structure is set (default: always flatten)
            strict_image_nesting: Reject images that are not exactly one level
                below the image root
        """
        self.keep_folder_structure = keep_folder_structure
        self.apply_folder_structure = apply_folder_structure
        self.strict_image_nesting = strict_image_nesting

    @property
    def preserves_structure(self) -> bool:
        return self.keep_folder_structure and self.apply_folder_structure

    def mirror_markdown(
        self,
        source_root: Path,
        target_root: Path,
        direction: SyncDirection,
        dry_run: bool = False,
    ) -> MirrorResult:
        """Mirror Markdown documents, collapsing them into target_root.

        Args:
            source_root: Tree to copy from
            target_root: Directory to copy into. Must exist for a forward pass;
                created for a reverse pass.
            direction: Forward (overwrite) or reverse (newer mtime wins)
            dry_run: Report what would be copied without touching the target

        Returns:
            MirrorResult listing copied and skipped files

        Raises:
            PathNotFound: If a required root is missing or not a directory
            TreeAccessError: If a directory can't be read or created
            CopyFailure: If a copy fails; earlier copies are kept
        """
        source_root = Path(source_root)
        target_root = Path(target_root)

        _require_dir(source_root, "Markdown source directory")
        if direction == SyncDirection.FORWARD:
            _require_dir(target_root, "Markdown target directory")
        else:
            self._ensure_dir(target_root, dry_run)

        files = TreeScanner(source_root, FileKind.MARKDOWN).scan()

        def destination(file: TrackedFile) -> Path:
            if self.preserves_structure:
                return target_root / file.relative_path
            return target_root / file.name

        pairs = ((file, destination(file)) for file in files)
        return self._run(pairs, FileKind.MARKDOWN, direction, dry_run)

    def mirror_images(
        self,
        source_root: Path,
        target_root: Path,
        direction: SyncDirection,
        grouping: Optional[ImageGrouping] = None,
        dry_run: bool = False,
    ) -> MirrorResult:
        """Mirror images into per-post folders under target_root.

        Each image lands in target_root/<post>/<basename>. The post name comes
        from the grouping rule: forward passes use the immediate parent
        directory, reverse passes the first segment below source_root. Any
        deeper nesting is discarded.

        Args:
            source_root: Tree to copy from
            target_root: Images-by-post directory; created if absent
            direction: Forward (overwrite) or reverse (newer mtime wins)
            grouping: Override the direction's default grouping rule
            dry_run: Report what would be copied without touching the target

        Returns:
            MirrorResult listing copied and skipped files

        Raises:
            PathNotFound: If source_root is missing, or either root is not a directory
            TreeAccessError: If a directory can't be read or created
            NestingError: If strict nesting is on and an image is misplaced
            CopyFailure: If a copy fails; earlier copies are kept
        """
        source_root = Path(source_root)
        target_root = Path(target_root)
        grouping = grouping or DEFAULT_GROUPING[direction]

        _require_dir(source_root, "Image source directory")
        self._ensure_dir(target_root, dry_run)

        files = TreeScanner(source_root, FileKind.IMAGE).scan()
        if self.strict_image_nesting:
            self._check_nesting(files)

        pairs = (
            (file, target_root / post_name(file, grouping) / file.name)
            for file in files
        )
        return self._run(pairs, FileKind.IMAGE, direction, dry_run)

    def _run(
        self,
        pairs: Iterable[Tuple[TrackedFile, Path]],
        kind: FileKind,
        direction: SyncDirection,
        dry_run: bool,
    ) -> MirrorResult:
        result = MirrorResult(kind=kind, direction=direction, dry_run=dry_run)

        for file, destination in pairs:
            should_copy, reason = _decide(file, destination, direction)
            record = CopyRecord(source=file.path, destination=destination, reason=reason)

            if not should_copy:
                logger.debug("Skipped %s: %s", file.relative_path, reason)
                result.skipped.append(record)
                continue

            if dry_run:
                logger.info("Would copy %s to %s", file.relative_path, destination)
            else:
                _copy(file.path, destination)
                logger.info("Copied %s to %s", file.relative_path, destination)
            result.copied.append(record)

        return result

    def _check_nesting(self, files: List[TrackedFile]) -> None:
        misplaced = [f.relative_path for f in files if len(f.relative_path.split('/')) != 2]
        if misplaced:
            listed = ', '.join(misplaced)
            raise NestingError(
                f"Images must sit exactly one folder below the image root: {listed}"
            )

    def _ensure_dir(self, path: Path, dry_run: bool) -> None:
        if path.is_dir():
            return
        if path.exists():
            raise PathNotFound(path, "Target directory", "is not a directory")
        if dry_run:
            return
        logger.info("Creating directory %s", path)
        try:
            path.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise TreeAccessError(path, "create", str(e)) from e


def post_name(file: TrackedFile, grouping: ImageGrouping) -> str:
    """Name of the post folder an image belongs to.

    Returns an empty string for a TOP_LEVEL image lying directly in the root.
    """
    if grouping == ImageGrouping.PARENT:
        return file.parent_name

    segments = file.relative_path.split('/')
    if len(segments) < 2:
        return ""
    return segments[0]


def _require_dir(path: Path, role: str) -> None:
    if not path.exists():
        raise PathNotFound(path, role)
    if not path.is_dir():
        raise PathNotFound(path, role, "is not a directory")


def _decide(file: TrackedFile, destination: Path, direction: SyncDirection) -> Tuple[bool, str]:
    if direction == SyncDirection.FORWARD:
        return True, "overwrite"

    if not destination.exists():
        return True, "missing in target"

    if file.mtime > destination.stat().st_mtime:
        return True, "source is newer"

    return False, "target is up to date"


def _copy(source: Path, destination: Path) -> None:
    try:
        destination.parent.mkdir(parents=True, exist_ok=True)
        shutil.copyfile(source, destination)
    except OSError as e:
        raise CopyFailure(source, destination, str(e)) from e
