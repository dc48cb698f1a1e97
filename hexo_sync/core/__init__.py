"""Core components for hexo-sync."""

from hexo_sync.core.models import (
    CopyRecord,
    FileKind,
    ImageGrouping,
    MirrorResult,
    SyncDirection,
    SyncReport,
    TrackedFile,
)
from hexo_sync.core.discovery import TreeScanner
from hexo_sync.core.mirror import DirectoryMirror
from hexo_sync.core.deploy import DeployRunner
from hexo_sync.core.syncer import BlogSyncer, create_syncer_from_config

__all__ = [
    "CopyRecord",
    "FileKind",
    "ImageGrouping",
    "MirrorResult",
    "SyncDirection",
    "SyncReport",
    "TrackedFile",
    "TreeScanner",
    "DirectoryMirror",
    "DeployRunner",
    "BlogSyncer",
    "create_syncer_from_config",
]
