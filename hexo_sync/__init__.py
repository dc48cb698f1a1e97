"""
hexo-sync - Mirror an Obsidian vault into a Hexo site and publish it

A small library and command-line tool for blogging from Obsidian with:
- Markdown post mirroring (vault to site, and newer files back)
- Per-post image folders
- Hexo clean/generate/deploy
- fb_img tag previews
"""

from hexo_sync.core.models import (
    ConfigError,
    CopyFailure,
    DeployError,
    NestingError,
    PathNotFound,
    SyncDirection,
    SyncError,
    SyncReport,
    TreeAccessError,
)
from hexo_sync.core.mirror import DirectoryMirror
from hexo_sync.core.deploy import DeployRunner
from hexo_sync.core.syncer import BlogSyncer
from hexo_sync.config import SyncConfig, load_config, save_config

__version__ = "0.1.0"

__all__ = [
    "ConfigError",
    "CopyFailure",
    "DeployError",
    "NestingError",
    "PathNotFound",
    "SyncDirection",
    "SyncError",
    "SyncReport",
    "TreeAccessError",
    "DirectoryMirror",
    "DeployRunner",
    "BlogSyncer",
    "SyncConfig",
    "load_config",
    "save_config",
]
