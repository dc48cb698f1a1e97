"""Sync entry points tying settings, the directory mirror and deployment together."""

import logging
from pathlib import Path
from typing import Optional

from hexo_sync.config import SyncConfig, load_config
from hexo_sync.core.deploy import DeployRunner
from hexo_sync.core.mirror import DirectoryMirror
from hexo_sync.core.models import DeployResult, SyncDirection, SyncReport

logger = logging.getLogger(__name__)


class BlogSyncer:
    """Mirrors a vault into a Hexo site and back, and publishes the site.

    Each operation runs the Markdown pass, then the image pass. Errors are not
    caught here; they propagate to the caller with whatever was copied before
    the failure left in place.
    """

    def __init__(
        self,
        config: SyncConfig,
        mirror: Optional[DirectoryMirror] = None,
        runner: Optional[DeployRunner] = None,
    ):
        self.config = config
        self.mirror = mirror or DirectoryMirror(
            keep_folder_structure=config.keep_folder_structure,
            apply_folder_structure=config.apply_folder_structure,
            strict_image_nesting=config.strict_image_nesting,
        )
        self.runner = runner or DeployRunner(config.hexo_root_path, config.deploy_commands)

    def push(self, dry_run: bool = False) -> SyncReport:
        """Copy posts and images from the vault into the Hexo source tree."""
        cfg = self.config
        logger.info("Pushing %s to %s", cfg.markdown_source_path, cfg.hexo_post_path)

        report = SyncReport(direction=SyncDirection.FORWARD, dry_run=dry_run)
        report.markdown = self.mirror.mirror_markdown(
            cfg.markdown_source_path, cfg.hexo_post_path, SyncDirection.FORWARD, dry_run=dry_run
        )
        report.images = self.mirror.mirror_images(
            cfg.image_source_path, cfg.hexo_image_path, SyncDirection.FORWARD, dry_run=dry_run
        )

        logger.info("Push finished: %d files copied", report.copied_count)
        return report

    def pull(self, dry_run: bool = False) -> SyncReport:
        """Bring newer posts and images from the Hexo source tree back into the vault."""
        cfg = self.config
        logger.info("Pulling %s into %s", cfg.hexo_post_path, cfg.markdown_source_path)

        report = SyncReport(direction=SyncDirection.REVERSE, dry_run=dry_run)
        report.markdown = self.mirror.mirror_markdown(
            cfg.hexo_post_path, cfg.markdown_source_path, SyncDirection.REVERSE, dry_run=dry_run
        )
        report.images = self.mirror.mirror_images(
            cfg.hexo_image_path, cfg.image_source_path, SyncDirection.REVERSE, dry_run=dry_run
        )

        logger.info("Pull finished: %d files copied", report.copied_count)
        return report

    def deploy(self) -> DeployResult:
        """Clean, generate and deploy the Hexo site."""
        return self.runner.run()

    def publish(self, dry_run: bool = False) -> SyncReport:
        """Push, then deploy. A dry run never deploys."""
        report = self.push(dry_run=dry_run)
        if dry_run:
            logger.info("Dry run: skipping deploy")
            return report

        report.deploy = self.deploy()
        return report


def create_syncer_from_config(config_path: Path) -> BlogSyncer:
    """Create a BlogSyncer from a settings file.

    Args:
        config_path: Path to the YAML settings file

    Returns:
        Configured BlogSyncer
    """
    return BlogSyncer(load_config(config_path))
