"""Command-line interface for hexo-sync."""

import logging
from pathlib import Path
from typing import Optional

import click

from hexo_sync.config import DEFAULT_CONFIG_FILE, SyncConfig, save_config
from hexo_sync.core.models import MirrorResult, SyncError, SyncReport
from hexo_sync.core.syncer import BlogSyncer, create_syncer_from_config
from hexo_sync.transforms.image_tags import (
    build_image_tag,
    image_file_name,
    rewrite_image_tags,
    vault_image_lookup,
)

logger = logging.getLogger(__name__)


def setup_logging(verbose: bool) -> None:
    """Configure logging for the command-line run."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    )


def _load_syncer(ctx: click.Context) -> BlogSyncer:
    try:
        return create_syncer_from_config(ctx.obj["config_path"])
    except SyncError as e:
        logger.error("Could not load settings: %s", e)
        raise click.ClickException(str(e)) from e


def _echo_result(label: str, result: Optional[MirrorResult]) -> None:
    if result is None:
        return
    verb = "would copy" if result.dry_run else "copied"
    click.echo(f"{label}: {verb} {len(result.copied)}, skipped {len(result.skipped)}")
    for record in result.copied:
        click.echo(f"  {record.source} -> {record.destination}")


def _echo_report(report: SyncReport) -> None:
    _echo_result("Markdown", report.markdown)
    _echo_result("Images", report.images)
    if report.deploy is not None:
        for output in report.deploy.outputs:
            click.echo(f"Ran: {output.command}")


@click.group()
@click.option(
    "--config", "-c", "config_path",
    type=click.Path(path_type=Path),
    default=DEFAULT_CONFIG_FILE,
    show_default=True,
    help="Path to the settings file",
)
@click.option("--verbose", "-v", is_flag=True, help="Enable debug logging")
@click.version_option(package_name="hexo-sync")
@click.pass_context
def main(ctx: click.Context, config_path: Path, verbose: bool) -> None:
    """Mirror an Obsidian vault into a Hexo site and publish it."""
    setup_logging(verbose)
    ctx.ensure_object(dict)
    ctx.obj["config_path"] = config_path


@main.command()
@click.option("--markdown-source", required=True, type=click.Path(path_type=Path),
              help="Vault folder holding the posts to publish")
@click.option("--image-source", required=True, type=click.Path(path_type=Path),
              help="Vault folder holding one image folder per post")
@click.option("--hexo-root", required=True, type=click.Path(path_type=Path),
              help="Root of the Hexo site")
@click.option("--force", is_flag=True, help="Overwrite an existing settings file")
@click.pass_context
def init(ctx: click.Context, markdown_source: Path, image_source: Path, hexo_root: Path, force: bool) -> None:
    """Write a settings file for a standard Hexo layout."""
    config_path: Path = ctx.obj["config_path"]
    if config_path.exists() and not force:
        raise click.ClickException(f"{config_path} already exists (use --force to overwrite)")

    config = SyncConfig.for_site(markdown_source, image_source, hexo_root)
    save_config(config, config_path)
    click.echo(f"Wrote {config_path}")


@main.command()
@click.option("--dry-run", is_flag=True, help="Show what would be copied")
@click.pass_context
def push(ctx: click.Context, dry_run: bool) -> None:
    """Copy posts and images from the vault into the Hexo site."""
    syncer = _load_syncer(ctx)
    try:
        report = syncer.push(dry_run=dry_run)
    except SyncError as e:
        logger.error("Push failed: %s", e)
        raise click.ClickException(str(e)) from e
    _echo_report(report)


@main.command()
@click.option("--dry-run", is_flag=True, help="Show what would be copied")
@click.pass_context
def pull(ctx: click.Context, dry_run: bool) -> None:
    """Copy newer posts and images from the Hexo site back into the vault."""
    syncer = _load_syncer(ctx)
    try:
        report = syncer.pull(dry_run=dry_run)
    except SyncError as e:
        logger.error("Pull failed: %s", e)
        raise click.ClickException(str(e)) from e
    _echo_report(report)


@main.command()
@click.pass_context
def deploy(ctx: click.Context) -> None:
    """Run hexo clean, generate and deploy."""
    syncer = _load_syncer(ctx)
    try:
        syncer.deploy()
    except SyncError as e:
        logger.error("Deploy failed: %s", e)
        raise click.ClickException(str(e)) from e
    click.echo("Deploy finished")


@main.command()
@click.option("--dry-run", is_flag=True, help="Show what would be copied; never deploys")
@click.pass_context
def publish(ctx: click.Context, dry_run: bool) -> None:
    """Push the vault into the Hexo site, then deploy it."""
    syncer = _load_syncer(ctx)
    try:
        report = syncer.publish(dry_run=dry_run)
    except SyncError as e:
        logger.error("Publish failed: %s", e)
        raise click.ClickException(str(e)) from e
    _echo_report(report)
    if not dry_run:
        click.echo("Blog synced and deployed")


@main.command()
@click.argument("post", type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.pass_context
def preview(ctx: click.Context, post: Path) -> None:
    """Print POST with its image tags replaced by Markdown images."""
    syncer = _load_syncer(ctx)
    lookup = vault_image_lookup(syncer.config.image_source_path)
    result = rewrite_image_tags(post.read_text(encoding='utf-8'), lookup)

    for name in result.missing:
        logger.warning("Image not found in vault: %s", name)
    click.echo(result.text, nl=False)


@main.command()
@click.argument("post_name")
@click.argument("image", type=click.Path(path_type=Path))
@click.option("--alt", default=None, help="Alt text (default: the image name)")
def tag(post_name: str, image: Path, alt: Optional[str]) -> None:
    """Print the fb_img tag for IMAGE in POST_NAME's image folder."""
    file_name = image_file_name(image.stem, image.suffix or ".webp")
    try:
        tag_text = build_image_tag(post_name, file_name, alt or image.stem)
    except ValueError as e:
        raise click.BadParameter(str(e)) from e
    click.echo(tag_text)


if __name__ == "__main__":
    main()
