"""Tests for the command-line interface."""

import pytest
from pathlib import Path
from unittest.mock import patch
from click.testing import CliRunner

from hexo_sync.cli import main
from hexo_sync.config import SyncConfig, load_config, save_config
from hexo_sync.core.models import DeployError, DeployResult


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def config_file(tmp_path):
    posts = tmp_path / "vault" / "Published"
    images = tmp_path / "vault" / "Images"
    hexo_root = tmp_path / "blog"
    posts.mkdir(parents=True)
    (images / "hello").mkdir(parents=True)
    (hexo_root / "source" / "_posts").mkdir(parents=True)
    (posts / "hello.md").write_text("# Hello\n")
    (images / "hello" / "wave.png").write_bytes(b"png")

    path = tmp_path / "hexo-sync.yaml"
    save_config(SyncConfig.for_site(posts, images, hexo_root), path)
    return path


class TestInit:
    """Tests for the init command."""

    def test_writes_settings(self, runner, tmp_path):
        path = tmp_path / "hexo-sync.yaml"
        result = runner.invoke(main, [
            "--config", str(path), "init",
            "--markdown-source", str(tmp_path / "posts"),
            "--image-source", str(tmp_path / "images"),
            "--hexo-root", str(tmp_path / "blog"),
        ])

        assert result.exit_code == 0
        config = load_config(path)
        assert config.hexo_post_path == tmp_path / "blog" / "source" / "_posts"

    def test_refuses_to_overwrite(self, runner, config_file, tmp_path):
        before = config_file.read_text()
        result = runner.invoke(main, [
            "--config", str(config_file), "init",
            "--markdown-source", "a", "--image-source", "b", "--hexo-root", "c",
        ])

        assert result.exit_code == 1
        assert "already exists" in result.output
        assert config_file.read_text() == before


class TestPushPull:
    """Tests for push and pull."""

    def test_push(self, runner, config_file):
        result = runner.invoke(main, ["--config", str(config_file), "push"])

        assert result.exit_code == 0
        assert "Markdown: copied 1, skipped 0" in result.output
        assert "Images: copied 1, skipped 0" in result.output
        config = load_config(config_file)
        assert (config.hexo_post_path / "hello.md").exists()
        assert (config.hexo_image_path / "hello" / "wave.png").exists()

    def test_push_dry_run(self, runner, config_file):
        result = runner.invoke(main, ["--config", str(config_file), "push", "--dry-run"])

        assert result.exit_code == 0
        assert "Markdown: would copy 1" in result.output
        config = load_config(config_file)
        assert not (config.hexo_post_path / "hello.md").exists()

    def test_push_missing_root_fails(self, runner, config_file):
        config = load_config(config_file)
        (config.markdown_source_path / "hello.md").unlink()
        config.markdown_source_path.rmdir()

        result = runner.invoke(main, ["--config", str(config_file), "push"])

        assert result.exit_code == 1
        assert "Markdown source directory not found" in result.output

    def test_push_image_target_is_a_file(self, runner, config_file):
        config = load_config(config_file)
        config.hexo_image_path.parent.mkdir(parents=True)
        config.hexo_image_path.write_text("in the way")

        result = runner.invoke(main, ["--config", str(config_file), "push"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "is not a directory" in result.output

    def test_push_source_is_a_file(self, runner, config_file):
        config = load_config(config_file)
        (config.markdown_source_path / "hello.md").unlink()
        config.markdown_source_path.rmdir()
        config.markdown_source_path.write_text("not a folder")

        result = runner.invoke(main, ["--config", str(config_file), "push"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert "is not a directory" in result.output

    def test_pull(self, runner, config_file):
        config = load_config(config_file)
        config.hexo_image_path.mkdir(parents=True)
        (config.hexo_post_path / "from-site.md").write_text("# Site\n")

        result = runner.invoke(main, ["--config", str(config_file), "pull"])

        assert result.exit_code == 0
        assert (config.markdown_source_path / "from-site.md").read_text() == "# Site\n"

    def test_missing_settings_file(self, runner, tmp_path):
        result = runner.invoke(main, ["--config", str(tmp_path / "nope.yaml"), "push"])

        assert result.exit_code == 1
        assert "Settings file not found" in result.output

    def test_undecodable_settings_file(self, runner, tmp_path):
        path = tmp_path / "hexo-sync.yaml"
        path.write_bytes(b"markdown_source_path: \xff\xfe\n")

        result = runner.invoke(main, ["--config", str(path), "push"])

        assert result.exit_code == 1
        assert isinstance(result.exception, SystemExit)
        assert str(path) in result.output


class TestDeployPublish:
    """Tests for deploy and publish."""

    def test_deploy(self, runner, config_file):
        with patch("hexo_sync.core.syncer.DeployRunner.run") as run:
            run.return_value = DeployResult(site_root=Path("."))
            result = runner.invoke(main, ["--config", str(config_file), "deploy"])

        assert result.exit_code == 0
        run.assert_called_once()
        assert "Deploy finished" in result.output

    def test_deploy_failure(self, runner, config_file):
        with patch("hexo_sync.core.syncer.DeployRunner.run") as run:
            run.side_effect = DeployError("hexo deploy", 1, "no deploy target")
            result = runner.invoke(main, ["--config", str(config_file), "deploy"])

        assert result.exit_code == 1
        assert "no deploy target" in result.output

    def test_publish(self, runner, config_file):
        with patch("hexo_sync.core.syncer.DeployRunner.run") as run:
            run.return_value = DeployResult(site_root=Path("."))
            result = runner.invoke(main, ["--config", str(config_file), "publish"])

        assert result.exit_code == 0
        run.assert_called_once()
        assert "Blog synced and deployed" in result.output

    def test_publish_dry_run(self, runner, config_file):
        with patch("hexo_sync.core.syncer.DeployRunner.run") as run:
            result = runner.invoke(main, ["--config", str(config_file), "publish", "--dry-run"])

        assert result.exit_code == 0
        run.assert_not_called()
        assert "deployed" not in result.output


class TestPreviewAndTag:
    """Tests for preview and tag."""

    def test_preview(self, runner, config_file, tmp_path):
        config = load_config(config_file)
        post = tmp_path / "draft.md"
        post.write_text('Hi\n{% fb_img \\image\\posts\\hello\\wave.png "Wave" %}\n')

        result = runner.invoke(main, ["--config", str(config_file), "preview", str(post)])

        assert result.exit_code == 0
        image = (config.image_source_path / "hello" / "wave.png").as_posix()
        assert f"![Wave]({image})" in result.output

    def test_preview_leaves_missing_images(self, runner, config_file, tmp_path):
        post = tmp_path / "draft.md"
        post.write_text('{% fb_img \\image\\posts\\hello\\gone.png "Gone" %}\n')

        result = runner.invoke(main, ["--config", str(config_file), "preview", str(post)])

        assert result.exit_code == 0
        assert "gone.png" in result.output

    def test_tag(self, runner):
        result = runner.invoke(main, ["tag", "my-post", "Big Diagram.PNG", "--alt", "Diagram"])

        assert result.exit_code == 0
        assert result.output.strip() == '{% fb_img \\image\\posts\\my-post\\big-diagram.png "Diagram" %}'

    def test_tag_rejects_quote_in_alt(self, runner):
        result = runner.invoke(main, ["tag", "my-post", "chart.png", "--alt", 'Say "hi"'])

        assert result.exit_code == 2
        assert "double quotes" in result.output

    def test_tag_default_alt_and_extension(self, runner):
        result = runner.invoke(main, ["tag", "my-post", "sketch"])

        assert result.exit_code == 0
        assert result.output.strip() == '{% fb_img \\image\\posts\\my-post\\sketch.webp "sketch" %}'
