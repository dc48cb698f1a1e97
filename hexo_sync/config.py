"""Settings for hexo-sync, persisted as a YAML file."""

import logging
from dataclasses import asdict, dataclass, field, fields, replace
from pathlib import Path
from typing import Any, Dict, Tuple

import yaml

from hexo_sync.core.deploy import DEFAULT_DEPLOY_COMMANDS
from hexo_sync.core.models import ConfigError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = "hexo-sync.yaml"

PATH_KEYS = ("markdown_source_path", "image_source_path", "hexo_post_path", "hexo_root_path")


@dataclass(frozen=True)
class SyncConfig:
    """Immutable settings passed to the syncer at invocation time."""

    markdown_source_path: Path
    image_source_path: Path
    hexo_post_path: Path
    hexo_root_path: Path
    # Persisted but not consulted unless apply_folder_structure is set
    keep_folder_structure: bool = True
    apply_folder_structure: bool = False
    strict_image_nesting: bool = False
    image_subdir: str = "source/image/posts"
    deploy_commands: Tuple[str, ...] = field(default=DEFAULT_DEPLOY_COMMANDS)

    @property
    def hexo_image_path(self) -> Path:
        """Images-by-post directory inside the Hexo site."""
        return self.hexo_root_path / self.image_subdir

    @classmethod
    def for_site(cls, markdown_source: Path, image_source: Path, hexo_root: Path) -> "SyncConfig":
        """Build settings for a standard Hexo layout."""
        hexo_root = Path(hexo_root)
        return cls(
            markdown_source_path=Path(markdown_source),
            image_source_path=Path(image_source),
            hexo_post_path=hexo_root / "source" / "_posts",
            hexo_root_path=hexo_root,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "SyncConfig":
        """Merge a settings mapping over the defaults.

        Unknown keys are logged and ignored.

        Raises:
            ConfigError: If a required path is missing or a value is malformed
        """
        known = {f.name for f in fields(cls)}
        for key in sorted(set(data) - known):
            logger.warning("Ignoring unknown setting: %s", key)

        missing = [k for k in PATH_KEYS if not data.get(k)]
        if missing:
            raise ConfigError(f"Missing required settings: {', '.join(missing)}")

        values: Dict[str, Any] = {k: v for k, v in data.items() if k in known}
        for key in PATH_KEYS:
            values[key] = Path(str(values[key])).expanduser()

        commands = values.get("deploy_commands")
        if commands is not None:
            if isinstance(commands, str):
                commands = [commands]
            if not isinstance(commands, list):
                raise ConfigError("deploy_commands must be a string or a list of strings")
            values["deploy_commands"] = tuple(str(c) for c in commands)

        return cls(**values)

    def to_dict(self) -> Dict[str, Any]:
        data = asdict(self)
        for key in PATH_KEYS:
            data[key] = str(data[key])
        data["deploy_commands"] = list(self.deploy_commands)
        return data

    def with_updates(self, **changes: Any) -> "SyncConfig":
        """Return a copy with some settings replaced."""
        return replace(self, **changes)


def load_config(path: Path) -> SyncConfig:
    """Load settings from a YAML file.

    Args:
        path: Path to the settings file

    Returns:
        SyncConfig with defaults filled in

    Raises:
        ConfigError: If the file is missing, unreadable or invalid
    """
    path = Path(path)
    if not path.exists():
        raise ConfigError(f"Settings file not found: {path}")

    try:
        with open(path, 'r', encoding='utf-8') as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML in {path}: {e}") from e
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigError(f"Could not read settings from {path}: {e}") from e

    if data is None:
        data = {}
    if not isinstance(data, dict):
        raise ConfigError(f"Settings in {path} must be a mapping")

    return SyncConfig.from_dict(data)


def save_config(config: SyncConfig, path: Path) -> None:
    """Write settings to a YAML file, creating parent directories."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    with open(path, 'w', encoding='utf-8') as f:
        yaml.dump(
            config.to_dict(),
            f,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
