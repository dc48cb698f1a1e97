"""Runs the Hexo build and publish commands."""

import logging
import subprocess
from pathlib import Path
from typing import List, Optional, Sequence

from hexo_sync.core.models import CommandOutput, DeployError, DeployResult, PathNotFound

logger = logging.getLogger(__name__)

DEFAULT_DEPLOY_COMMANDS = ("hexo clean", "hexo generate", "hexo deploy")


class DeployRunner:
    """Runs a fixed chain of shell commands in the site root.

    Commands run one after another through the platform shell, so npm
    shims such as ``hexo.cmd`` resolve on Windows. The chain stops at the
    first failure, like joining the commands with ``&&``.
    """

    def __init__(self, site_root: Path, commands: Optional[Sequence[str]] = None):
        self.site_root = Path(site_root)
        self.commands: List[str] = list(DEFAULT_DEPLOY_COMMANDS if commands is None else commands)

    def run(self) -> DeployResult:
        """Run every command in order.

        Returns:
            DeployResult with the captured output of each command

        Raises:
            PathNotFound: If the site root does not exist or is not a directory
            DeployError: If a command cannot be started or exits non-zero
        """
        if not self.site_root.exists():
            raise PathNotFound(self.site_root, "Hexo root directory")
        if not self.site_root.is_dir():
            raise PathNotFound(self.site_root, "Hexo root directory", "is not a directory")

        result = DeployResult(site_root=self.site_root)
        for command in self.commands:
            result.outputs.append(self._run_one(command))
        return result

    def _run_one(self, command: str) -> CommandOutput:
        logger.info("Running '%s' in %s", command, self.site_root)
        try:
            completed = subprocess.run(
                command,
                shell=True,
                cwd=self.site_root,
                stdout=subprocess.PIPE,
                stderr=subprocess.PIPE,
                text=True,
                encoding="utf-8",
                errors="replace",
                check=False,
            )
        except OSError as e:
            raise DeployError(command, None, str(e)) from e

        if completed.returncode != 0:
            logger.error("'%s' failed with status %d", command, completed.returncode)
            raise DeployError(command, completed.returncode, completed.stderr or "")

        if completed.stderr:
            logger.warning("'%s' wrote to stderr: %s", command, completed.stderr.strip())
        if completed.stdout:
            logger.debug("'%s' output: %s", command, completed.stdout.strip())

        return CommandOutput(
            command=command,
            returncode=completed.returncode,
            stdout=completed.stdout or "",
            stderr=completed.stderr or "",
        )
