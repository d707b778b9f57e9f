"""
Click context extension for plugin-ci CLI.

Provides the PluginCIContext dataclass passed through the Click command
chain via ctx.obj.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..core.bootstrap import bootstrap
from ..core.exceptions import ConfigFileError
from ..core.interfaces.vcs import IVCSProvider
from ..core.settings import PluginCISettings, load_settings
from ..services.ci_env import CIEnvironment
from ..services.stages import StageContext


@dataclass
class PluginCIContext:
    """Extended context passed through Click command chain.

    Attributes:
        cwd: Plugin project directory
        config_path: Explicit config file, if one was given
    """

    cwd: Path
    config_path: Path | None = None

    @classmethod
    def create(cls, cwd: Path | None = None, config_path: Path | None = None) -> PluginCIContext:
        return cls(cwd=(cwd or Path.cwd()).resolve(), config_path=config_path)

    def load_settings(self) -> PluginCISettings:
        """
        Load settings for the project directory.

        Raises:
            ConfigFileError: If an explicitly given config file cannot be parsed
        """
        settings = load_settings(config_path=self.config_path, start_dir=str(self.cwd))
        error = settings.to_dict().get("_config_error")
        if error and self.config_path:
            raise ConfigFileError(error, file_path=str(self.config_path))
        return settings

    def stage_context(self) -> StageContext:
        """Bootstrap services and build the context every stage runs with."""
        settings = self.load_settings()
        container = bootstrap(settings=settings, start_dir=self.cwd)
        return StageContext.create(
            settings=settings,
            project_dir=self.cwd,
            env=CIEnvironment.from_env(),
            vcs=self._get_vcs(container),
        )

    @staticmethod
    def _get_vcs(container) -> IVCSProvider | None:
        try:
            return container.get_vcs_provider("git")
        except KeyError:
            return None
