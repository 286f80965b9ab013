"""Configuration manager for loading and saving Dircast config."""

import logging
import os
from collections.abc import Mapping
from pathlib import Path

import yaml
from pydantic import ValidationError

from dircast.config.schema import GlobalConfig
from dircast.utils.errors import InvalidConfigError
from dircast.utils.paths import get_config_dir, get_config_file

logger = logging.getLogger(__name__)

# Environment variables that override the dropbox block of config.yaml
ENV_OVERRIDES = {
    "app_key": "DROPBOX_APP_KEY",
    "app_secret": "DROPBOX_APP_SECRET",
    "refresh_token": "DROPBOX_REFRESH_TOKEN",
}


class ConfigManager:
    """Manages the Dircast configuration file."""

    def __init__(
        self,
        config_dir: Path | None = None,
        environ: Mapping[str, str] | None = None,
    ) -> None:
        """Initialize the config manager.

        Args:
            config_dir: Optional custom config directory. Defaults to the platform config dir.
            environ: Environment mapping used for overrides. Defaults to os.environ.
        """
        if config_dir is None:
            self.config_dir = get_config_dir()
            self.config_file = get_config_file()
        else:
            self.config_dir = config_dir
            self.config_file = config_dir / "config.yaml"

        self.environ = os.environ if environ is None else environ

    def load_config(self) -> GlobalConfig:
        """Load and validate configuration, then apply environment overrides.

        A missing config file is not an error: defaults are used and nothing
        is written, since the file would otherwise be a place credentials end up.

        Returns:
            Validated GlobalConfig instance

        Raises:
            InvalidConfigError: If the file is not valid YAML or fails validation
        """
        data: dict = {}
        if self.config_file.exists():
            try:
                with open(self.config_file) as f:
                    data = yaml.safe_load(f) or {}
            except yaml.YAMLError as e:
                raise InvalidConfigError(
                    f"Invalid configuration in {self.config_file}: {e}"
                ) from e
            if not isinstance(data, dict):
                raise InvalidConfigError(
                    f"Invalid configuration in {self.config_file}: root must be a mapping"
                )
        else:
            logger.debug("No config file at %s, using defaults", self.config_file)

        self._apply_env_overrides(data)

        try:
            return GlobalConfig(**data)
        except ValidationError as e:
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: {e}"
            ) from e

    def save_config(self, config: GlobalConfig) -> None:
        """Save configuration without the Dropbox credentials.

        Args:
            config: GlobalConfig instance to save
        """
        data = config.model_dump(mode="python", exclude={"dropbox"})

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_file, "w") as f:
            yaml.safe_dump(data, f, default_flow_style=False, sort_keys=False)

    def _apply_env_overrides(self, data: dict) -> None:
        dropbox = data.get("dropbox") or {}
        if not isinstance(dropbox, dict):
            raise InvalidConfigError(
                f"Invalid configuration in {self.config_file}: 'dropbox' must be a mapping"
            )
        for key, env_name in ENV_OVERRIDES.items():
            value = self.environ.get(env_name)
            if value:
                dropbox[key] = value
        data["dropbox"] = dropbox
