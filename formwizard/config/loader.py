"""
Configuration loader for YAML files.

Handles loading, validation, and merging of settings and flow
definitions over the built-in buyer and seller flows.
"""

from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml
from pydantic import ValidationError

from .defaults import BUILTIN_FLOWS, get_builtin_flow
from .models import FlowConfig, WizardSettings


class ConfigError(Exception):
    """Configuration loading or validation error."""
    pass


class ConfigLoader:
    """
    Loads and validates configuration from YAML files.

    Supports a single settings file (optionally with an inline `flows`
    section) or a configuration directory holding `settings.yaml` and
    a `flows/` subdirectory with one YAML file per flow.
    """

    SETTINGS_FILENAMES = ("settings.yaml", "settings.yml")
    FLOWS_DIRNAME = "flows"

    def __init__(self, config_path: Optional[Union[str, Path]] = None):
        """
        Initialize the config loader.

        Args:
            config_path: Path to config file or directory
        """
        self.config_path = Path(config_path).expanduser() if config_path else None
        self._settings: Optional[WizardSettings] = None
        self._flows: Dict[str, FlowConfig] = {}

    def load(self) -> "ConfigLoader":
        """
        Load settings and flow files from the config path.

        Returns:
            Self for method chaining
        """
        if self.config_path is None:
            raise ConfigError("No configuration path specified")

        if self.config_path.is_file():
            self._load_single_file(self.config_path)
        elif self.config_path.is_dir():
            self._load_directory(self.config_path)
        else:
            raise ConfigError(f"Configuration path does not exist: {self.config_path}")

        return self

    def _load_single_file(self, file_path: Path) -> None:
        """Load a single YAML settings file."""
        data = self._read_yaml(file_path)
        self._settings = self._parse_settings(data)

    def _load_directory(self, dir_path: Path) -> None:
        """Load settings and flows from a configuration directory."""
        for filename in self.SETTINGS_FILENAMES:
            file_path = dir_path / filename
            if file_path.exists():
                self._load_single_file(file_path)
                break

        flows_dir = dir_path / self.FLOWS_DIRNAME
        if flows_dir.is_dir():
            for file_path in sorted(flows_dir.iterdir()):
                if file_path.suffix not in (".yaml", ".yml"):
                    continue
                flow = self._parse_flow(self._read_yaml(file_path), source=file_path)
                self._flows[flow.name] = flow

    def _read_yaml(self, file_path: Path) -> Dict[str, Any]:
        """Read and parse a YAML file."""
        try:
            with open(file_path, "r") as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ConfigError(f"Invalid YAML in {file_path}: {e}")
        except IOError as e:
            raise ConfigError(f"Cannot read {file_path}: {e}")

        if not isinstance(data, dict):
            raise ConfigError(f"Expected a mapping at the top of {file_path}")
        return data

    def _parse_settings(self, data: Dict[str, Any]) -> WizardSettings:
        """Parse engine settings."""
        try:
            return WizardSettings(**data)
        except ValidationError as e:
            raise ConfigError(f"Invalid settings: {e}")

    def _parse_flow(self, data: Dict[str, Any], source: Any = None) -> FlowConfig:
        """Parse a flow definition."""
        try:
            return FlowConfig(**data)
        except ValidationError as e:
            where = f" in {source}" if source else ""
            raise ConfigError(f"Invalid flow configuration{where}: {e}")

    @property
    def settings(self) -> WizardSettings:
        """Get loaded settings (defaults when nothing was loaded)."""
        if self._settings is None:
            self._settings = WizardSettings()
        return self._settings

    @property
    def flows(self) -> Dict[str, FlowConfig]:
        """
        All known flows.

        Built-in flows come first, then flows declared inline in the
        settings file, then flow files. Later definitions replace
        earlier ones with the same name.
        """
        flows: Dict[str, FlowConfig] = {}
        for name in BUILTIN_FLOWS:
            flows[name] = self._parse_flow(get_builtin_flow(name))
        flows.update(self.settings.flows)
        flows.update(self._flows)
        return flows

    def flow_names(self) -> List[str]:
        """Names of all known flows."""
        return list(self.flows)

    def get_flow(self, name: str) -> FlowConfig:
        """
        Get a flow by name.

        Raises:
            ConfigError: If no flow has that name
        """
        flows = self.flows
        if name not in flows:
            raise ConfigError(f"Unknown flow: {name}. Available flows: {', '.join(flows)}")
        return flows[name]

    def save(self, output_path: Union[str, Path]) -> Path:
        """
        Save current settings to a YAML file.

        Args:
            output_path: Directory to save settings.yaml into

        Returns:
            Path of the written file
        """
        output_path = Path(output_path)
        output_path.mkdir(parents=True, exist_ok=True)

        file_path = output_path / self.SETTINGS_FILENAMES[0]
        with open(file_path, "w") as f:
            yaml.dump(
                self.settings.model_dump(mode="json", exclude_none=True),
                f,
                default_flow_style=False,
                sort_keys=False,
            )
        return file_path

    @classmethod
    def from_dict(
        cls,
        settings: Optional[Dict] = None,
        flows: Optional[List[Dict]] = None,
    ) -> "ConfigLoader":
        """
        Create a ConfigLoader from dictionaries.

        Useful for programmatic configuration.
        """
        loader = cls()
        if settings:
            loader._settings = loader._parse_settings(settings)
        for data in flows or []:
            flow = loader._parse_flow(data)
            loader._flows[flow.name] = flow
        return loader
