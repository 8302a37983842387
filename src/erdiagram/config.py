"""Configuration management for erdiagram projects."""

import os
from pathlib import Path
from typing import Optional, Dict, Any
import toml
from pydantic import BaseModel, Field, ConfigDict


class LayoutConfig(BaseModel):
    """Spacing used by the hierarchical auto-layout."""

    horizontal_spacing: float = Field(
        default=400, gt=0, description="Distance between layout levels"
    )
    vertical_spacing: float = Field(
        default=300, gt=0, description="Distance between tables sharing a level"
    )


class DSLConfig(BaseModel):
    """Defaults for DSL export."""

    include_header: bool = Field(
        default=True, description="Prefix exported DSL with a comment header"
    )


class ProjectConfig(BaseModel):
    """Configuration for an erdiagram project stored in .erdiagram/config.toml."""

    model_config = ConfigDict(
        extra="allow"
    )  # Allow additional fields for extensibility

    layout: LayoutConfig = Field(default_factory=LayoutConfig)
    dsl: DSLConfig = Field(default_factory=DSLConfig)


class Config:
    """Manages erdiagram project configuration."""

    def __init__(self, project_dir: Optional[Path] = None):
        """Initialize config manager.

        Args:
            project_dir: Path to project directory. If None, uses ERDIAGRAM_PROJECT_DIR env var or current directory.
        """
        if project_dir is None:
            env_dir = os.environ.get("ERDIAGRAM_PROJECT_DIR")
            if env_dir:
                project_dir = Path(env_dir)

        self.project_dir = Path(project_dir) if project_dir else Path.cwd()
        self.config_dir = self.project_dir / ".erdiagram"
        self.config_path = self.config_dir / "config.toml"
        self._config: Optional[ProjectConfig] = None

    @property
    def exists(self) -> bool:
        """Check if config file exists."""
        return self.config_path.exists()

    def load(self) -> ProjectConfig:
        """Load configuration from disk, with environment variable overrides."""
        if not self.exists:
            raise FileNotFoundError(f"Config file not found at {self.config_path}")

        with open(self.config_path, "r") as f:
            data = toml.load(f)

        self._apply_env_overrides(data)

        self._config = ProjectConfig(**data)
        return self._config

    def load_or_default(self) -> ProjectConfig:
        """Load configuration if present, otherwise defaults plus env overrides."""
        if self.exists:
            return self.load()

        data: Dict[str, Any] = {}
        self._apply_env_overrides(data)
        self._config = ProjectConfig(**data)
        return self._config

    def _apply_env_overrides(self, data: Dict[str, Any]) -> None:
        """Apply environment variable overrides to configuration data."""
        if env_h := os.environ.get("ERDIAGRAM_HORIZONTAL_SPACING"):
            data.setdefault("layout", {})["horizontal_spacing"] = float(env_h)

        if env_v := os.environ.get("ERDIAGRAM_VERTICAL_SPACING"):
            data.setdefault("layout", {})["vertical_spacing"] = float(env_v)

        env_header = os.environ.get("ERDIAGRAM_DSL_HEADER")
        if env_header is not None:
            data.setdefault("dsl", {})["include_header"] = env_header.lower() in (
                "1",
                "true",
                "yes",
                "on",
            )

    def save(self, config: Optional[ProjectConfig] = None) -> None:
        """Save configuration to disk.

        Args:
            config: Configuration to save. If None, saves current config.
        """
        if config:
            self._config = config

        if not self._config:
            raise ValueError("No configuration to save")

        self.config_dir.mkdir(parents=True, exist_ok=True)

        with open(self.config_path, "w") as f:
            toml.dump(self._config.model_dump(), f)

    def init_project(self) -> ProjectConfig:
        """Initialize a new erdiagram project with default configuration.

        Raises:
            FileExistsError: If the project is already initialized
        """
        if self.exists:
            raise FileExistsError(f"Project already exists at {self.project_dir}")

        config = ProjectConfig()
        self.save(config)
        return config
