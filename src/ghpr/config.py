"""Configuration for ghpr runs."""

from __future__ import annotations

import os
from pathlib import Path

import yaml
from pydantic import BaseModel, Field, ValidationError, model_validator

from ghpr.errors import ConfigError


class GitConfig(BaseModel):
    """Local git configuration."""

    remote: str = Field(
        default="origin",
        description="Remote used when the branch has no upstream and no fork is found",
    )


class GitHubConfig(BaseModel):
    """GitHub API configuration."""

    token: str = Field(default="", description="GitHub personal access token")
    host: str = Field(default="github.com", description="Host matched against remote URLs")
    api_url: str = Field(
        default="https://api.github.com/graphql",
        description="GraphQL endpoint (derived from host when host is not github.com)",
    )
    timeout_seconds: float = Field(default=30.0, gt=0, description="HTTP timeout")

    @model_validator(mode="after")
    def _enterprise_api_url(self) -> GitHubConfig:
        # GitHub Enterprise Server serves GraphQL from the web host
        if "api_url" not in self.model_fields_set and self.host.lower() != "github.com":
            self.api_url = f"https://{self.host}/api/graphql"
        return self

    @property
    def token_resolved(self) -> str:
        return self.token or os.environ.get("GH_TOKEN", "") or os.environ.get("GITHUB_TOKEN", "")


class GhprConfig(BaseModel):
    """Full ghpr configuration."""

    git: GitConfig = Field(default_factory=GitConfig)
    github: GitHubConfig = Field(default_factory=GitHubConfig)

    @classmethod
    def from_file(cls, path: Path) -> GhprConfig:
        """Load config from YAML file."""
        if not path.exists():
            return cls()
        try:
            with path.open() as f:
                data = yaml.safe_load(f) or {}
            return cls.model_validate(data)
        except (OSError, yaml.YAMLError, ValidationError) as e:
            raise ConfigError(f"Invalid config file {path}: {e}") from e

    @classmethod
    def discover(cls, repo_root: Path) -> GhprConfig:
        """Discover config from repo or default locations."""
        candidates = [
            repo_root / ".ghpr" / "config.yaml",
            repo_root / "ghpr.yaml",
            Path.home() / ".ghpr" / "config.yaml",
        ]
        for p in candidates:
            if p.exists():
                return cls.from_file(p)
        return cls()
