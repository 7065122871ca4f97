"""
Pipeline configuration.

Options given by the user (in a YAML file or a dict) are reconciled with
``DEFAULTS``: user options always win, defaults only fill in what is
missing.
"""

from dataclasses import dataclass, field, fields
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from .utils.merge import merge_lists
from .utils.normalize import ensure_list, null_or_call
from .utils.paths import to_absolute_path
from .utils.text import plural, pretty_list

DEFAULTS: Dict[str, Any] = {
    "genes_of_interest": [],
    "output_dir": "outputs",
    "directed_only": True,
    "min_curation_effort": 0,
    "verbose": True,
}

_PATH_OPTIONS = ("interactions_path", "drug_targets_path", "output_dir")


@dataclass
class PipelineConfig:
    """Configuration of the drug-target network pipeline."""

    # Required: input tables
    interactions_path: str
    drug_targets_path: str

    # Genes the drug targets should be connected to
    genes_of_interest: List[str] = field(default_factory=list)

    output_dir: str = "outputs"

    # Interaction filters
    directed_only: bool = True
    min_curation_effort: int = 0

    verbose: bool = True

    def __post_init__(self):
        """Validate configuration."""
        effort = self.min_curation_effort
        if isinstance(effort, bool) or not isinstance(effort, int):
            raise ValueError(
                f"min_curation_effort must be an integer, got `{effort!r}`"
            )
        for name in ("directed_only", "verbose"):
            if not isinstance(getattr(self, name), bool):
                raise ValueError(
                    f"{name} must be true or false, got `{getattr(self, name)!r}`"
                )
        if self.min_curation_effort < 0:
            raise ValueError("min_curation_effort must be non-negative")

    @classmethod
    def from_dict(
        cls,
        options: Dict[str, Any],
        base_dir: Optional[str] = None,
    ) -> "PipelineConfig":
        """
        Create a configuration from user options.

        Args:
            options: User options
            base_dir: Directory relative paths are interpreted in; the
                current working directory by default

        Returns:
            PipelineConfig
        """
        known = {f.name for f in fields(cls)}
        unknown = set(options) - known
        if unknown:
            raise ValueError(
                f"Unknown configuration {plural(unknown, 'option')}: "
                f"{pretty_list(unknown)}"
            )

        params = merge_lists(options, DEFAULTS)

        for key in _PATH_OPTIONS:
            params[key] = null_or_call(params.get(key), to_absolute_path, base_dir)

        params["genes_of_interest"] = [
            g for g in ensure_list(params["genes_of_interest"]) if g is not None
        ]

        missing = [
            key
            for key in ("interactions_path", "drug_targets_path")
            if params[key] is None
        ]
        if missing:
            raise ValueError(
                f"Missing required configuration {plural(missing, 'option')}: "
                f"{pretty_list(missing)}"
            )

        return cls(**params)

    @classmethod
    def from_yaml(cls, path: str) -> "PipelineConfig":
        """
        Load configuration from a YAML file.

        Relative paths in the file are interpreted relative to the file's
        directory.
        """
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {path}")

        with open(config_path, "r") as f:
            options = yaml.safe_load(f) or {}

        if not isinstance(options, dict):
            raise ValueError(f"Config file must contain a mapping: {path}")

        return cls.from_dict(options, base_dir=str(config_path.parent))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary."""
        return {f.name: getattr(self, f.name) for f in fields(self)}
