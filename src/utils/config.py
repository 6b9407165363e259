"""Configuration loader.

Reads YAML configuration files and exposes the numeric tolerances used
by the kernel as a :class:`KernelSettings` dataclass.  The default
configuration lives in ``configs/roadgeom.yaml`` at the project root.
"""

from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Union

import yaml

from .logging import get_logger

logger = get_logger(__name__)

DEFAULT_CONFIG_PATH = Path(__file__).resolve().parents[2] / "configs" / "roadgeom.yaml"


def load_config(path: Union[str, Path]) -> Dict[str, Any]:
    """Load a YAML configuration file into a dictionary.

    Parameters
    ----------
    path : str or Path
        Path to the YAML configuration file.

    Returns
    -------
    dict
        Parsed configuration dictionary.  Returns an empty dict if the
        file does not exist or is empty.

    Raises
    ------
    ValueError
        If the file does not contain a YAML mapping.
    """
    cfg_path = Path(path)
    if not cfg_path.is_file():
        logger.warning("Configuration file not found: %s", cfg_path)
        return {}
    with open(cfg_path, 'r', encoding='utf-8') as f:
        cfg = yaml.safe_load(f) or {}
    if not isinstance(cfg, dict):
        raise ValueError(f"configuration root must be a mapping: {cfg_path}")
    return cfg


@dataclass
class KernelSettings:
    """Default tolerances of the geometry kernel."""

    rdp_epsilon: float = 0.1
    """Maximum perpendicular deviation when simplifying polylines (m)."""

    search_tolerance: float = 1e-4
    """Absolute tolerance of golden-section searches along a line (m)."""

    mesh_epsilon: float = 0.1
    """Maximum chord error when sampling lane borders for meshes (m)."""

    @classmethod
    def from_dict(cls, cfg: Dict[str, Any]) -> "KernelSettings":
        """Build settings from the ``kernel`` section of a configuration.

        Unknown keys are ignored with a warning.
        """
        section = cfg.get("kernel", {}) or {}
        known = {f.name for f in fields(cls)}
        unknown = set(section) - known
        if unknown:
            logger.warning("Ignoring unknown kernel settings: %s", sorted(unknown))
        values = {k: float(v) for k, v in section.items() if k in known}
        for name, value in values.items():
            if value <= 0.0:
                raise ValueError(f"{name} must be positive, got {value}")
        return cls(**values)

    @classmethod
    def from_config(cls, path: Union[str, Path] = DEFAULT_CONFIG_PATH) -> "KernelSettings":
        return cls.from_dict(load_config(path))
