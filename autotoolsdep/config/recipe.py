"""YAML dependency recipe parser for autotoolsdep.

A recipe describes one configure/make dependency to fetch and build:

    version: 1
    dependency:
      name: binutils
      url: https://ftp.gnu.org/gnu/binutils/binutils-2.41.tar.gz
      source_dir: binutils-2.41
      configure_args: [--disable-werror]
      env: {CFLAGS: -O2}
      timeout: 300
      parallelism: auto
"""

import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional

import yaml

from autotoolsdep.core.exceptions import ConfigError

RECIPE_VERSION = 1
DEFAULT_TIMEOUT = 30.0


def default_parallelism() -> int:
    """Parallelism used for 'auto': the CPU count, at least 1."""
    return os.cpu_count() or 1


@dataclass(frozen=True)
class DependencyRecipe:
    """A single dependency to fetch and build."""

    url: str
    source_dir: str
    name: Optional[str] = None
    configure_args: List[str] = field(default_factory=list)
    env: Dict[str, str] = field(default_factory=dict)
    timeout: float = DEFAULT_TIMEOUT
    parallelism: int = field(default_factory=default_parallelism)

    def __post_init__(self):
        """Validate recipe after initialization."""
        if not self.url:
            raise ConfigError("Recipe url cannot be empty")
        if not self.source_dir:
            raise ConfigError("Recipe source_dir cannot be empty")
        if not math.isfinite(self.timeout) or self.timeout < 0:
            raise ConfigError(
                f"Recipe timeout must be finite and non-negative, got {self.timeout}"
            )
        if self.parallelism < 1:
            raise ConfigError(
                f"Recipe parallelism must be at least 1, got {self.parallelism}"
            )


def parse_recipe(recipe_path: Path) -> DependencyRecipe:
    """
    Parse a dependency recipe file.

    Args:
        recipe_path: Path to the YAML recipe

    Returns:
        Parsed and validated recipe

    Raises:
        ConfigError: If the recipe is missing or invalid
    """
    recipe_path = Path(recipe_path)
    if not recipe_path.exists():
        raise ConfigError(f"Recipe file not found: {recipe_path}")

    try:
        with open(recipe_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise ConfigError(f"Invalid YAML syntax in {recipe_path}: {e}") from e

    if data is None:
        raise ConfigError(f"Recipe file is empty: {recipe_path}")

    return parse_recipe_data(data)


def parse_recipe_data(data: Any) -> DependencyRecipe:
    """Validate an already-loaded recipe mapping."""
    if not isinstance(data, dict):
        raise ConfigError("Recipe must be a mapping")

    if "version" not in data:
        raise ConfigError("Missing required field: version")
    if data["version"] != RECIPE_VERSION:
        raise ConfigError(
            f"Unsupported version: {data['version']} (expected {RECIPE_VERSION})"
        )

    dep = data.get("dependency")
    if not isinstance(dep, dict):
        raise ConfigError("Missing required section: dependency")

    for key in ("url", "source_dir"):
        if not isinstance(dep.get(key), str) or not dep[key]:
            raise ConfigError(f"dependency.{key} must be a non-empty string")

    return DependencyRecipe(
        url=dep["url"],
        source_dir=dep["source_dir"],
        name=dep.get("name"),
        configure_args=_parse_args(dep.get("configure_args", [])),
        env=_parse_env(dep.get("env", {})),
        timeout=_parse_timeout(dep.get("timeout", DEFAULT_TIMEOUT)),
        parallelism=parse_parallelism(dep.get("parallelism", "auto")),
    )


def _parse_args(value: Any) -> List[str]:
    if not isinstance(value, list) or not all(isinstance(a, str) for a in value):
        raise ConfigError("dependency.configure_args must be a list of strings")
    return list(value)


def _parse_env(value: Any) -> Dict[str, str]:
    if not isinstance(value, dict):
        raise ConfigError("dependency.env must be a mapping")
    env = {}
    for name, val in value.items():
        if not isinstance(name, str) or not name:
            raise ConfigError(f"Invalid environment variable name: {name!r}")
        # YAML turns unquoted 1 / true into int / bool
        if isinstance(val, (bool, int, float)):
            val = str(val)
        if not isinstance(val, str):
            raise ConfigError(f"Environment variable {name} must be a string")
        env[name] = val
    return env


def _parse_timeout(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"dependency.timeout must be a number, got {value!r}")
    return float(value)


def parse_parallelism(value: Any) -> int:
    """
    Parse a parallelism setting: 'auto' or a positive integer.

    Example:
        >>> parse_parallelism("8")
        8
    """
    if value == "auto":
        return default_parallelism()
    if isinstance(value, bool):
        raise ConfigError(f"Invalid parallelism: {value!r}")
    try:
        jobs = int(value)
    except (TypeError, ValueError):
        raise ConfigError(f"Invalid parallelism: {value!r} (expected 'auto' or a number)")
    if jobs < 1:
        raise ConfigError(f"Parallelism must be at least 1, got {jobs}")
    return jobs
