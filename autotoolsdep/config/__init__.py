"""Configuration module for autotoolsdep.

This module provides YAML parsing and validation for dependency recipes.
"""

from autotoolsdep.config.recipe import (
    DependencyRecipe,
    parse_recipe,
    parse_recipe_data,
    parse_parallelism,
)

__all__ = [
    "DependencyRecipe",
    "parse_recipe",
    "parse_recipe_data",
    "parse_parallelism",
]
