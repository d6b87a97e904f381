"""Recipe documents: model, parsing, validation and loading."""

from .cookbook import DEFAULT_RECIPE_FILENAME, load_cookbook, load_recipes
from .modes import format_mode, is_valid_mode, parse_mode
from .parser import load_recipe, parse_recipe_data, parse_recipe_toml, parse_recipe_yaml
from .types import InstallStep, Recipe, RunStep, ShellStep, Step, VariableSet
from .validator import RecipeValidator

__all__ = [
    "Recipe",
    "Step",
    "InstallStep",
    "ShellStep",
    "RunStep",
    "VariableSet",
    "parse_recipe_data",
    "parse_recipe_toml",
    "parse_recipe_yaml",
    "load_recipe",
    "load_cookbook",
    "load_recipes",
    "DEFAULT_RECIPE_FILENAME",
    "RecipeValidator",
    "parse_mode",
    "is_valid_mode",
    "format_mode",
]
