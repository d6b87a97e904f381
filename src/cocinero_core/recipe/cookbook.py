"""Loading recipes from a file or a cookbook directory."""

import logging
from pathlib import Path

from cocinero_core.errors import create_error

from .parser import load_recipe
from .types import Recipe

logger = logging.getLogger(__name__)

DEFAULT_RECIPE_FILENAME = "recipe.toml"


def load_cookbook(directory: str | Path, filename: str = DEFAULT_RECIPE_FILENAME) -> list[Recipe]:
    """Load every recipe under a cookbook directory.

    Each immediate subdirectory holding ``filename`` is one recipe, named
    after the subdirectory. Plain files and subdirectories without a recipe
    are skipped. Recipes are returned sorted by name.

    Args:
        directory: Cookbook directory
        filename: Recipe file name inside each subdirectory

    Returns:
        Parsed recipes

    Raises:
        ProvisionError(RECIPE_NOT_FOUND) if directory does not exist
        ProvisionError(PARSE_DEFECT) if any recipe is invalid
    """
    cookbook = Path(directory)
    if not cookbook.is_dir():
        raise create_error("RECIPE_NOT_FOUND", path=str(cookbook))

    recipes: list[Recipe] = []
    for entry in sorted(cookbook.iterdir(), key=lambda p: p.name):
        if not entry.is_dir():
            logger.debug("Ignoring non directory entry: %s", entry.name)
            continue

        recipe_path = entry / filename
        if not recipe_path.is_file():
            logger.debug("Ignoring directory %s without %s", entry.name, filename)
            continue

        recipes.append(load_recipe(recipe_path, name=entry.name))

    logger.info("Loaded %d recipes from %s", len(recipes), cookbook)
    return recipes


def load_recipes(path: str | Path, filename: str = DEFAULT_RECIPE_FILENAME) -> list[Recipe]:
    """Load recipes from whatever path the user gave.

    - A file is a single recipe.
    - A directory containing ``filename`` is a single recipe.
    - Any other directory is a cookbook.

    Args:
        path: Recipe file, recipe directory or cookbook directory
        filename: Recipe file name used for directories

    Returns:
        Parsed recipes in execution order
    """
    target = Path(path)
    if target.is_file():
        return [load_recipe(target)]
    if (target / filename).is_file():
        return [load_recipe(target / filename)]
    return load_cookbook(target, filename=filename)
