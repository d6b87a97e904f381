"""Unit tests for cookbook loading."""

import pytest

from cocinero_core.errors import ProvisionError
from cocinero_core.recipe import load_cookbook, load_recipes

SHELL_RECIPE = '[[steps]]\nkind = "shell"\ncmd = "true"\n'


@pytest.fixture
def cookbook(tmp_path):
    root = tmp_path / "cookbook"
    for name in ("zsh", "base", "nginx"):
        (root / name).mkdir(parents=True)
        (root / name / "recipe.toml").write_text(SHELL_RECIPE)
    (root / "notes").mkdir()  # no recipe inside
    (root / "README.md").write_text("not a recipe")
    return root


class TestLoadCookbook:
    def test_sorted_and_skips_non_recipes(self, cookbook):
        recipes = load_cookbook(cookbook)

        assert [r.name for r in recipes] == ["base", "nginx", "zsh"]
        assert recipes[0].base_dir == (cookbook / "base").resolve()

    def test_custom_filename(self, cookbook):
        (cookbook / "notes" / "cook.toml").write_text(SHELL_RECIPE)

        recipes = load_cookbook(cookbook, filename="cook.toml")

        assert [r.name for r in recipes] == ["notes"]

    def test_missing_directory(self, tmp_path):
        with pytest.raises(ProvisionError) as exc_info:
            load_cookbook(tmp_path / "missing")

        assert exc_info.value.code == "RECIPE_NOT_FOUND"

    def test_invalid_recipe_fails_cookbook(self, cookbook):
        (cookbook / "nginx" / "recipe.toml").write_text("[[steps]]\nkind = 'nope'\n")

        with pytest.raises(ProvisionError) as exc_info:
            load_cookbook(cookbook)

        assert exc_info.value.code == "PARSE_DEFECT"
        assert exc_info.value.recipe == "nginx"


class TestLoadRecipes:
    def test_file(self, cookbook):
        recipes = load_recipes(cookbook / "nginx" / "recipe.toml")

        assert [r.name for r in recipes] == ["nginx"]

    def test_recipe_directory(self, cookbook):
        assert [r.name for r in load_recipes(cookbook / "zsh")] == ["zsh"]

    def test_cookbook_directory(self, cookbook):
        assert len(load_recipes(cookbook)) == 3
