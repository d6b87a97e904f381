"""Recipe parsing (TOML and YAML)."""

import tomllib
from pathlib import Path
from typing import Any

import yaml

from cocinero_core.errors import create_error

from .types import InstallStep, Recipe, RunStep, ShellStep, Step, VariableSet

TOP_LEVEL_KEYS = {"packages", "systemd", "template_vars", "steps"}

# kind -> (required keys, optional keys), "template" and "kind" are always allowed
STEP_KEYS: dict[str, tuple[set[str], set[str]]] = {
    "install": ({"src", "dest"}, {"mode"}),
    "shell": ({"cmd"}, set()),
    "run": ({"script"}, set()),
}

KIND_ALIASES = {"copy": "install"}

YAML_SUFFIXES = {".yaml", ".yml"}


class _Issues:
    """Collects parse issues so one error reports all of them."""

    def __init__(self) -> None:
        self.messages: list[str] = []

    def add(self, path: str, message: str) -> None:
        self.messages.append(f"{path}: {message}")

    def raise_if_any(self, recipe_name: str) -> None:
        if self.messages:
            raise create_error(
                "PARSE_DEFECT",
                recipe=recipe_name,
                detail="; ".join(self.messages),
            )


def parse_recipe_toml(
    content: str,
    name: str = "recipe",
    base_dir: Path | None = None,
    source_path: Path | None = None,
) -> Recipe:
    """Parse TOML content into a Recipe.

    Args:
        content: TOML document
        name: Recipe name
        base_dir: Directory relative step paths resolve against
        source_path: Optional source file path

    Returns:
        Parsed recipe

    Raises:
        ProvisionError(PARSE_DEFECT) if the document is invalid
    """
    try:
        data = tomllib.loads(content)
    except tomllib.TOMLDecodeError as e:
        raise create_error("PARSE_DEFECT", recipe=name, detail=f"Invalid TOML: {e}") from e

    return parse_recipe_data(data, name=name, base_dir=base_dir, source_path=source_path)


def parse_recipe_yaml(
    content: str,
    name: str = "recipe",
    base_dir: Path | None = None,
    source_path: Path | None = None,
) -> Recipe:
    """Parse YAML content into a Recipe.

    An empty document is a recipe with no steps.

    Raises:
        ProvisionError(PARSE_DEFECT) if the document is invalid
    """
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise create_error("PARSE_DEFECT", recipe=name, detail=f"Invalid YAML: {e}") from e

    if data is None:
        data = {}

    return parse_recipe_data(data, name=name, base_dir=base_dir, source_path=source_path)


def load_recipe(path: str | Path, name: str | None = None) -> Recipe:
    """Load a recipe file, choosing the format by suffix.

    ``.yaml`` and ``.yml`` files are YAML, everything else is TOML.

    Args:
        path: Recipe file path
        name: Recipe name (defaults to the containing directory name)

    Returns:
        Parsed recipe with base_dir set to the file's directory

    Raises:
        ProvisionError(RECIPE_NOT_FOUND) if the file does not exist
        ProvisionError(PARSE_DEFECT) if the document is invalid
    """
    recipe_path = Path(path)
    if not recipe_path.is_file():
        raise create_error("RECIPE_NOT_FOUND", path=str(recipe_path))

    base_dir = recipe_path.parent.resolve()
    recipe_name = name or base_dir.name or recipe_path.stem

    try:
        content = recipe_path.read_text()
    except (OSError, UnicodeDecodeError) as e:
        raise create_error(
            "PARSE_DEFECT", recipe=recipe_name, detail=f"Cannot read {recipe_path}: {e}"
        ) from e

    parse = parse_recipe_yaml if recipe_path.suffix in YAML_SUFFIXES else parse_recipe_toml
    return parse(content, name=recipe_name, base_dir=base_dir, source_path=recipe_path)


def parse_recipe_data(
    data: Any,
    name: str = "recipe",
    base_dir: Path | None = None,
    source_path: Path | None = None,
) -> Recipe:
    """Validate a decoded document and build a Recipe.

    Unknown keys, wrong types and missing kind-specific keys are all
    rejected; every problem found is listed in the error detail.

    Args:
        data: Decoded document (from TOML or YAML)
        name: Recipe name
        base_dir: Directory relative step paths resolve against
        source_path: Optional source file path

    Returns:
        Parsed recipe

    Raises:
        ProvisionError(PARSE_DEFECT) if the document is invalid
    """
    issues = _Issues()

    if not isinstance(data, dict):
        issues.add("<root>", "recipe must be a table/mapping")
        issues.raise_if_any(name)

    for key in data:
        if key not in TOP_LEVEL_KEYS:
            issues.add(str(key), "unknown key")

    packages = _string_list(data.get("packages", []), "packages", issues)
    systemd_units = _string_list(data.get("systemd", []), "systemd", issues)
    template_vars = _variable_sets(data.get("template_vars", []), issues)

    steps: list[Step] = []
    raw_steps = data.get("steps", [])
    if not isinstance(raw_steps, list):
        issues.add("steps", "must be a list of step tables")
        raw_steps = []

    for index, raw_step in enumerate(raw_steps):
        step = _parse_step(raw_step, f"steps[{index}]", issues)
        if step is not None:
            steps.append(step)

    issues.raise_if_any(name)

    return Recipe(
        name=name,
        packages=packages,
        systemd_units=systemd_units,
        template_vars=template_vars,
        steps=steps,
        base_dir=base_dir or Path.cwd(),
        source_path=source_path,
    )


def _string_list(value: Any, path: str, issues: _Issues) -> list[str]:
    if not isinstance(value, list):
        issues.add(path, "must be a list of strings")
        return []

    result: list[str] = []
    for i, item in enumerate(value):
        if isinstance(item, str):
            result.append(item)
        else:
            issues.add(f"{path}[{i}]", "must be a string")
    return result


def _variable_sets(value: Any, issues: _Issues) -> list[VariableSet]:
    if not isinstance(value, list):
        issues.add("template_vars", "must be a list of tables")
        return []

    result: list[VariableSet] = []
    for i, raw in enumerate(value):
        path = f"template_vars[{i}]"
        if not isinstance(raw, dict):
            issues.add(path, "must be a table of name = value")
            continue

        variables: VariableSet = {}
        for key, item in raw.items():
            converted = _scalar_to_string(item)
            if converted is None:
                issues.add(f"{path}.{key}", "value must be a string, number or boolean")
                continue
            variables[str(key)] = converted
        result.append(variables)
    return result


def _scalar_to_string(value: Any) -> str | None:
    # bool before int: bool is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    return None


def _parse_step(raw: Any, path: str, issues: _Issues) -> Step | None:
    if not isinstance(raw, dict):
        issues.add(path, "step must be a table")
        return None

    raw_kind = raw.get("kind")
    if raw_kind is None:
        issues.add(f"{path}.kind", "missing required key")
        return None
    if not isinstance(raw_kind, str) or KIND_ALIASES.get(raw_kind, raw_kind) not in STEP_KEYS:
        issues.add(f"{path}.kind", f"unknown step kind {raw_kind!r}")
        return None

    kind = KIND_ALIASES.get(raw_kind, raw_kind)
    required, optional = STEP_KEYS[kind]
    allowed = required | optional | {"kind", "template"}

    ok = True
    for key in raw:
        if key not in allowed:
            issues.add(f"{path}.{key}", f"unknown key for {raw_kind} step")
            ok = False

    template = raw.get("template", False)
    if not isinstance(template, bool):
        issues.add(f"{path}.template", "must be a boolean")
        ok = False

    for key in sorted(required | optional):
        if key not in raw:
            if key in required:
                issues.add(f"{path}.{key}", "missing required key")
                ok = False
            continue
        if not isinstance(raw[key], str):
            hint = " (quote file modes, e.g. \"0644\")" if key == "mode" else ""
            issues.add(f"{path}.{key}", f"must be a string{hint}")
            ok = False

    if not ok:
        return None

    match kind:
        case "install":
            return InstallStep(
                src=raw["src"],
                dest=raw["dest"],
                mode=raw.get("mode"),
                template=template,
            )
        case "shell":
            return ShellStep(cmd=raw["cmd"], template=template)
        case "run":
            return RunStep(script=raw["script"], template=template)
    return None
