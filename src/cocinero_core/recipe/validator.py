"""Recipe validation."""

from cocinero_core.template import extract_placeholders, has_placeholders
from cocinero_core.types import ValidationIssue, ValidationResult

from .modes import is_valid_mode
from .types import InstallStep, Recipe, RunStep, ShellStep, Step


def _templated_field(step: Step) -> tuple[str, str] | None:
    """Return (field name, value) of the step's renderable field, if any."""
    match step:
        case InstallStep(dest=dest):
            return "dest", dest
        case ShellStep(cmd=cmd):
            return "cmd", cmd
        case RunStep():
            return None
    return None


def _literal_fields(step: Step) -> list[tuple[str, str]]:
    """Return the fields that are never rendered."""
    match step:
        case InstallStep(src=src, mode=mode):
            fields = [("src", src)]
            if mode is not None:
                fields.append(("mode", mode))
            return fields
        case RunStep(script=script):
            return [("script", script)]
    return []


class RecipeValidator:
    """Validate parsed recipes before building a plan.

    Everything reported as an error here would also make plan building
    fail; the validator reports all of them at once instead of stopping at
    the first.
    """

    def validate(self, recipe: Recipe, check_files: bool = True) -> ValidationResult:
        """Validate a recipe.

        Checks:
        - Templated fields only reference variables every set defines
        - File modes are octal permission strings
        - Source files and scripts exist (if check_files=True)
        - Templated steps have variable sets to expand over
        - Placeholders only appear in fields that get rendered

        Args:
            recipe: Recipe to validate
            check_files: Whether to check src/script existence

        Returns:
            ValidationResult with errors and warnings
        """
        errors: list[ValidationIssue] = []
        warnings: list[ValidationIssue] = []

        for index, step in enumerate(recipe.steps):
            path = f"steps[{index}]"
            templated = _templated_field(step)

            if step.template:
                if not recipe.template_vars:
                    warnings.append(
                        ValidationIssue(
                            path=f"{path}.template",
                            message="templated step has no template_vars and will not run",
                            severity="warning",
                        )
                    )
                if templated is not None:
                    field_name, value = templated
                    errors.extend(self._check_references(recipe, f"{path}.{field_name}", value))
            elif templated is not None and has_placeholders(templated[1]):
                warnings.append(
                    ValidationIssue(
                        path=f"{path}.{templated[0]}",
                        message="contains placeholders but template is not set; used literally",
                        severity="warning",
                    )
                )

            for field_name, value in _literal_fields(step):
                if has_placeholders(value):
                    warnings.append(
                        ValidationIssue(
                            path=f"{path}.{field_name}",
                            message=f"{field_name} is never rendered; placeholders are used literally",
                            severity="warning",
                        )
                    )

            if isinstance(step, InstallStep) and step.mode is not None:
                if not is_valid_mode(step.mode):
                    errors.append(
                        ValidationIssue(
                            path=f"{path}.mode",
                            message=f"invalid file mode {step.mode!r}",
                            severity="error",
                        )
                    )

            if check_files:
                errors.extend(self._check_source(recipe, step, path))

        return ValidationResult(valid=True, errors=errors, warnings=warnings)

    def _check_references(self, recipe: Recipe, path: str, value: str) -> list[ValidationIssue]:
        issues: list[ValidationIssue] = []
        names = extract_placeholders(value)
        for set_index, variables in enumerate(recipe.template_vars):
            missing = [name for name in dict.fromkeys(names) if name not in variables]
            for name in missing:
                issues.append(
                    ValidationIssue(
                        path=path,
                        message=f"undefined variable '{name}' in template_vars[{set_index}]",
                        severity="error",
                    )
                )
        return issues

    def _check_source(self, recipe: Recipe, step: Step, path: str) -> list[ValidationIssue]:
        match step:
            case InstallStep(src=src):
                field_name, value = "src", src
            case RunStep(script=script):
                field_name, value = "script", script
            case _:
                return []

        resolved = recipe.resolve_path(value)
        if resolved.exists():
            return []
        return [
            ValidationIssue(
                path=f"{path}.{field_name}",
                message=f"file not found: {resolved}",
                severity="error",
            )
        ]
