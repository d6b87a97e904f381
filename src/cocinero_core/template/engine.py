"""Template rendering."""

from collections.abc import Mapping

from cocinero_core.errors import create_error

from .parser import PLACEHOLDER_PATTERN, has_placeholders


class TemplateEngine:
    """Render {{ name }} placeholders against a variable set.

    Supports:
    - Plain substitution: {{username}} or {{ username }}

    Does NOT support:
    - Expressions, filters, or dotted access
    - Nested placeholders
    - Escaping

    Rendering is a single left-to-right pass; substituted values are never
    rescanned, so a value containing "{{x}}" is inserted literally.
    """

    def render(self, template: str, variables: Mapping[str, str]) -> str:
        """Render a template string.

        Args:
            template: String that may contain {{ }} placeholders
            variables: Variable set to substitute from

        Returns:
            Rendered string (the input itself when it has no placeholders)

        Raises:
            ProvisionError(UNDEFINED_VARIABLE) if a placeholder has no value
        """
        if not has_placeholders(template):
            return template

        parts: list[str] = []
        position = 0
        for match in PLACEHOLDER_PATTERN.finditer(template):
            name = match.group(1).strip()
            if name not in variables:
                raise create_error("UNDEFINED_VARIABLE", variable=name, target=template)
            parts.append(template[position : match.start()])
            parts.append(str(variables[name]))
            position = match.end()
        parts.append(template[position:])
        return "".join(parts)

    def render_optional(self, template: str, variables: Mapping[str, str] | None) -> str:
        """Render template when a variable set is given, else return it literally."""
        if variables is None:
            return template
        return self.render(template, variables)


_default_engine = TemplateEngine()


def render(template: str, variables: Mapping[str, str]) -> str:
    """Render template with the module-level engine."""
    return _default_engine.render(template, variables)
