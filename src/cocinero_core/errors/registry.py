"""Error registry for creating errors from templates."""

from typing import Any

from .errors import ErrorCategory, ErrorTemplate, ProvisionError


class ErrorRegistry:
    """Registry of error templates. Creates errors from templates + context."""

    def __init__(self) -> None:
        """Initialize error registry with built-in templates."""
        self._templates: dict[str, ErrorTemplate] = {}
        self._load_builtin_templates()

    def get_template(self, code: str) -> ErrorTemplate | None:
        """Get template by error code.

        Args:
            code: Error code to look up

        Returns:
            ErrorTemplate if found, None otherwise
        """
        return self._templates.get(code)

    def list_codes(self) -> list[str]:
        """List all registered error codes."""
        return list(self._templates.keys())

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        cause: ProvisionError | None = None,
    ) -> ProvisionError:
        """Create error instance from template + context.

        An explicit ``detail`` in the context overrides the template's
        detail text.

        Args:
            code: Error code
            context: Context variables for template interpolation
            cause: Optional cause error

        Returns:
            ProvisionError instance

        Raises:
            ValueError: If error code not found
        """
        template = self.get_template(code)
        if not template:
            msg = f"Unknown error code: {code}"
            raise ValueError(msg)

        context = context or {}

        message = self._interpolate(template.message_template, context)
        if "detail" in context and context["detail"] is not None:
            detail: str | None = str(context["detail"])
        else:
            detail = self._interpolate(template.detail_template, context)
        suggestion = self._interpolate(template.suggestion_template, context)

        if message is None:
            message = f"Error {code}"

        return ProvisionError(
            code=template.code,
            category=template.category,
            message=message,
            detail=detail,
            suggestion=suggestion,
            step_index=context.get("step_index"),
            step_kind=context.get("step_kind"),
            target=context.get("target"),
            recipe=context.get("recipe"),
            exit_code=context.get("exit_code"),
            cause=cause,
        )

    def _interpolate(
        self,
        template: str | None,
        context: dict[str, Any],
    ) -> str | None:
        """Safe string interpolation.

        Args:
            template: Template string with {var} placeholders
            context: Context variables

        Returns:
            Interpolated string or None if template is None
        """
        if template is None:
            return None

        try:
            return template.format(**context)
        except (KeyError, IndexError):
            # Missing context variable - return template as-is
            return template

    def _load_builtin_templates(self) -> None:
        """Load hardcoded built-in templates."""
        # PARSE Errors
        self._templates["PARSE_DEFECT"] = ErrorTemplate(
            code="PARSE_DEFECT",
            category=ErrorCategory.PARSE,
            message_template="Invalid recipe",
            detail_template="The recipe document could not be parsed",
            suggestion_template="Check the recipe against the documented keys",
        )

        self._templates["RECIPE_NOT_FOUND"] = ErrorTemplate(
            code="RECIPE_NOT_FOUND",
            category=ErrorCategory.PARSE,
            message_template="Recipe '{path}' not found",
            detail_template="No recipe file or cookbook directory exists at this path",
            suggestion_template="Check the path passed on the command line",
        )

        # TEMPLATE Errors
        self._templates["UNDEFINED_VARIABLE"] = ErrorTemplate(
            code="UNDEFINED_VARIABLE",
            category=ErrorCategory.TEMPLATE,
            message_template="Undefined template variable '{variable}'",
            detail_template="The placeholder '{{{{{variable}}}}}' has no value in the variable set",
            suggestion_template="Add '{variable}' to every entry of template_vars",
        )

        # PLAN Errors
        self._templates["SOURCE_NOT_FOUND"] = ErrorTemplate(
            code="SOURCE_NOT_FOUND",
            category=ErrorCategory.PLAN,
            message_template="Source file '{path}' not found",
            detail_template="The file referenced by the step does not exist",
            suggestion_template="Check the path; relative paths resolve against the recipe directory",
        )

        self._templates["INVALID_MODE"] = ErrorTemplate(
            code="INVALID_MODE",
            category=ErrorCategory.PLAN,
            message_template="Invalid file mode '{mode}'",
            detail_template="Modes are octal permission strings such as '0644'",
            suggestion_template="Use an octal mode between 0000 and 7777",
        )

        # EXECUTION Errors
        self._templates["ACTION_FAILED"] = ErrorTemplate(
            code="ACTION_FAILED",
            category=ErrorCategory.EXECUTION,
            message_template="Action failed: {target}",
            detail_template="The action did not complete successfully",
            suggestion_template=(
                "Fix the cause and re-run; steps before this one have already been applied"
            ),
        )

        self._templates["ACTION_TIMEOUT"] = ErrorTemplate(
            code="ACTION_TIMEOUT",
            category=ErrorCategory.EXECUTION,
            message_template="Action timed out after {timeout_seconds}s: {target}",
            detail_template="The process did not exit within the configured timeout",
            suggestion_template="Increase execution.action_timeout or check the command",
        )

        # HOOK Errors
        self._templates["HOOK_FAILED"] = ErrorTemplate(
            code="HOOK_FAILED",
            category=ErrorCategory.HOOK,
            message_template="Post-provision hook failed: {hook}",
            detail_template="All recipe steps were applied; only the hook failed",
            suggestion_template="Run the hook command manually to see the full output",
        )

        # SYSTEM Errors
        self._templates["CONFIG_INVALID"] = ErrorTemplate(
            code="CONFIG_INVALID",
            category=ErrorCategory.SYSTEM,
            message_template="Invalid configuration",
            detail_template="The cocinero configuration is invalid",
            suggestion_template="Check the configuration file",
        )

        self._templates["INTERNAL_ERROR"] = ErrorTemplate(
            code="INTERNAL_ERROR",
            category=ErrorCategory.SYSTEM,
            message_template="Internal error",
            detail_template="{detail}",
            suggestion_template="This is a bug, please report it",
        )
