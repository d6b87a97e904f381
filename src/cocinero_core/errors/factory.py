"""Error factory for creating ProvisionErrors from any exception type."""

from typing import Any

from .errors import ProvisionError
from .matchers import ErrorMatcherChain
from .registry import ErrorRegistry


class ErrorFactory:
    """Creates ProvisionErrors from any exception type."""

    def __init__(
        self,
        registry: ErrorRegistry | None = None,
        matcher_chain: ErrorMatcherChain | None = None,
    ):
        """Initialize error factory.

        Args:
            registry: Error registry (defaults to new ErrorRegistry())
            matcher_chain: Matcher chain (defaults to new ErrorMatcherChain())
        """
        self.registry = registry or ErrorRegistry()
        self.matcher_chain = matcher_chain or ErrorMatcherChain()

    def from_exception(
        self,
        error: Exception,
        **context: Any,
    ) -> ProvisionError:
        """Convert any exception to ProvisionError.

        Context given here (step_index, step_kind, target, recipe) fills the
        gaps in what the matcher extracted; the matcher's own values win.

        Args:
            error: Exception to convert
            **context: Additional context variables

        Returns:
            ProvisionError instance
        """
        if isinstance(error, ProvisionError):
            return error.with_context(
                step_index=context.get("step_index"),
                step_kind=context.get("step_kind"),
                target=context.get("target"),
                recipe=context.get("recipe"),
            )

        match_result = self.matcher_chain.match(error)

        merged = dict(context)
        merged.update({k: v for k, v in match_result.context.items() if v is not None})
        # The rendered command is the more useful target for process errors
        if "target" in context and context["target"]:
            merged["target"] = context["target"]

        return self.registry.create(code=match_result.code, context=merged)

    def create(
        self,
        code: str,
        context: dict[str, Any] | None = None,
        **kwargs: Any,
    ) -> ProvisionError:
        """Create ProvisionError directly from code.

        Args:
            code: Error code
            context: Context variables for template interpolation
            **kwargs: Additional context variables

        Returns:
            ProvisionError instance
        """
        merged_context = dict(context or {})
        merged_context.update(kwargs)

        return self.registry.create(code=code, context=merged_context)


# Convenience singleton
_default_factory: ErrorFactory | None = None


def get_error_factory() -> ErrorFactory:
    """Get default error factory singleton."""
    global _default_factory  # noqa: PLW0603
    if _default_factory is None:
        _default_factory = ErrorFactory()
    return _default_factory


def create_error(code: str, **context: Any) -> ProvisionError:
    """Convenience function to create error.

    Args:
        code: Error code
        **context: Context variables for template interpolation

    Returns:
        ProvisionError instance
    """
    return get_error_factory().create(code, context)
