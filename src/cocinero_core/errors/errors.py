"""Cocinero error types."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from datetime import UTC, datetime
from enum import Enum
from typing import Any


class ErrorCategory(str, Enum):
    """Error source categories."""

    PARSE = "PARSE"
    TEMPLATE = "TEMPLATE"
    PLAN = "PLAN"
    EXECUTION = "EXECUTION"
    HOOK = "HOOK"
    SYSTEM = "SYSTEM"


@dataclass
class ProvisionError(Exception):
    """Structured error with context. Base exception for all cocinero errors."""

    # Identity
    code: str  # e.g., "UNDEFINED_VARIABLE"
    category: ErrorCategory

    # Messages
    message: str  # Human-readable summary
    detail: str | None = None  # Extended explanation
    suggestion: str | None = None  # Actionable fix

    # Context
    step_index: int | None = None  # Which recipe step
    step_kind: str | None = None  # install | shell | run
    target: str | None = None  # Rendered command or path involved
    recipe: str | None = None  # Recipe name
    exit_code: int | None = None  # Process exit status, for failed commands

    # Error chain (max depth 3)
    cause: "ProvisionError | None" = None

    # Metadata
    timestamp: datetime = field(default_factory=lambda: datetime.now(UTC))

    def __post_init__(self) -> None:
        """Set Exception message."""
        super().__init__(self.message)

    def __str__(self) -> str:
        location = self.location
        text = f"{location}: {self.message}" if location else self.message
        if self.detail:
            text += f" ({self.detail})"
        return text

    @property
    def location(self) -> str | None:
        """Short description of where the error happened, if known."""
        parts: list[str] = []
        if self.recipe:
            parts.append(f"recipe '{self.recipe}'")
        if self.step_index is not None:
            step = f"step {self.step_index}"
            if self.step_kind:
                step += f" ({self.step_kind})"
            parts.append(step)
        return ", ".join(parts) or None

    def to_dict(self) -> dict[str, Any]:
        """Serialize for reports and JSON logs.

        Returns:
            Dictionary representation of the error
        """
        return {
            "code": self.code,
            "category": self.category.value,
            "message": self.message,
            "detail": self.detail,
            "suggestion": self.suggestion,
            "step_index": self.step_index,
            "step_kind": self.step_kind,
            "target": self.target,
            "recipe": self.recipe,
            "exit_code": self.exit_code,
            "timestamp": self.timestamp.isoformat(),
            "cause": self.cause.to_dict() if self.cause else None,
        }

    def with_context(
        self,
        step_index: int | None = None,
        step_kind: str | None = None,
        target: str | None = None,
        recipe: str | None = None,
    ) -> "ProvisionError":
        """Return copy with additional context.

        Existing context wins over the new values, so the innermost
        annotation (closest to the failure) is kept.

        Args:
            step_index: Optional step index
            step_kind: Optional step kind
            target: Optional rendered command or path
            recipe: Optional recipe name

        Returns:
            New ProvisionError instance with updated context
        """
        return ProvisionError(
            code=self.code,
            category=self.category,
            message=self.message,
            detail=self.detail,
            suggestion=self.suggestion,
            step_index=self.step_index if self.step_index is not None else step_index,
            step_kind=self.step_kind or step_kind,
            target=self.target or target,
            recipe=self.recipe or recipe,
            exit_code=self.exit_code,
            cause=self.cause,
            timestamp=self.timestamp,
        )


@dataclass
class ErrorTemplate:
    """Template for creating errors."""

    code: str
    category: ErrorCategory
    message_template: str  # "Source file '{path}' not found"
    detail_template: str | None = None
    suggestion_template: str | None = None


@dataclass
class MatchResult:
    """Result of matching an exception."""

    code: str
    context: dict[str, Any]


class ErrorMatcher(ABC):
    """Base class for exception matchers."""

    @abstractmethod
    def matches(self, error: Exception) -> bool:
        """Check if this matcher handles the error.

        Args:
            error: Exception to check

        Returns:
            True if this matcher can handle the error
        """

    @abstractmethod
    def extract(self, error: Exception) -> MatchResult:
        """Extract error code and context from the exception.

        Args:
            error: Exception to extract from

        Returns:
            MatchResult with error code and context
        """
