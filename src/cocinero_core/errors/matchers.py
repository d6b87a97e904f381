"""Error matchers for converting exceptions to ProvisionErrors."""

import subprocess

from .errors import ErrorMatcher, MatchResult


class TimeoutErrorMatcher(ErrorMatcher):
    """Matches subprocess timeouts."""

    def matches(self, error: Exception) -> bool:
        return isinstance(error, subprocess.TimeoutExpired)

    def extract(self, error: Exception) -> MatchResult:
        timeout = getattr(error, "timeout", None)
        return MatchResult(
            code="ACTION_TIMEOUT",
            context={"timeout_seconds": timeout if timeout is not None else "unknown"},
        )


class OSErrorMatcher(ErrorMatcher):
    """Matches file-system and process-spawn errors."""

    def matches(self, error: Exception) -> bool:
        return isinstance(error, OSError)

    def extract(self, error: Exception) -> MatchResult:
        """Extract OS error info.

        Args:
            error: OSError raised by a collaborator

        Returns:
            MatchResult with ACTION_FAILED code and the strerror as detail
        """
        assert isinstance(error, OSError)
        context: dict[str, object] = {"detail": error.strerror or str(error)}
        if error.filename is not None:
            context["target"] = str(error.filename)
        return MatchResult(code="ACTION_FAILED", context=context)


class GenericErrorMatcher(ErrorMatcher):
    """Fallback matcher for any exception."""

    def matches(self, error: Exception) -> bool:
        return True

    def extract(self, error: Exception) -> MatchResult:
        return MatchResult(
            code="INTERNAL_ERROR",
            context={"detail": f"{type(error).__name__}: {error}"},
        )


class ErrorMatcherChain:
    """Chain of matchers, tried in order."""

    def __init__(self) -> None:
        """Initialize matcher chain with built-in matchers."""
        self.matchers: list[ErrorMatcher] = []
        self._load_builtin_matchers()

    def match(self, error: Exception) -> MatchResult:
        """Find the first matcher that handles error.

        Args:
            error: Exception to match

        Returns:
            MatchResult from first matching matcher
        """
        for matcher in self.matchers:
            if matcher.matches(error):
                return matcher.extract(error)

        # Should never reach here due to GenericErrorMatcher
        return MatchResult(code="INTERNAL_ERROR", context={"detail": str(error)})

    def _load_builtin_matchers(self) -> None:
        """Load built-in matchers in priority order."""
        # Order matters - more specific matchers first
        self.matchers = [
            TimeoutErrorMatcher(),
            OSErrorMatcher(),
            GenericErrorMatcher(),  # Fallback - must be last
        ]
