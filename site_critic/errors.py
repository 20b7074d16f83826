"""Structured error types with recovery suggestions.

Only ``ConfigurationError`` is surfaced to callers of ``assess()`` and
``improve()``. Evaluation and fixer failures are recorded in reports and
resolved as abstentions or skipped fixes.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class ErrorCategory(Enum):
    """Categories of errors for organization and handling."""

    CONFIGURATION = "configuration"  # Invalid weights, thresholds, config file
    ARTIFACT = "artifact"  # Artifact could not be loaded or written
    EVALUATION = "evaluation"  # Evaluator could not score a snapshot
    RUNTIME = "runtime"  # Unexpected errors


@dataclass
class CriticError(Exception):
    """Base class for structured errors with recovery suggestions.

    Attributes:
        category: Error category for grouping.
        message: Human-readable error message.
        suggestion: Optional actionable recovery suggestion.
        details: Optional additional details dict.
        exit_code: Exit code to use when this error causes termination.
    """

    category: ErrorCategory
    message: str
    suggestion: str | None = None
    details: dict[str, Any] | None = field(default_factory=dict)
    exit_code: int = 1

    def __post_init__(self) -> None:
        """Initialize the exception with the message."""
        super().__init__(self.message)

    def format(self, use_color: bool = True) -> str:
        """Format the error for display.

        Args:
            use_color: Whether to include ANSI color codes.

        Returns:
            Formatted error string with suggestion if available.
        """
        red = "\033[91m" if use_color else ""
        cyan = "\033[96m" if use_color else ""
        dim = "\033[2m" if use_color else ""
        reset = "\033[0m" if use_color else ""

        lines = [f"{red}Error:{reset} {self.message}"]

        if self.suggestion:
            lines.append(f"{cyan}Suggestion:{reset} {self.suggestion}")

        if self.details:
            for key, value in self.details.items():
                lines.append(f"{dim}  {key}: {value}{reset}")

        return "\n".join(lines)

    def __str__(self) -> str:
        """Return the formatted error message."""
        return self.format(use_color=False)


class ConfigurationError(CriticError):
    """Invalid session or domain configuration. Fatal, raised before a session starts."""

    def __init__(
        self,
        message: str,
        config_file: str | None = None,
        suggestion: str | None = None,
    ):
        default_suggestion = (
            "Check domain weights sum to 1 and scores are within their ranges"
        )
        super().__init__(
            category=ErrorCategory.CONFIGURATION,
            message=message,
            suggestion=suggestion or default_suggestion,
            details={"config_file": config_file} if config_file else None,
            exit_code=1,
        )


class ArtifactLoadError(CriticError):
    """The website artifact could not be read from or written to disk."""

    def __init__(
        self,
        message: str,
        path: str | None = None,
        suggestion: str = "Point at a directory containing at least one .html page",
    ):
        super().__init__(
            category=ErrorCategory.ARTIFACT,
            message=message,
            suggestion=suggestion,
            details={"path": path} if path else None,
            exit_code=1,
        )


class EvaluationError(CriticError):
    """An evaluator could not parse or score a snapshot.

    Raised inside evaluators and converted by the panel into an
    abstaining evaluation; never propagated to callers.
    """

    def __init__(self, evaluator_id: str, message: str):
        super().__init__(
            category=ErrorCategory.EVALUATION,
            message=message,
            details={"evaluator_id": evaluator_id},
            exit_code=1,
        )
        self.evaluator_id = evaluator_id


def handle_exception(
    error: Exception,
    use_color: bool = True,
    verbose: bool = False,
) -> tuple[str, int]:
    """Convert any exception to formatted output and exit code.

    Args:
        error: The exception to handle.
        use_color: Whether to use color in output.
        verbose: Whether to include full traceback.

    Returns:
        Tuple of (formatted_message, exit_code).
    """
    import traceback

    if isinstance(error, CriticError):
        message = error.format(use_color=use_color)
        exit_code = error.exit_code
    else:
        red = "\033[91m" if use_color else ""
        reset = "\033[0m" if use_color else ""
        message = f"{red}Error:{reset} {str(error)}"
        exit_code = 1

    if verbose:
        message += "\n\nTraceback:\n" + traceback.format_exc()

    return message, exit_code
