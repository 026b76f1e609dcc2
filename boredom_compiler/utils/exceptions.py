"""
Custom exception definitions.

This module defines the exception hierarchy for errors raised while
parsing, analysing and bundling component modules.
"""

from typing import List, Optional, Sequence


class BoredomError(Exception):
    """
    Base exception for all boredom_compiler errors.

    This is the root exception class for all package-specific
    errors, providing common functionality and error handling.
    """

    def __init__(self, message: str, details: Optional[dict] = None):
        """
        Initialize error.

        Args:
            message: Human-readable error message
            details: Optional dictionary with additional error context
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return formatted error message."""
        if self.details:
            detail_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({detail_str})"
        return self.message


class ModuleParseError(BoredomError):
    """
    Raised when module source is not syntactically valid JavaScript.

    The message mirrors the familiar `Unexpected token (line:column)`
    shape so it can be surfaced verbatim in build warnings.
    """

    def __init__(self, message: str, line: Optional[int] = None, column: Optional[int] = None):
        """
        Initialize parse error.

        Args:
            message: Parser message including the position
            line: 1-based line of the first error
            column: 0-based column of the first error
        """
        super().__init__(message)
        self.line = line
        self.column = column


class StaticEvaluationError(BoredomError):
    """
    Raised by the JS value model when an operation has no constant result.

    The evaluator converts every instance into a failed evaluation; it
    never escapes the analysis of a module.
    """


class ComponentValidationError(BoredomError):
    """
    Raised when a module is required to be a component but is not.
    """

    def __init__(self, module_id: str, issues: Sequence[object]):
        """
        Initialize validation error.

        Args:
            module_id: Normalized module id
            issues: Issues reported for the module
        """
        issue_text = [str(issue) for issue in issues]
        message = f"Invalid component module '{module_id}'"
        if issue_text:
            message += ": " + "; ".join(issue_text)
        super().__init__(message, {"issue_count": len(issue_text)})
        self.module_id = module_id
        self.issues: List[str] = issue_text


class RuntimeNotFoundError(BoredomError):
    """
    Raised when no candidate path holds the runtime script.
    """

    def __init__(self, filename: str, searched: Sequence[str]):
        """
        Initialize runtime lookup error.

        Args:
            filename: Runtime file name that was looked for
            searched: Candidate paths checked, in order
        """
        super().__init__(f"Could not find runtime '{filename}'", {"searched": len(searched)})
        self.filename = filename
        self.searched = list(searched)


class ConfigurationError(BoredomError):
    """
    Raised when build options cannot be interpreted.
    """
