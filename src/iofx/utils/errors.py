"""
iofx Error Types

Custom exception classes for effect triggering, workflows and fixtures.
"""

from typing import Any, Dict, Optional


class IofxError(Exception):
    """Base exception for all iofx errors."""

    def __init__(
        self,
        message: str,
        error_code: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.details = details or {}

    def __str__(self) -> str:
        if self.error_code:
            return f"[{self.error_code}] {self.message}"
        return self.message


class MissingResourceError(IofxError):
    """Raised when an effect is triggered without a bound sink or client."""

    def __init__(
        self,
        message: str,
        effect_kind: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, "MISSING_RESOURCE", details)
        self.effect_kind = effect_kind


class SaveError(IofxError):
    """Raised by the save-file workflow when the upload is not accepted."""

    def __init__(
        self,
        path: str,
        status_code: Optional[int] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(f"Failed to save file {path}", "SAVE_FAILED", details)
        self.path = path
        self.status_code = status_code


class WorkflowStateError(IofxError):
    """Raised when a workflow is driven out of order."""

    def __init__(
        self,
        message: str,
        workflow: Optional[str] = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, "WORKFLOW_STATE", details)
        self.workflow = workflow


class FixtureMismatchError(IofxError, AssertionError):
    """Raised by the test harness when a workflow diverges from its fixture."""

    def __init__(
        self,
        message: str,
        index: Optional[int] = None,
        actual: Any = None,
        expected: Any = None,
        details: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message, "FIXTURE_MISMATCH", details)
        self.index = index
        self.actual = actual
        self.expected = expected
