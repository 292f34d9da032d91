"""
Error handling for termwm.

Structured error codes shared by the window manager core, the program
registry and the configuration loader.
"""

from enum import Enum
from typing import Optional, Dict, Any


class ErrorCode(Enum):
    """
    Error codes for termwm.

    Code ranges:
    - 1000-1099: Configuration errors
    - 1100-1199: Process errors
    - 1200-1299: Program registry errors
    """

    # Configuration errors (1000-1099)
    CONFIG_LOAD_FAILED = 1000
    CONFIG_INVALID = 1001

    # Process errors (1100-1199)
    TASK_CREATION_FAILED = 1100
    UNKNOWN_PROCESS = 1101

    # Program registry errors (1200-1299)
    PROGRAM_NOT_FOUND = 1200
    PROGRAM_IMPORT_FAILED = 1201


class WindowManagerError(Exception):
    """Base exception for termwm errors."""

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None
    ):
        """
        Initialize window manager error.

        Args:
            code: Error code from ErrorCode enum
            message: Human-readable error message
            suggestion: Suggested recovery action
            context: Additional context for debugging
        """
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.context = context or {}
        super().__init__(message)

    def to_dict(self) -> Dict[str, Any]:
        """
        Convert error to dictionary for structured output.

        Returns:
            Error dictionary with code, message, suggestion, and context
        """
        result = {
            "code": self.code.value,
            "message": self.message
        }

        if self.suggestion:
            result["suggestion"] = self.suggestion

        if self.context:
            result["context"] = self.context

        return result


class ConfigLoadError(WindowManagerError):
    """Configuration loading error."""

    def __init__(self, file_path: str, reason: str):
        super().__init__(
            code=ErrorCode.CONFIG_LOAD_FAILED,
            message=f"Failed to load configuration from {file_path}: {reason}",
            suggestion="Check file syntax and permissions",
            context={"file_path": file_path, "reason": reason}
        )


class TaskCreationError(WindowManagerError):
    """Raised when a program factory does not produce a resumable task."""

    def __init__(self, title: str, reason: str):
        super().__init__(
            code=ErrorCode.TASK_CREATION_FAILED,
            message=f"Could not start task for '{title}': {reason}",
            suggestion="Program factories must be generator functions",
            context={"title": title, "reason": reason}
        )


class UnknownProcessError(WindowManagerError):
    """Raised by the process-control API for ids that name no live process."""

    def __init__(self, process_id: Any):
        super().__init__(
            code=ErrorCode.UNKNOWN_PROCESS,
            message=f"No process with id {process_id}",
            context={"process_id": process_id}
        )


class ProgramNotFoundError(WindowManagerError):
    """Raised when a program name cannot be resolved by the registry."""

    def __init__(self, name: str, available: Optional[list] = None):
        super().__init__(
            code=ErrorCode.PROGRAM_NOT_FOUND,
            message=f"Program not found: {name}",
            suggestion="Run 'termwm programs' to list registered programs",
            context={"name": name, "available": available or []}
        )


class ProgramImportError(WindowManagerError):
    """Raised when a 'module:function' program entry cannot be imported."""

    def __init__(self, name: str, target: str, reason: str):
        super().__init__(
            code=ErrorCode.PROGRAM_IMPORT_FAILED,
            message=f"Failed to import program '{name}' from {target}: {reason}",
            suggestion="Use the form 'package.module:function'",
            context={"name": name, "target": target, "reason": reason}
        )
