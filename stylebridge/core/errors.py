"""Hook-related errors with enough context for users and developers."""

from __future__ import annotations

from typing import Any, Optional


class HookError(Exception):
    """Base class for errors raised or returned by the bridge."""

    def __init__(self, message: str, details: Optional[dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_user_message(self) -> str:
        return self.message

    def to_detailed_message(self) -> str:
        return self.message


class ParseError(HookError):
    """Source could not be parsed."""

    def __init__(self, message: str, source: str = "", line: int = 0, column: int = 0, context: str = ""):
        super().__init__(message)
        self.source = source
        self.line = line
        self.column = column
        self.context = context

    def to_user_message(self) -> str:
        return f"Failed to parse hook content: {self.message}"

    def to_detailed_message(self) -> str:
        lines = ["Parse Error"]
        if self.line > 0:
            lines.append(f"Line {self.line}, Column {self.column}")
        if self.context:
            lines.append(f"Context: {self.context}")
        lines.append(f"Message: {self.message}")
        return "\n".join(lines)


class ExecutionError(HookError):
    """A collaborator was reached but failed while running."""

    def __init__(self, message: str, source_code: str = "", cause: Optional[BaseException] = None):
        super().__init__(message)
        self.source_code = source_code
        self.cause = cause
        if cause is not None:
            self.__cause__ = cause

    def to_user_message(self) -> str:
        return f"Hook execution failed: {self.message}"

    def to_detailed_message(self) -> str:
        lines = ["Execution Error", f"Message: {self.message}"]
        if self.cause is not None:
            lines.append(f"Cause: {type(self.cause).__name__}: {self.cause}")
        return "\n".join(lines)


class TranspilerMissingError(ExecutionError):
    """The transpiler module could not be located."""


class RenderError(HookError):
    """Rendering content into elements failed."""

    def __init__(self, message: str, element: str = "", context: str = ""):
        super().__init__(message)
        self.element = element
        self.context = context

    def to_user_message(self) -> str:
        return f"Failed to render hook: {self.message}"

    def to_detailed_message(self) -> str:
        lines = ["Render Error"]
        if self.element:
            lines.append(f"Element: {self.element}")
        lines.append(f"Message: {self.message}")
        return "\n".join(lines)
