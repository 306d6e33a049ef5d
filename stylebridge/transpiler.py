"""
Bridge to the external JSX/TSX transpiler.

The transpiler itself lives outside this package. It is either injected
directly or located by module name; a missing module leaves the bridge in an
"absent" state where every transpile call returns a failed result instead of
raising.
"""

from __future__ import annotations

import importlib
import logging
import re
from dataclasses import dataclass
from typing import Optional, Protocol, runtime_checkable

from .core.config import DEFAULT_TRANSPILER_MODULE
from .core.errors import ExecutionError, HookError, TranspilerMissingError

logger = logging.getLogger(__name__)

DEFAULT_FILENAME = "hook.jsx"

_PRAGMA_RE = re.compile(r"@use-jsx|@use-ts|@jsx\s+h", re.MULTILINE)
_JSX_TAG_RE = re.compile(r"<([A-Za-z][A-Za-z0-9]*)\s")


@runtime_checkable
class Transpiler(Protocol):
    """Interface the external transpiler module exposes."""

    def transpile(self, source: str, filename: str, is_typescript: bool) -> str: ...

    def get_version(self) -> str: ...


@dataclass(frozen=True)
class TranspileResult:
    """Transpiled code, or the error that prevented it."""
    code: Optional[str] = None
    error: Optional[HookError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> str:
        """Return the code, raising the stored error on failure."""
        if self.error is not None:
            raise self.error
        return self.code or ""


def looks_like_ts_or_jsx(code: str, filename: str) -> bool:
    """Whether source needs transpiling: pragma, JSX-looking tag, or TS/JSX extension."""
    if _PRAGMA_RE.search(code) or _JSX_TAG_RE.search(code):
        return True
    return filename.endswith((".tsx", ".ts", ".jsx"))


class TranspilerBridge:
    """Wraps a transpiler collaborator and turns its failures into results."""

    def __init__(self, collaborator: Optional[Transpiler] = None, name: Optional[str] = None):
        self.collaborator = collaborator
        if name is None:
            if collaborator is None:
                name = DEFAULT_TRANSPILER_MODULE
            else:
                name = getattr(collaborator, "__name__", type(collaborator).__name__)
        self.name = name
        self._missing_cause: Optional[BaseException] = None

    @classmethod
    def locate(cls, module_name: str = DEFAULT_TRANSPILER_MODULE) -> "TranspilerBridge":
        """
        Build a bridge around an importable module.

        A module that cannot be imported yields an absent bridge.
        """
        try:
            module = importlib.import_module(module_name)
        except ImportError as e:
            logger.warning(f"Transpiler module '{module_name}' not found: {e}")
            bridge = cls(None, name=module_name)
            bridge._missing_cause = e
            return bridge
        return cls(module, name=module_name)

    @property
    def available(self) -> bool:
        return self.collaborator is not None

    def transpile(
        self,
        source: str,
        filename: str = DEFAULT_FILENAME,
        is_typescript: Optional[bool] = None,
    ) -> TranspileResult:
        """
        Transpile JSX/TSX source to JavaScript.

        Args:
            source: JSX or TSX source code
            filename: Used by the transpiler for error reporting
            is_typescript: Defaults to whether filename ends in .ts or .tsx

        Returns:
            TranspileResult with either the code or a HookError
        """
        if is_typescript is None:
            is_typescript = filename.endswith((".ts", ".tsx"))

        if self.collaborator is None:
            return TranspileResult(error=TranspilerMissingError(
                f"Transpiler module '{self.name}' not found. Make sure it is installed.",
                source_code=source,
                cause=self._missing_cause,
            ))

        try:
            code = self.collaborator.transpile(source, filename, is_typescript)
        except Exception as e:
            logger.warning(f"Transpilation of {filename} failed: {e}")
            return TranspileResult(error=ExecutionError(
                f"Transpilation failed: {e}",
                source_code=source,
                cause=e,
            ))
        return TranspileResult(code=code)

    def get_version(self) -> str:
        if self.collaborator is None:
            return "unknown"
        try:
            return str(self.collaborator.get_version())
        except Exception as e:
            logger.debug(f"Transpiler version lookup failed: {e}")
            return "unknown"
