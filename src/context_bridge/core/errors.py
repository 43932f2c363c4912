"""Exception types raised by the build entry points and the context loader."""

from typing import Optional


class ContextBridgeError(Exception):
    """Base error for context-bridge."""


class NotAPlatformProjectError(ContextBridgeError):
    def __init__(self, platform: str, path):
        self.platform = platform
        self.path = path
        super().__init__(f"Not a {platform} project: {path}")


class ContextValidationError(ContextBridgeError):
    """Raised when build() or load_context() meets structurally invalid data."""

    def __init__(self, result, message: Optional[str] = None):
        self.result = result
        if message is None:
            message = "Validation failed: " + "; ".join(result.errors)
        super().__init__(message)


class UnsupportedConversionError(ContextBridgeError):
    def __init__(self, source: str, target: str):
        self.source = source
        self.target = target
        super().__init__(f"No converter available for {source} -> {target}")
