"""Context Bridge - migrate AI IDE configuration between Kiro, Claude Code and Cursor."""

__version__ = "0.1.0"

# Import strategy modules to trigger registration
from context_bridge import builders  # noqa: F401, E402
from context_bridge import converters  # noqa: F401, E402
