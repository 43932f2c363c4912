"""Builder strategies - import de tu dang ky vao builder_registry."""

from . import claude_code, cursor, kiro  # noqa: F401
