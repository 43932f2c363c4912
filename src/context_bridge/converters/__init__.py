"""Converter strategies - import de tu dang ky vao converter_registry."""

from . import claude_to_kiro, cursor_to_kiro, kiro_to_claude, kiro_to_cursor  # noqa: F401
