"""
TUI interactive cho context-bridge.

Chuyen tat ca prompt questionary tu cli.py vao day.
"""

from pathlib import Path
from typing import Optional

import questionary
from questionary import Style

from context_bridge.core.types import AIPlatform

# Cau hinh style cho Questionary
CUSTOM_STYLE = Style(
    [
        ("qmark", "fg:#00d4ff bold"),
        ("question", "bold"),
        ("answer", "fg:#00d4ff bold"),
        ("pointer", "fg:#00d4ff bold"),
        ("highlighted", "fg:#00d4ff bold bg:default"),
        ("selected", "fg:#00d4ff bold bg:default"),
    ]
)


def select_target_platform(source: AIPlatform) -> Optional[AIPlatform]:
    """Hoi nguoi dung platform dich; chi liet ke cac cap co converter."""
    from context_bridge.services.convert_service import ContextConverterService

    targets = [t for s, t in ContextConverterService().get_available_conversions() if s == source]
    if not targets:
        return None
    choices = [questionary.Choice(t.display_name, value=t.value) for t in targets]
    answer = questionary.select(
        f"Convert {source.display_name} context to:",
        choices=choices,
        style=CUSTOM_STYLE,
    ).ask()
    return AIPlatform.parse(answer) if answer else None


def confirm_deploy(platform: AIPlatform, target_path: Path) -> bool:
    answer = questionary.confirm(
        f"Write {platform.display_name} files into {target_path.resolve()}? Existing files may be overwritten.",
        default=False,
        style=CUSTOM_STYLE,
    ).ask()
    return bool(answer)
