"""Save and load neutral context documents as JSON files."""

import json
from pathlib import Path

from context_bridge.core.context import validate_context
from context_bridge.core.errors import ContextValidationError
from context_bridge.core.filesystem import FileSystemUtility
from context_bridge.core.types import AIPlatform, Context, ValidationResult
from context_bridge.utils import warn


def default_context_path(output_dir: str, platform: AIPlatform) -> Path:
    return Path(output_dir) / f"{platform.value}-context.json"


def save_context(context: Context, path, file_system: FileSystemUtility = None) -> Path:
    fs = file_system or FileSystemUtility()
    target = fs.resolve_path(path)
    fs.write_json(target, context)
    return target


def load_context(path, file_system: FileSystemUtility = None, verbose: bool = False) -> Context:
    """
    Read a context file and check its structure.

    Raises:
        FileNotFoundError: path does not exist
        ContextValidationError: the file is not JSON or not a usable context
    """
    fs = file_system or FileSystemUtility()
    source = fs.resolve_path(path)
    if not fs.exists(source):
        raise FileNotFoundError(f"Context file not found: {source}")
    try:
        context = fs.read_json(source)
    except json.JSONDecodeError as e:
        raise ContextValidationError(ValidationResult(errors=[f"Invalid JSON: {e}"]))

    result = validate_context(context)
    for message in result.warnings:
        warn(message, verbose)
    if not result.valid:
        raise ContextValidationError(result)
    return context
