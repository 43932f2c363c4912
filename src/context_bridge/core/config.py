"""
Constants and the user config file (~/.config/context-bridge/config.json).
"""

import json
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Optional

CONTEXT_VERSION = "1.0.0"
SPEC_VERSION = "1.0.0"
COMPATIBILITY_THRESHOLD = 60

CONFIG_DIR = Path.home() / ".config" / "context-bridge"
CONFIG_FILE = CONFIG_DIR / "config.json"


@dataclass
class BridgeConfig:
    default_target: Optional[str] = None
    merge_strategy: str = "replace"
    validate_integrity: bool = True
    output_dir: str = ".context-bridge"


def load_config(config_file: Path = None) -> BridgeConfig:
    """Doc config, tra ve mac dinh neu file khong ton tai hoac hong."""
    config_file = config_file or CONFIG_FILE
    if not config_file.exists():
        return BridgeConfig()
    try:
        raw = json.loads(config_file.read_text(encoding="utf-8"))
    except (json.JSONDecodeError, OSError):
        return BridgeConfig()
    if not isinstance(raw, dict):
        return BridgeConfig()
    known = {f.name for f in fields(BridgeConfig)}
    return BridgeConfig(**{k: v for k, v in raw.items() if k in known})


def save_config(config: BridgeConfig, config_file: Path = None) -> None:
    config_file = config_file or CONFIG_FILE
    config_file.parent.mkdir(parents=True, exist_ok=True)
    config_file.write_text(json.dumps(asdict(config), indent=2, ensure_ascii=False), encoding="utf-8")
