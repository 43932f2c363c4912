import re
from datetime import datetime, timezone


# ANSI colors
class Colors:
    HEADER = '\033[95m'
    BLUE = '\033[94m'
    CYAN = '\033[96m'
    GREEN = '\033[92m'
    YELLOW = '\033[93m'
    RED = '\033[91m'
    BOLD = '\033[1m'
    ENDC = '\033[0m'


def warn(message: str, verbose: bool = True) -> None:
    if verbose:
        print(f"  {Colors.YELLOW}Warning: {message}{Colors.ENDC}")


def utc_timestamp() -> str:
    """ISO-8601 timestamp in UTC, millisecond precision."""
    return datetime.now(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def slugify(text: str) -> str:
    """
    Turns a free-text heading into a file-safe name.

    "Code Style & Review" -> "code-style-review"
    """
    slug = re.sub(r"[^a-z0-9]+", "-", text.lower()).strip("-")
    return slug or "untitled"
