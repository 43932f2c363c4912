"""
Structural text parsers.

Recover specs, steering rules and hooks from heading-delimited markdown
(`## Name` followed by a body). Parsing is purely textual: malformed input
degrades to partial records, nothing here raises on bad content.
"""

import re
from typing import Any, Dict, List, Optional, Tuple

import yaml

SPECS_DOCUMENT_TITLE = "Project Instructions"
STEERING_DOCUMENT_TITLE = "Custom Instructions"

# Rule names used when the text carries no usable heading
UNNAMED_RULE = "custom-instructions"
IMPORTED_RULE = "imported-rules"

_SECTION_BOUNDARY = re.compile(r"^## ", re.MULTILINE)
_ANY_HEADING = re.compile(r"^#{1,2}\s+\S", re.MULTILINE)
_FRONTMATTER = re.compile(r"^---\n(.*?)\n---(?:\n|$)", re.DOTALL)
_BULLET = re.compile(r"^\s*[-*]\s+(.+?)\s*$")

_SPEC_BLOCKS = (
    ("design", re.compile(r"### Design\n([\s\S]*?)(?=###|\Z)")),
    ("requirements", re.compile(r"### Requirements\n([\s\S]*?)(?=###|\Z)")),
    ("tasks", re.compile(r"### Tasks\n([\s\S]*?)(?=###|\Z)")),
)


# =============================================================================
# SECTION SPLITTING
# =============================================================================


def _name_and_body(chunk: str) -> Tuple[str, str]:
    lines = chunk.split("\n")
    for i, line in enumerate(lines):
        if line.strip():
            return line.strip(), "\n".join(lines[i + 1:]).strip()
    return "", ""


def _heading_text(name: str) -> str:
    return name.lstrip("#").strip()


def split_sections(text: str) -> Tuple[str, List[Tuple[str, str]]]:
    """
    Split markdown on `## ` boundaries.

    Returns:
        (preamble before the first boundary, [(section name, section body)])
    """
    chunks = _SECTION_BOUNDARY.split(text)
    sections = [_name_and_body(chunk) for chunk in chunks[1:]]
    return chunks[0], sections


# =============================================================================
# SPECS
# =============================================================================


def parse_specs_markdown(text: Any) -> List[Dict[str, str]]:
    """
    `## Name` sections -> spec records.

    `### Design`, `### Requirements` and `### Tasks` blocks inside a section are
    attached only when present. A `Project Instructions` title is a document
    header, never a spec.
    """
    if not isinstance(text, str) or not text.strip():
        return []

    _, sections = split_sections(text)
    specs = []
    for name, body in sections:
        if not name or _heading_text(name) == SPECS_DOCUMENT_TITLE:
            continue
        spec = {"name": name}
        for key, pattern in _SPEC_BLOCKS:
            match = pattern.search(body)
            if match:
                spec[key] = match.group(1).strip()
        specs.append(spec)
    return specs


# =============================================================================
# STEERING
# =============================================================================


def _preamble_rule(preamble: str) -> Optional[Dict[str, str]]:
    name, body = _name_and_body(preamble)
    if not name:
        return None
    if name.startswith("# "):
        title = _heading_text(name)
    else:
        # Loose text before the first section belongs to the unnamed rule
        title = None
        body = preamble.strip()
    if not body:
        return None
    if title is None or title == STEERING_DOCUMENT_TITLE:
        return {"name": UNNAMED_RULE, "content": body}
    return {"name": title, "content": body}


def parse_steering_markdown(text: Any) -> List[Dict[str, str]]:
    """
    Markdown -> steering rules ({name, content}).

    Never returns an empty list for non-blank input: text without any
    heading becomes a single imported rule holding the whole trimmed text.
    """
    if not isinstance(text, str) or not text.strip():
        return []

    stripped = text.strip()
    if not _ANY_HEADING.search(stripped):
        return [{"name": IMPORTED_RULE, "content": stripped}]

    preamble, sections = split_sections(stripped)
    rules = []
    head = _preamble_rule(preamble)
    if head:
        rules.append(head)
    for name, body in sections:
        if _heading_text(name) == STEERING_DOCUMENT_TITLE:
            if body:
                rules.append({"name": UNNAMED_RULE, "content": body})
            continue
        rules.append({"name": name, "content": body})

    if not rules:
        return [{"name": IMPORTED_RULE, "content": stripped}]
    return rules


# =============================================================================
# HOOKS
# =============================================================================


def _command_list(value: Any) -> List[Any]:
    commands = value
    if isinstance(value, dict) and "commands" in value:
        commands = value["commands"]
    if isinstance(commands, dict):
        # name -> command map
        return [{"name": k, "command": v} for k, v in commands.items() if isinstance(v, str)]
    if isinstance(commands, list):
        return commands
    return []


def parse_hooks_from_commands(value: Any) -> List[Dict[str, Any]]:
    """
    Claude command records -> hook records.

    trigger (or event) becomes the hook event, defaulting to "manual".
    Commands have no disabled state, so every hook comes out enabled.
    """
    hooks = []
    for command in _command_list(value):
        if not isinstance(command, dict):
            continue
        event = command.get("trigger") or command.get("event") or "manual"
        hook = {
            "name": command.get("name") or event,
            "event": event,
            "command": command.get("command", ""),
            "enabled": True,
        }
        if command.get("description"):
            hook["description"] = command["description"]
        hooks.append(hook)
    return hooks


# =============================================================================
# FRONTMATTER AND STEERING FILE HELPERS
# =============================================================================


def split_frontmatter(content: str) -> Tuple[Dict[str, Any], str]:
    """YAML frontmatter -> (metadata, body). Unparseable frontmatter is dropped."""
    match = _FRONTMATTER.match(content)
    if not match:
        return {}, content
    body = content[match.end():]
    try:
        meta = yaml.safe_load(match.group(1))
    except yaml.YAMLError:
        return {}, body
    return (meta if isinstance(meta, dict) else {}), body


def render_frontmatter(meta: Dict[str, Any]) -> str:
    fm_yaml = yaml.dump(meta, sort_keys=False, allow_unicode=True).rstrip("\n")
    return f"---\n{fm_yaml}\n---\n\n"


def first_text_line(body: str) -> Optional[str]:
    """First non-empty line that is not a heading."""
    for line in body.split("\n"):
        line = line.strip()
        if line and not line.startswith("#"):
            return line
    return None


def extract_bullets(body: str) -> List[str]:
    bullets = []
    for line in body.split("\n"):
        match = _BULLET.match(line)
        if match:
            bullets.append(match.group(1))
    return bullets
