"""Tests for the markdown structural parsers."""

from context_bridge.mapping.parsers import (
    IMPORTED_RULE,
    UNNAMED_RULE,
    extract_bullets,
    first_text_line,
    parse_hooks_from_commands,
    parse_specs_markdown,
    parse_steering_markdown,
    render_frontmatter,
    split_frontmatter,
    split_sections,
)


# =============================================================================
# SPECS
# =============================================================================


def test_specs_sections_with_and_without_blocks():
    text = "## Feature A\n### Design\nD\n### Requirements\nR\n### Tasks\nT\n\n## Feature B\nSimple"

    specs = parse_specs_markdown(text)

    assert specs == [
        {"name": "Feature A", "design": "D", "requirements": "R", "tasks": "T"},
        {"name": "Feature B"},
    ]


def test_specs_skip_document_title_and_preamble():
    text = "# Project Instructions\n\nIntro text.\n\n## Project Instructions\nignored\n\n## Billing\n### Tasks\n- invoice\n"

    specs = parse_specs_markdown(text)

    assert specs == [{"name": "Billing", "tasks": "- invoice"}]


def test_specs_only_attach_present_blocks():
    specs = parse_specs_markdown("## Search\n### Requirements\nFast results\n")

    assert specs == [{"name": "Search", "requirements": "Fast results"}]


def test_specs_from_blank_or_non_string_input():
    assert parse_specs_markdown("") == []
    assert parse_specs_markdown("   \n") == []
    assert parse_specs_markdown(None) == []
    assert parse_specs_markdown(["## A"]) == []


def test_split_sections_returns_preamble():
    preamble, sections = split_sections("intro\n## One\nbody one\n## Two\n")

    assert preamble == "intro\n"
    assert sections == [("One", "body one"), ("Two", "")]


# =============================================================================
# STEERING
# =============================================================================


def test_steering_without_headings_becomes_imported_rule():
    rules = parse_steering_markdown("  Be concise.\nPrefer small diffs.  \n")

    assert rules == [{"name": IMPORTED_RULE, "content": "Be concise.\nPrefer small diffs."}]


def test_steering_sections_become_rules():
    text = "# Custom Instructions\n\n## Style\nUse type hints.\n\n## Testing\nWrite pytest tests.\n"

    rules = parse_steering_markdown(text)

    assert rules == [
        {"name": "Style", "content": "Use type hints."},
        {"name": "Testing", "content": "Write pytest tests."},
    ]


def test_steering_loose_preamble_goes_to_unnamed_rule():
    rules = parse_steering_markdown("Always use TypeScript.\n\n## Naming\nUse camelCase.")

    assert rules[0] == {"name": UNNAMED_RULE, "content": "Always use TypeScript."}
    assert rules[1] == {"name": "Naming", "content": "Use camelCase."}


def test_steering_titled_preamble_keeps_title():
    rules = parse_steering_markdown("# Team Rules\nReview every PR.\n\n## Git\nRebase often.")

    assert rules[0] == {"name": "Team Rules", "content": "Review every PR."}
    assert rules[1] == {"name": "Git", "content": "Rebase often."}


def test_steering_document_title_section_maps_to_unnamed_rule():
    rules = parse_steering_markdown("## Custom Instructions\nGeneral guidance\n\n## Docs\nWrite docstrings.")

    assert rules == [
        {"name": UNNAMED_RULE, "content": "General guidance"},
        {"name": "Docs", "content": "Write docstrings."},
    ]


def test_steering_never_empty_for_non_blank_input():
    # Only a document title: no sections, no body
    rules = parse_steering_markdown("# Custom Instructions")

    assert rules == [{"name": IMPORTED_RULE, "content": "# Custom Instructions"}]


def test_steering_blank_input():
    assert parse_steering_markdown("") == []
    assert parse_steering_markdown(None) == []


# =============================================================================
# HOOKS
# =============================================================================


def test_hooks_from_command_list():
    hooks = parse_hooks_from_commands(
        {"commands": [{"name": "pre-commit", "command": "npm run lint", "trigger": "pre-commit"}]}
    )

    assert len(hooks) == 1
    assert hooks[0]["name"] == "pre-commit"
    assert hooks[0]["command"] == "npm run lint"
    assert hooks[0]["event"] == "pre-commit"
    assert hooks[0]["enabled"] is True


def test_hooks_default_event_is_manual():
    hooks = parse_hooks_from_commands([{"name": "deploy", "command": "make deploy", "description": "Ship it"}])

    assert hooks == [
        {"name": "deploy", "event": "manual", "command": "make deploy", "enabled": True, "description": "Ship it"}
    ]


def test_hooks_from_name_to_command_map():
    hooks = parse_hooks_from_commands({"commands": {"test": "pytest", "bad": 42}})

    assert [h["name"] for h in hooks] == ["test"]
    assert hooks[0]["command"] == "pytest"


def test_hooks_skip_non_record_entries():
    assert parse_hooks_from_commands({"commands": ["echo", None]}) == []
    assert parse_hooks_from_commands("not commands") == []


# =============================================================================
# FRONTMATTER HELPERS
# =============================================================================


def test_split_frontmatter_reads_yaml():
    meta, body = split_frontmatter("---\ninclusion: always\ntags: [a, b]\n---\n# Body\n")

    assert meta == {"inclusion": "always", "tags": ["a", "b"]}
    assert body == "# Body\n"


def test_split_frontmatter_without_block():
    meta, body = split_frontmatter("# Just markdown")

    assert meta == {}
    assert body == "# Just markdown"


def test_split_frontmatter_drops_invalid_yaml():
    meta, body = split_frontmatter("---\nkey: [unclosed\n---\ntext")

    assert meta == {}
    assert body == "text"


def test_render_frontmatter_round_trips_through_split():
    text = render_frontmatter({"description": "Style guide", "alwaysApply": True}) + "body"

    meta, body = split_frontmatter(text)

    assert meta == {"description": "Style guide", "alwaysApply": True}
    assert body.strip() == "body"


def test_first_text_line_and_bullets():
    body = "# Title\n\nIntro line\n\n- one\n* two\n  - three \n"

    assert first_text_line(body) == "Intro line"
    assert first_text_line("# Only heading") is None
    assert extract_bullets(body) == ["one", "two", "three"]
