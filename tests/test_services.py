"""Tests for platform detection, the conversion service and context storage."""

import json

import pytest

from conftest import write
from context_bridge.builders.claude_code import ClaudeCodeBuilderStrategy
from context_bridge.builders.kiro import KiroBuilderStrategy
from context_bridge.core.context import create_context, get_category_data, set_category
from context_bridge.core.errors import ContextValidationError
from context_bridge.core.types import AIPlatform
from context_bridge.services.convert_service import ContextConverterService, ConversionOptions
from context_bridge.services.detector_service import PlatformDetector
from context_bridge.services.storage_service import default_context_path, load_context, save_context


# =============================================================================
# DETECTOR
# =============================================================================


def test_detect_kiro_project(kiro_project, empty_home):
    detector = PlatformDetector(home=empty_home)

    detection = detector.detect_kiro(kiro_project)

    assert detection.confidence == 100
    assert ".kiro/specs/" in detection.indicators
    assert detector.detect_primary(kiro_project) == AIPlatform.KIRO


def test_detect_claude_project_counts_user_config(claude_project, home):
    detection = PlatformDetector(home=home).detect_claude_code(claude_project)

    assert detection.confidence == 100
    assert "~/.claude/" in detection.indicators


def test_user_config_alone_does_not_detect_claude(tmp_path, home):
    project = tmp_path / "plain"
    project.mkdir()

    report = PlatformDetector(home=home).detect_all(project)

    assert report.detected == []
    assert report.primary is None


def test_detect_cursor_project(cursor_project, empty_home):
    report = PlatformDetector(home=empty_home).detect_all(cursor_project)

    assert report.primary == AIPlatform.CURSOR
    assert report.detected[0].confidence == 60
    assert report.ambiguous is False


def test_close_scores_are_ambiguous(tmp_path, empty_home):
    write(tmp_path / ".cursorrules", "rules")
    write(tmp_path / "CLAUDE.local.md", "notes")

    report = PlatformDetector(home=empty_home).detect_all(tmp_path)

    assert [d.platform for d in report.detected] == [AIPlatform.CURSOR, AIPlatform.CLAUDE_CODE]
    assert report.primary == AIPlatform.CURSOR
    assert report.ambiguous is True


def test_is_platform_present_and_hints(kiro_project, empty_home):
    detector = PlatformDetector(home=empty_home)

    assert detector.is_platform_present(kiro_project, AIPlatform.KIRO) is True
    assert detector.is_platform_present(kiro_project, AIPlatform.CURSOR) is False
    assert detector.get_detection_hints(AIPlatform.CURSOR)[1] == ".cursorrules file"


# =============================================================================
# CONVERSION SERVICE
# =============================================================================


@pytest.fixture
def claude_context(claude_project, empty_home):
    return ClaudeCodeBuilderStrategy(home=empty_home).build(claude_project)


def test_available_conversions():
    service = ContextConverterService()

    assert service.is_conversion_available(AIPlatform.CLAUDE_CODE, AIPlatform.KIRO) is True
    assert service.is_conversion_available(AIPlatform.CLAUDE_CODE, AIPlatform.CURSOR) is False
    assert len(service.get_available_conversions()) == 4


def test_convert_same_platform_is_noop(claude_context):
    result = ContextConverterService().convert(claude_context, AIPlatform.CLAUDE_CODE)

    assert result.success is True
    assert result.context is claude_context
    assert result.warnings == ["Context is already in Claude Code format"]


def test_convert_without_converter(claude_context):
    result = ContextConverterService().convert(claude_context, AIPlatform.CURSOR)

    assert result.success is False
    assert result.error == "No converter available for claude-code -> cursor"


def test_convert_unknown_source():
    result = ContextConverterService().convert({"version": "1.0.0", "metadata": {}}, AIPlatform.KIRO)

    assert result.success is False
    assert "source platform" in result.error


def test_convert_claude_to_kiro(claude_context):
    result = ContextConverterService().convert(claude_context, AIPlatform.KIRO)

    assert result.success is True
    assert result.warnings[0] == "Setting 'permissions' has no Kiro equivalent"
    assert "kiro" in get_category_data(result.context, "ide")


def test_incompatible_conversion_needs_force(kiro_project):
    context = KiroBuilderStrategy().build(kiro_project)
    service = ContextConverterService()

    refused = service.convert(context, AIPlatform.CURSOR)
    forced = service.convert(context, AIPlatform.CURSOR, ConversionOptions(force=True))

    assert refused.success is False
    assert "score 50%" in refused.error
    assert refused.unsupported_features == ["hooks", "task_templates"]
    assert forced.success is True
    assert "Forced conversion despite low compatibility score (50%)" in forced.warnings


def test_skip_compatibility_check(kiro_project):
    context = KiroBuilderStrategy().build(kiro_project)

    result = ContextConverterService().convert(
        context, AIPlatform.CURSOR, ConversionOptions(validate_compatibility=False)
    )

    assert result.success is True


def test_convert_chain(claude_context):
    result = ContextConverterService().convert_chain(claude_context, [AIPlatform.KIRO, AIPlatform.CURSOR])

    assert result.success is True
    assert result.context["metadata"]["conversion"]["source"] == "kiro"
    assert result.context["metadata"]["conversion"]["target"] == "cursor"
    assert set(get_category_data(result.context, "ide")) == {"claude_code", "kiro", "cursor"}


def test_convert_chain_stops_on_failure(claude_context):
    result = ContextConverterService().convert_chain(claude_context, [AIPlatform.CURSOR, AIPlatform.KIRO])

    assert result.success is False
    assert "claude-code -> cursor" in result.error


def test_convert_chain_without_targets(claude_context):
    result = ContextConverterService().convert_chain(claude_context, [])

    assert result.success is False


# =============================================================================
# STORAGE
# =============================================================================


def test_save_and_load_context(tmp_path, claude_context):
    path = save_context(claude_context, tmp_path / "out" / "ctx.json")

    assert path.exists()
    assert load_context(path) == claude_context


def test_default_context_path():
    assert str(default_context_path(".context-bridge", AIPlatform.CLAUDE_CODE)).endswith(
        "claude-code-context.json"
    )


def test_load_missing_context(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_context(tmp_path / "nope.json")


def test_load_invalid_json(tmp_path):
    path = write(tmp_path / "broken.json", "{ nope")

    with pytest.raises(ContextValidationError) as exc_info:
        load_context(path)

    assert exc_info.value.result.errors[0].startswith("Invalid JSON")


def test_load_context_without_categories(tmp_path):
    path = write(tmp_path / "empty.json", json.dumps(create_context(AIPlatform.KIRO)))

    with pytest.raises(ContextValidationError) as exc_info:
        load_context(path)

    assert exc_info.value.result.errors == ["Context has no populated category"]


def test_load_context_unknown_platform_is_warning(tmp_path, capsys):
    context = create_context(AIPlatform.KIRO)
    set_category(context, "ide", {"kiro": {"specs": []}, "windsurf": {"rules": "x"}})
    path = write(tmp_path / "ctx.json", json.dumps(context))

    loaded = load_context(path, verbose=True)

    assert loaded == context
    assert "Unknown platform config in ide.data: windsurf" in capsys.readouterr().out
