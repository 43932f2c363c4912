"""
Platform detection - cham diem tung IDE theo cac file dau hieu trong project.
"""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional

from context_bridge.core.filesystem import FileSystemUtility
from context_bridge.core.types import AIPlatform

MAX_CONFIDENCE = 100
AMBIGUITY_MARGIN = 20

DETECTION_HINTS: Dict[AIPlatform, List[str]] = {
    AIPlatform.KIRO: [
        ".kiro/ directory",
        ".kiro/specs/ with spec folders",
        ".kiro/steering/*.md rules",
        ".kiro/hooks/ and .kiro/settings/mcp.json",
    ],
    AIPlatform.CLAUDE_CODE: [
        ".claude/ directory",
        "CLAUDE.md or CLAUDE.local.md",
        ".claude/settings.json, .claude/mcp.json, .claude/commands.json",
        "~/.claude user configuration",
    ],
    AIPlatform.CURSOR: [
        ".cursor/ directory",
        ".cursorrules file",
        ".cursor/settings.json, .cursor/rules.md, .cursor/prompts/",
        ".cursorignore file",
    ],
}


@dataclass
class PlatformDetection:
    platform: AIPlatform
    confidence: int
    indicators: List[str] = field(default_factory=list)


@dataclass
class DetectionReport:
    detected: List[PlatformDetection] = field(default_factory=list)
    primary: Optional[AIPlatform] = None
    ambiguous: bool = False


class PlatformDetector:
    def __init__(self, file_system: FileSystemUtility = None, home: Path = None):
        self.fs = file_system or FileSystemUtility()
        self.home = home

    def _score(self, platform: AIPlatform, indicators: List[str], score: int) -> PlatformDetection:
        return PlatformDetection(platform, min(score, MAX_CONFIDENCE), indicators)

    def detect_kiro(self, root: Path) -> PlatformDetection:
        score, found = 0, []
        kiro = root / ".kiro"
        if self.fs.is_directory(kiro):
            score += 40
            found.append(".kiro/")
            if self.fs.is_directory(kiro / "specs"):
                score += 20
                found.append(".kiro/specs/")
                if self.fs.read_directory(kiro / "specs"):
                    score += 10
            if self.fs.is_directory(kiro / "steering"):
                score += 20
                found.append(".kiro/steering/")
                if any(e.endswith(".md") for e in self.fs.read_directory(kiro / "steering")):
                    score += 5
            if self.fs.is_directory(kiro / "hooks"):
                score += 5
                found.append(".kiro/hooks/")
            if self.fs.exists(kiro / "settings" / "mcp.json") or self.fs.exists(kiro / "mcp.json"):
                score += 5
                found.append("Kiro MCP config")
        return self._score(AIPlatform.KIRO, found, score)

    def detect_claude_code(self, root: Path) -> PlatformDetection:
        score, found = 0, []
        claude = root / ".claude"
        if self.fs.is_directory(claude):
            score += 30
            found.append(".claude/")
            for name, points in (("settings.json", 15), ("mcp.json", 15), ("commands.json", 10)):
                if self.fs.exists(claude / name):
                    score += points
                    found.append(f".claude/{name}")
        claude_md = root / "CLAUDE.md"
        if self.fs.exists(claude_md):
            score += 20
            found.append("CLAUDE.md")
            try:
                if len(self.fs.read_file(claude_md)) > 100:
                    score += 5
            except OSError:
                pass
        if self.fs.exists(root / "CLAUDE.local.md"):
            score += 15
            found.append("CLAUDE.local.md")
        # User config only counts next to project markers
        if score > 0 and self.fs.is_directory((self.home or Path.home()) / ".claude"):
            score += 10
            found.append("~/.claude/")
        return self._score(AIPlatform.CLAUDE_CODE, found, score)

    def detect_cursor(self, root: Path) -> PlatformDetection:
        score, found = 0, []
        cursor = root / ".cursor"
        if self.fs.is_directory(cursor):
            score += 40
            found.append(".cursor/")
            for name, points in (("settings.json", 20), ("rules.md", 20), ("prompts", 10)):
                if self.fs.exists(cursor / name):
                    score += points
                    found.append(f".cursor/{name}")
        for name, points in ((".cursorrules", 20), (".cursorignore", 10)):
            if self.fs.exists(root / name):
                score += points
                found.append(name)
        return self._score(AIPlatform.CURSOR, found, score)

    def detect_all(self, path) -> DetectionReport:
        root = self.fs.resolve_path(path)
        results = [self.detect_kiro(root), self.detect_claude_code(root), self.detect_cursor(root)]
        detected = sorted((r for r in results if r.confidence > 0), key=lambda r: -r.confidence)
        report = DetectionReport(detected=detected)
        if detected:
            report.primary = detected[0].platform
            if len(detected) > 1:
                report.ambiguous = detected[0].confidence - detected[1].confidence < AMBIGUITY_MARGIN
        return report

    def detect_primary(self, path) -> Optional[AIPlatform]:
        return self.detect_all(path).primary

    def is_platform_present(self, path, platform: AIPlatform) -> bool:
        return any(d.platform == platform for d in self.detect_all(path).detected)

    def get_detection_hints(self, platform: AIPlatform) -> List[str]:
        return list(DETECTION_HINTS.get(platform, []))
