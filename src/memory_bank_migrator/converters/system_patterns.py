from __future__ import annotations

from typing import Any

from ..documents import DocumentPath, DocumentType
from .base import BaseConverter
from .parsing import (
    BOLD_LABEL_RE,
    ParsedMarkdown,
    heading_level,
    is_content_line,
    match_alias,
)

DECISION_PARTS: dict[str, tuple[str, ...]] = {
    "context": ("context", "background", "コンテキスト", "背景"),
    "decision": ("decision", "決定事項", "判断", "決定内容"),
    "consequences": ("consequences", "impact", "影響", "理由", "結果"),
}


class SystemPatternsConverter(BaseConverter):
    """Reads ``### <title>`` decision records with Context/Decision/Consequences parts."""

    document_type = DocumentType.SYSTEM_PATTERNS

    def build_content(self, parsed: ParsedMarkdown, path: DocumentPath) -> dict[str, Any]:
        decisions: list[dict[str, Any]] = []
        current: dict[str, Any] | None = None
        part: str | None = None

        for line in parsed.lines:
            level = heading_level(line)
            if level == 3:
                current = _new_decision(line[4:].strip())
                decisions.append(current)
                part = None
                continue
            if level in (1, 2):
                current = None
                part = None
                continue
            if current is None:
                continue
            if level == 4:
                part = match_alias(line[5:], DECISION_PARTS)
                continue
            bold = BOLD_LABEL_RE.match(line)
            if bold:
                part = match_alias(bold.group(1), DECISION_PARTS)
                line = bold.group(2).strip()
            if part is None or not is_content_line(line):
                continue
            if part == "consequences":
                if line.startswith("- ") or line.startswith("* "):
                    current["consequences"].append(line[2:].strip())
            else:
                current[part] = f"{current[part]}\n{line}" if current[part] else line

        return {"technicalDecisions": decisions}


def _new_decision(title: str) -> dict[str, Any]:
    return {"title": title, "context": "", "decision": "", "consequences": []}


__all__ = ["SystemPatternsConverter"]
