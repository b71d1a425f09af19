from __future__ import annotations

from typing import Any

from ..documents import DocumentPath, DocumentType
from .base import BaseConverter
from .parsing import ParsedMarkdown, list_items, match_alias, paragraph_text

SECTIONS: dict[str, tuple[str, ...]] = {
    "currentWork": ("current work", "現在の作業内容"),
    "recentChanges": ("recent changes", "直近の変更点"),
    "activeDecisions": ("active decisions", "今アクティブな決定事項"),
    "considerations": ("active considerations", "considerations", "今アクティブな考慮点"),
    "nextSteps": ("next steps", "次のステップ"),
}


class ActiveContextConverter(BaseConverter):
    document_type = DocumentType.ACTIVE_CONTEXT

    def build_content(self, parsed: ParsedMarkdown, path: DocumentPath) -> dict[str, Any]:
        current_work: list[str] = []
        lists: dict[str, list[str]] = {
            "recentChanges": [],
            "activeDecisions": [],
            "considerations": [],
            "nextSteps": [],
        }
        for section in parsed.sections:
            name = match_alias(section.title, SECTIONS)
            if name == "currentWork":
                text = paragraph_text(section.lines)
                if text:
                    current_work.append(text)
            elif name is not None:
                lists[name].extend(list_items(section.lines))

        return {"currentWork": "\n".join(current_work), **lists}


__all__ = ["ActiveContextConverter"]
