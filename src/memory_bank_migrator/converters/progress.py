from __future__ import annotations

from typing import Any

from ..documents import DocumentPath, DocumentType
from .base import BaseConverter
from .parsing import ParsedMarkdown, list_items, match_alias, paragraph_text

SECTIONS: dict[str, tuple[str, ...]] = {
    "workingFeatures": ("working features", "what works", "現時点で動作している部分", "動作している機能"),
    "pendingImplementation": (
        "pending implementation",
        "remaining work",
        "未実装の機能",
        "残作業",
    ),
    "status": ("current status", "current state", "status", "現在のステータス", "現在の状態"),
    "knownIssues": ("known issues", "既知の問題"),
}


class ProgressConverter(BaseConverter):
    document_type = DocumentType.PROGRESS

    def build_content(self, parsed: ParsedMarkdown, path: DocumentPath) -> dict[str, Any]:
        content: dict[str, Any] = {
            "workingFeatures": [],
            "pendingImplementation": [],
            "status": "",
            "knownIssues": [],
        }
        for section in parsed.sections:
            name = match_alias(section.title, SECTIONS)
            if name is None:
                continue
            if name == "status":
                text = paragraph_text(section.lines)
                content["status"] = "\n".join(filter(None, [content["status"], text]))
            else:
                content[name].extend(list_items(section.lines))
        return content


__all__ = ["ProgressConverter"]
