from __future__ import annotations

from typing import Any

from ..documents import DocumentPath, DocumentType
from .base import BaseConverter
from .parsing import ParsedMarkdown, is_content_line, snake_case_key


class GenericConverter(BaseConverter):
    """Fallback: each ``##`` section becomes a key holding text or a list."""

    document_type = DocumentType.GENERIC

    def build_content(self, parsed: ParsedMarkdown, path: DocumentPath) -> dict[str, Any]:
        content: dict[str, Any] = {}
        for index, section in enumerate(parsed.sections, start=1):
            key = snake_case_key(section.title) or f"section_{index}"
            value = _section_value(section.lines)
            if value:
                content[key] = value

        if not content:
            body = "\n".join(
                line for line in parsed.lines if is_content_line(line)
            ).strip()
            if body:
                content["body"] = body
        return content


def _section_value(lines: list[str]) -> str | list[str]:
    value: str | list[str] = ""
    for line in lines:
        if not is_content_line(line):
            continue
        if line.startswith("- "):
            if isinstance(value, str):
                value = [value.strip()] if value.strip() else []
            value.append(line[2:].strip())
        elif isinstance(value, list):
            value = "\n".join(value) + "\n" + line
        else:
            value = f"{value}{line}\n"
    if isinstance(value, str):
        return value.strip()
    return value


__all__ = ["GenericConverter"]
