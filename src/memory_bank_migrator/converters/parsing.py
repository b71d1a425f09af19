"""Line-oriented helpers for pulling structure out of legacy Markdown."""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Mapping

from ..documents import DocumentPath

TAG_TOKEN_RE = re.compile(r"#([A-Za-z0-9_-]+)")
CHECKBOX_RE = re.compile(r"^[-*]\s*\[([ xX])\]\s*(.+)$")
BOLD_LABEL_RE = re.compile(r"^\*\*(.+?)\*\*\s*:?\s*(.*)$")
NON_KEY_RE = re.compile(r"[^a-z0-9_]")


@dataclass(slots=True)
class Section:
    title: str
    lines: list[str] = field(default_factory=list)

    @property
    def key(self) -> str:
        return normalize_heading(self.title)


@dataclass(slots=True)
class ParsedMarkdown:
    title: str
    tags: list[str]
    lines: list[str]
    sections: list[Section]


def heading_text(line: str, level: int) -> str | None:
    prefix = "#" * level + " "
    if line.startswith(prefix):
        return line[len(prefix):].strip()
    return None


def heading_level(line: str) -> int:
    if not line.startswith("#"):
        return 0
    level = len(line) - len(line.lstrip("#"))
    rest = line[level:]
    if rest and not rest.startswith(" "):
        return 0
    return level


def normalize_heading(text: str) -> str:
    return text.strip().rstrip(":：").strip().lower()


def extract_title(lines: list[str], path: DocumentPath) -> str:
    for line in lines:
        title = heading_text(line, 1)
        if title:
            return title
    return path.basename or path.filename


def normalize_tag(tag: str) -> str:
    return tag.lower().replace("_", "-")


def extract_tags(lines: list[str]) -> list[str]:
    for line in lines:
        if line.startswith("tags:"):
            tags: list[str] = []
            for token in TAG_TOKEN_RE.findall(line):
                tag = normalize_tag(token)
                if tag and tag not in tags:
                    tags.append(tag)
            return tags
    return []


def split_sections(lines: list[str], level: int) -> list[Section]:
    """Group lines under headings of ``level``; a shallower heading closes a section."""

    sections: list[Section] = []
    current: Section | None = None
    for line in lines:
        found = heading_level(line)
        if found == level:
            current = Section(title=line[level:].strip())
            sections.append(current)
            continue
        if found and found < level:
            current = None
            continue
        if current is not None:
            current.lines.append(line)
    return sections


def find_section(sections: list[Section], aliases: tuple[str, ...]) -> Section | None:
    for section in sections:
        if any(section.key.startswith(alias) for alias in aliases):
            return section
    return None


def match_alias(title: str, aliases: Mapping[str, tuple[str, ...]]) -> str | None:
    key = normalize_heading(title)
    for name, candidates in aliases.items():
        if any(key.startswith(candidate) for candidate in candidates):
            return name
    return None


def is_placeholder(line: str) -> bool:
    return line.startswith("_") or line.endswith("_")


def is_content_line(line: str) -> bool:
    return bool(line) and not line.startswith("#") and not line.startswith("tags:")


def list_items(lines: list[str]) -> list[str]:
    items: list[str] = []
    for line in lines:
        checkbox = CHECKBOX_RE.match(line)
        if checkbox:
            items.append(checkbox.group(2).strip())
        elif line.startswith("- ") or line.startswith("* "):
            items.append(line[2:].strip())
    return items


def checkbox_items(lines: list[str]) -> list[tuple[str, bool]]:
    items: list[tuple[str, bool]] = []
    for line in lines:
        match = CHECKBOX_RE.match(line)
        if match:
            items.append((match.group(2).strip(), match.group(1).lower() == "x"))
    return items


def paragraph_text(lines: list[str], *, skip_placeholders: bool = True) -> str:
    kept = [
        line
        for line in lines
        if is_content_line(line) and not (skip_placeholders and is_placeholder(line))
    ]
    return "\n".join(kept).strip()


def snake_case_key(title: str) -> str:
    key = re.sub(r"\s+", "_", title.strip().lower())
    return NON_KEY_RE.sub("", key)


def parse_markdown(markdown: str, path: DocumentPath) -> ParsedMarkdown:
    lines = [line.strip() for line in markdown.replace("\r\n", "\n").split("\n")]
    return ParsedMarkdown(
        title=extract_title(lines, path),
        tags=extract_tags(lines),
        lines=lines,
        sections=split_sections(lines, 2),
    )


__all__ = [
    "ParsedMarkdown",
    "Section",
    "checkbox_items",
    "extract_tags",
    "extract_title",
    "find_section",
    "heading_level",
    "heading_text",
    "list_items",
    "match_alias",
    "normalize_heading",
    "paragraph_text",
    "parse_markdown",
    "snake_case_key",
    "split_sections",
]
