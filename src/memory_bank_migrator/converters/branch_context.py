from __future__ import annotations

from typing import Any

from ..documents import DocumentPath, DocumentType
from .base import BaseConverter
from .parsing import (
    ParsedMarkdown,
    checkbox_items,
    find_section,
    is_content_line,
    list_items,
    match_alias,
    split_sections,
)

PURPOSE = ("purpose", "目的")
BACKGROUND = ("background", "背景")
USER_STORIES = ("user stories", "user story", "ユーザーストーリー")
STORY_GROUPS: dict[str, tuple[str, ...]] = {
    "challenges": ("challenges", "problems to solve", "解決する課題"),
    "features": ("required features", "features", "必要な機能"),
    "expectations": ("expected behavior", "expected behaviour", "期待される動作"),
}
BRANCH_LINE_PREFIXES = ("branch:", "ブランチ:")
CREATED_LINE_PREFIXES = ("created:", "created at:", "作成日時:")

_BRANCH_DIR_PREFIXES = (("feature-", "feature/"), ("fix-", "fix/"))


class BranchContextConverter(BaseConverter):
    document_type = DocumentType.BRANCH_CONTEXT

    def build_content(self, parsed: ParsedMarkdown, path: DocumentPath) -> dict[str, Any]:
        purpose_lines: list[str] = []
        branch_name: str | None = None
        purpose_section = find_section(parsed.sections, PURPOSE)
        if purpose_section is not None:
            for line in purpose_section.lines:
                lowered = line.lower()
                if lowered.startswith(BRANCH_LINE_PREFIXES):
                    branch_name = line.split(":", 1)[1].strip() or None
                elif lowered.startswith(CREATED_LINE_PREFIXES):
                    continue
                elif is_content_line(line):
                    purpose_lines.append(line)

        branch_name = branch_name or branch_name_from_path(path)
        purpose = "\n".join(purpose_lines).strip()
        if not purpose:
            purpose = f"Purpose of branch {branch_name}" if branch_name else parsed.title

        content: dict[str, Any] = {
            "purpose": purpose,
            "userStories": self._user_stories(parsed),
        }
        background_section = find_section(parsed.sections, BACKGROUND)
        if background_section is not None:
            background = "\n".join(
                line for line in background_section.lines if is_content_line(line)
            ).strip()
            if background:
                content["background"] = background
        return content

    def _user_stories(self, parsed: ParsedMarkdown) -> list[dict[str, Any]]:
        section = find_section(parsed.sections, USER_STORIES)
        if section is None:
            return []
        stories: list[dict[str, Any]] = []
        leading: list[str] = []
        for line in section.lines:
            if line.startswith("### "):
                break
            leading.append(line)
        for description, completed in checkbox_items(leading):
            stories.append({"description": description, "completed": completed})

        for group in split_sections(section.lines, 3):
            if match_alias(group.title, STORY_GROUPS) is None:
                for description, completed in checkbox_items(group.lines):
                    stories.append({"description": description, "completed": completed})
                continue
            for item in list_items(group.lines):
                stories.append({"description": f"{group.title}: {item}", "completed": False})
        return stories


def branch_name_from_path(path: DocumentPath) -> str:
    parent = path.directory.rpartition("/")[2]
    for prefix, namespace in _BRANCH_DIR_PREFIXES:
        if parent.startswith(prefix):
            return namespace + parent[len(prefix):]
    return parent


__all__ = ["BranchContextConverter", "branch_name_from_path"]
