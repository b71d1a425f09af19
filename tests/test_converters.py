import pytest

from memory_bank_migrator.converters import (
    ActiveContextConverter,
    BranchContextConverter,
    ConversionError,
    GenericConverter,
    ProgressConverter,
    SystemPatternsConverter,
)
from memory_bank_migrator.documents import DocumentPath


def test_branch_context_purpose() -> None:
    markdown = "# Branch Context\n\n## Purpose\n\nThis branch is for X."
    document = BranchContextConverter().convert(markdown, DocumentPath.create("branchContext.md"))
    payload = document.to_dict()
    assert payload["metadata"]["documentType"] == "branch_context"
    assert payload["metadata"]["title"] == "Branch Context"
    assert payload["metadata"]["path"] == "branchContext.md"
    assert payload["content"]["purpose"] == "This branch is for X."
    assert payload["content"]["userStories"] == []


def test_branch_context_japanese_sections_and_user_stories() -> None:
    markdown = """# ブランチコンテキスト

## 目的

ブランチ: feature/login
作成日時: 2024-01-01

ログイン機能を実装する。

## ユーザーストーリー

- [x] ログインできる
- [ ] ログアウトできる

### 解決する課題

- 認証がない

### 必要な機能

- フォーム
"""
    document = BranchContextConverter().convert(
        markdown, DocumentPath.create("feature-login/branchContext.md")
    )
    content = document.content
    assert content["purpose"] == "ログイン機能を実装する。"
    assert content["userStories"] == [
        {"description": "ログインできる", "completed": True},
        {"description": "ログアウトできる", "completed": False},
        {"description": "解決する課題: 認証がない", "completed": False},
        {"description": "必要な機能: フォーム", "completed": False},
    ]


def test_branch_context_purpose_falls_back_to_branch_name() -> None:
    document = BranchContextConverter().convert(
        "# Branch Context\n", DocumentPath.create("feature-login/branchContext.md")
    )
    assert document.content["purpose"] == "Purpose of branch feature/login"


def test_branch_context_background() -> None:
    markdown = "# Branch Context\n\n## Purpose\nShip it\n\n## Background\nLegacy auth is slow.\n"
    document = BranchContextConverter().convert(markdown, DocumentPath.create("branchContext.md"))
    assert document.content["background"] == "Legacy auth is slow."


def test_tags_are_normalized() -> None:
    markdown = "# Notes\ntags: #Core #memory_bank #core\n\n## Summary\nText"
    document = GenericConverter().convert(markdown, DocumentPath.create("notes.md"))
    assert document.metadata.tags == ["core", "memory-bank"]


def test_active_context_sections() -> None:
    markdown = """# Active Context

## Current Work

Implementing the migrator.
_placeholder_

## Recent Changes

- Added backup
- Added validator

## Active Decisions
- Use pydantic

## Active Considerations
- Parallelism

## Next Steps
- Write tests
"""
    document = ActiveContextConverter().convert(markdown, DocumentPath.create("activeContext.md"))
    assert document.content == {
        "currentWork": "Implementing the migrator.",
        "recentChanges": ["Added backup", "Added validator"],
        "activeDecisions": ["Use pydantic"],
        "considerations": ["Parallelism"],
        "nextSteps": ["Write tests"],
    }


def test_progress_sections() -> None:
    markdown = (
        "# Progress\n\n## What Works\n- [x] Backup\n- Validation\n"
        "## Known Issues\n- None yet\n## Current Status\nBeta\n"
    )
    document = ProgressConverter().convert(markdown, DocumentPath.create("progress.md"))
    assert document.content["workingFeatures"] == ["Backup", "Validation"]
    assert document.content["knownIssues"] == ["None yet"]
    assert document.content["status"] == "Beta"
    assert document.content["pendingImplementation"] == []


def test_system_patterns_heading_and_bold_parts() -> None:
    markdown = """# System Patterns

## Technical Decisions

### Use pydantic for schemas

#### Context
We need validation.

#### Decision
Use pydantic v2.

#### Consequences
- Faster validation
- Extra dependency

### Bold style
**Context**: Legacy docs use bold labels.
**Decision**: Support both.
**Consequences**:
- Parser handles both
"""
    document = SystemPatternsConverter().convert(markdown, DocumentPath.create("systemPatterns.md"))
    assert document.content["technicalDecisions"] == [
        {
            "title": "Use pydantic for schemas",
            "context": "We need validation.",
            "decision": "Use pydantic v2.",
            "consequences": ["Faster validation", "Extra dependency"],
        },
        {
            "title": "Bold style",
            "context": "Legacy docs use bold labels.",
            "decision": "Support both.",
            "consequences": ["Parser handles both"],
        },
    ]


def test_generic_sections_become_keys() -> None:
    markdown = "# Notes\n\n## Overview\nSome text\n## Action Items\n- one\n- two\n## 日本語\n内容\n"
    document = GenericConverter().convert(markdown, DocumentPath.create("notes.md"))
    assert document.content == {
        "overview": "Some text",
        "action_items": ["one", "two"],
        "section_3": "内容",
    }


def test_generic_without_sections_keeps_body() -> None:
    document = GenericConverter().convert("Just a line", DocumentPath.create("notes.md"))
    assert document.content == {"body": "Just a line"}
    assert document.metadata.title == "notes"


def test_generic_empty_document_has_empty_content() -> None:
    document = GenericConverter().convert("", DocumentPath.create("empty.md"))
    assert document.content == {}


def test_binary_input_is_rejected() -> None:
    with pytest.raises(ConversionError):
        GenericConverter().convert("\x00abc", DocumentPath.create("blob.md"))
