"""
Mock adapters — scripted test doubles for every collaborator.

The core never notices the difference: the mocks honour the same
Receipt contract as the real adapters and record every call so tests
can assert on what was (or wasn't) fetched, built, asked or reported.
"""

from __future__ import annotations

from pathlib import Path

from sprout.adapters.base import Builder, Confirmation, Reporter, VersionControl
from sprout.core.models.action import Receipt


class MockVersionControl(VersionControl):
    """Scripted version control.

    Args:
        tags_output: Raw ``ls-remote`` text returned by ``list_tags``.
        files: Files written into every checkout (relative path → text or bytes).
        fail_list: Make ``list_tags`` fail.
        fail_clone: Make ``clone`` fail.
    """

    def __init__(
        self,
        tags_output: str = "",
        files: dict[str, str | bytes] | None = None,
        fail_list: bool = False,
        fail_clone: bool = False,
        available: bool = True,
    ):
        self._tags_output = tags_output
        self._files = files or {}
        self._fail_list = fail_list
        self._fail_clone = fail_clone
        self._available = available
        self.list_calls: list[str] = []
        self.clone_calls: list[tuple[str, str, Path]] = []

    @property
    def name(self) -> str:
        return "mock-vcs"

    def is_available(self) -> bool:
        return self._available

    def list_tags(self, git_url: str) -> Receipt:
        self.list_calls.append(git_url)
        if self._fail_list:
            return Receipt.failure(adapter=self.name, operation="list_tags", error="[mock] no such remote")
        return Receipt.success(adapter=self.name, operation="list_tags", output=self._tags_output)

    def clone(self, git_url: str, ref: str, destination: Path, verbose: bool = False) -> Receipt:
        self.clone_calls.append((git_url, ref, destination))
        if self._fail_clone:
            return Receipt.failure(adapter=self.name, operation="clone", error=f"[mock] ref {ref} not found")
        destination.mkdir(parents=True, exist_ok=True)
        for relative, content in self._files.items():
            target = destination / relative
            target.parent.mkdir(parents=True, exist_ok=True)
            if isinstance(content, bytes):
                target.write_bytes(content)
            else:
                target.write_text(content, encoding="utf-8")
        return Receipt.success(adapter=self.name, operation="clone")

    @property
    def clone_count(self) -> int:
        return len(self.clone_calls)


class MockBuilder(Builder):
    """Scripted toolchain.

    On success writes a fake binary for each name in ``produces`` under
    ``.build/release``.
    """

    def __init__(
        self,
        produces: list[str] | None = None,
        fail: bool = False,
        diagnostic: str = "[mock] compile error",
        available: bool = True,
    ):
        self._produces = produces if produces is not None else []
        self._fail = fail
        self._diagnostic = diagnostic
        self._available = available
        self.build_calls: list[Path] = []

    @property
    def name(self) -> str:
        return "mock-builder"

    def is_available(self) -> bool:
        return self._available

    def build(self, source_dir: Path, verbose: bool = False) -> Receipt:
        self.build_calls.append(source_dir)
        if self._fail:
            return Receipt.failure(adapter=self.name, operation="build", error=self._diagnostic)
        for product in self._produces:
            binary = self.artifact_path(source_dir, product)
            binary.parent.mkdir(parents=True, exist_ok=True)
            binary.write_text(f"#!/bin/sh\necho {product}\n", encoding="utf-8")
            binary.chmod(0o755)
        return Receipt.success(adapter=self.name, operation="build")

    def artifact_path(self, source_dir: Path, command: str) -> Path:
        return source_dir / ".build" / "release" / command

    @property
    def build_count(self) -> int:
        return len(self.build_calls)


class ScriptedConfirmation(Confirmation):
    """Answers questions from a fixed script, then with ``default``."""

    def __init__(self, answers: list[bool] | None = None, default: bool = False):
        self._answers = list(answers or [])
        self._default = default
        self.questions: list[str] = []

    def ask(self, message: str) -> bool:
        self.questions.append(message)
        if self._answers:
            return self._answers.pop(0)
        return self._default


class RecordingReporter(Reporter):
    """Keeps every message as ``(level, text)``."""

    def __init__(self) -> None:
        self.messages: list[tuple[str, str]] = []

    def info(self, message: str) -> None:
        self.messages.append(("info", message))

    def success(self, message: str) -> None:
        self.messages.append(("success", message))

    def warning(self, message: str) -> None:
        self.messages.append(("warning", message))

    def error(self, message: str) -> None:
        self.messages.append(("error", message))

    def texts(self, level: str | None = None) -> list[str]:
        return [text for lvl, text in self.messages if level is None or lvl == level]
