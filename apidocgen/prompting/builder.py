"""Builds the system/user prompt pairs sent to the model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Sequence, Tuple

from .constants import (
    COLLECT_SYSTEM_PROMPT_EN,
    COLLECT_SYSTEM_PROMPT_KO,
    OPENAPI_SYSTEM_PROMPT_EN,
    OPENAPI_SYSTEM_PROMPT_KO,
)


class Language(str, Enum):
    """Language the model writes summaries and descriptions in."""

    EN = "EN"
    KO = "KO"

    @classmethod
    def parse(cls, value: str | None) -> "Language":
        if not value:
            return cls.EN
        try:
            return cls(value.strip().upper())
        except ValueError as exc:
            raise ValueError(f"Unsupported language '{value}'; expected EN or KO") from exc


@dataclass(frozen=True)
class SourceFile:
    """A file shown to the model: where it lives and what it says."""

    absolute_path: str
    source_code: str


@dataclass(frozen=True)
class Prompt:
    system: str
    user: str


# Labels: heading for the controller, path line, source line, summary, references.
_LABELS: Dict[Language, Tuple[str, str, str, str, str]] = {
    Language.EN: (
        "## Controller to analyze",
        "absolute file path",
        "source code",
        "## Summary",
        "## Relevant files",
    ),
    Language.KO: (
        "## 분석할 컨트롤러",
        "파일 절대경로",
        "소스코드",
        "## 요약",
        "## 참조 파일들",
    ),
}


class PromptBuilder:
    """Assembles prompts for collecting referenced types and authoring OpenAPI YAML."""

    def __init__(self, language: Language = Language.EN) -> None:
        self.language = language

    def collect(self, controller: SourceFile) -> Prompt:
        system = COLLECT_SYSTEM_PROMPT_KO if self.language is Language.KO else COLLECT_SYSTEM_PROMPT_EN
        heading = _LABELS[self.language][0]
        user = f"{heading}\n\n{self._describe(controller)}"
        return Prompt(system=system, user=user)

    def openapi(
        self,
        controller: SourceFile,
        relevant_files: Sequence[SourceFile] = (),
        summary: str | None = None,
    ) -> Prompt:
        system = OPENAPI_SYSTEM_PROMPT_KO if self.language is Language.KO else OPENAPI_SYSTEM_PROMPT_EN
        heading, _, _, summary_heading, references_heading = _LABELS[self.language]

        parts = []
        if summary:
            parts.append(f"{summary_heading}\n{summary}")
        parts.append(f"{heading}\n\n{self._describe(controller)}")
        references = "\n---\n".join(self._describe(item) for item in relevant_files)
        parts.append(f"{references_heading}\n{references}")
        return Prompt(system=system, user="\n\n".join(parts))

    def _describe(self, item: SourceFile) -> str:
        _, path_label, source_label, _, _ = _LABELS[self.language]
        return f"{path_label}: {item.absolute_path}\n{source_label}:\n{item.source_code}"


__all__ = ["Language", "Prompt", "PromptBuilder", "SourceFile"]
