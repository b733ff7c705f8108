"""Prompt construction for the collection and authoring conversations."""

from .builder import Language, Prompt, PromptBuilder, SourceFile

__all__ = ["Language", "Prompt", "PromptBuilder", "SourceFile"]
