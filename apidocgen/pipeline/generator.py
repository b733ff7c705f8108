"""Single-shot authoring of a controller's OpenAPI fragment."""

from __future__ import annotations

from typing import Callable, List, Optional, Sequence

from ..llm.base import ChatRunner
from ..llm.messages import ChatMessage, ChatRequest
from ..logging import get_logger
from ..models import CollectionResult, OpenApiFragment, ScannedFile
from ..openapi.validator import validate_fragment
from ..prompting import PromptBuilder, SourceFile
from ..prompting.constants import OPENAPI_MAX_TOKENS


class InvalidOpenApiError(ValueError):
    """Raised when the model's YAML is not a usable OpenAPI fragment."""

    def __init__(self, source_path: str, errors: Sequence[str]) -> None:
        self.source_path = source_path
        self.errors = list(errors)
        detail = "; ".join(self.errors[:3]) or "unknown error"
        super().__init__(f"Generated OpenAPI for {source_path} is invalid: {detail}")


def strip_code_fence(text: str) -> str:
    """Remove a surrounding ```yaml / ``` fence the model may add despite instructions."""
    stripped = text.strip()
    if stripped.startswith("```yaml"):
        stripped = stripped[len("```yaml"):]
    elif stripped.startswith("```"):
        stripped = stripped[len("```"):]
    if stripped.endswith("```"):
        stripped = stripped[: -len("```")]
    return stripped.strip()


class GenerationStep:
    """Asks the model for the fragment and optionally validates it."""

    def __init__(
        self,
        runner: ChatRunner,
        *,
        prompts: PromptBuilder | None = None,
        validate: bool = True,
        validator: Callable[[str], List[str]] = validate_fragment,
    ) -> None:
        self.runner = runner
        self.prompts = prompts or PromptBuilder()
        self.validate = validate
        self.validator = validator
        self.logger = get_logger("pipeline.generator")

    def generate(
        self, controller: ScannedFile, collection: CollectionResult
    ) -> Optional[OpenApiFragment]:
        prompt = self.prompts.openapi(
            SourceFile(controller.absolute_path, controller.content),
            [SourceFile(item.absolute_path, item.source_code) for item in collection.files],
            summary=collection.summary or None,
        )
        response = self.runner.chat(
            ChatRequest(
                system=prompt.system,
                messages=[ChatMessage.user(prompt.user)],
                max_tokens=OPENAPI_MAX_TOKENS,
                cache_system=True,
            )
        )

        yaml_text = strip_code_fence(response.text)
        if not yaml_text:
            self.logger.warning("Model returned no YAML for %s", controller.relative_path)
            return None

        if self.validate:
            errors = self.validator(yaml_text)
            if errors:
                raise InvalidOpenApiError(controller.absolute_path, errors)
        return OpenApiFragment(yaml=yaml_text, source_path=controller.absolute_path)


__all__ = ["GenerationStep", "InvalidOpenApiError", "strip_code_fence"]
