"""The ``get_file`` retrieval tool offered to the model during collection."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional

from ..finder import InvalidInputError, TypeFinder, finder_for_extension
from ..logging import get_logger
from .messages import ToolCall, ToolResult, ToolSpec

GET_FILE = "get_file"

GET_FILE_TOOL = ToolSpec(
    name=GET_FILE,
    description=(
        "Retrieves the source of a class, interface or type declaration. Give the absolute "
        "path of the file expected to contain it (or any file of the same language next to "
        "it) and the declaration name. Returns the declaration source and the imports of "
        "the file that holds it."
    ),
    input_schema={
        "type": "object",
        "properties": {
            "absolutePath": {
                "type": "string",
                "description": "The absolute path of the file to retrieve.",
            },
            "className": {
                "type": "string",
                "description": "Class name to find.",
            },
        },
        "required": ["absolutePath", "className"],
    },
)

_logger = get_logger("llm.tools")


@dataclass
class RetrievalResult:
    """Answer of one ``get_file`` call; ``None`` fields are left out of the payload."""

    result: str
    absolute_path: Optional[str] = None
    class_name: Optional[str] = None
    content: Optional[str] = None
    imports: Optional[List[str]] = None

    @property
    def succeeded(self) -> bool:
        return self.result == "Success"

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {"result": self.result}
        if self.absolute_path is not None:
            payload["absolutePath"] = self.absolute_path
        if self.class_name is not None:
            payload["className"] = self.class_name
        if self.content is not None:
            payload["content"] = self.content
        if self.imports is not None:
            payload["imports"] = list(self.imports)
        return payload


class GetFileTool:
    """Resolves a declaration for the model; failures come back as ``Error: ...`` results."""

    spec = GET_FILE_TOOL

    def __init__(self, router: Callable[[str], Optional[TypeFinder]] = finder_for_extension) -> None:
        self._router = router

    def execute(self, absolute_path: str, class_name: str) -> RetrievalResult:
        path = Path(absolute_path)
        finder = self._router(path.suffix)
        if finder is None:
            return RetrievalResult(
                result=f"Error: Unsupported file type for path '{absolute_path}'.",
                absolute_path=absolute_path,
            )

        try:
            location = finder.find_by_name(path, class_name)
        except InvalidInputError as exc:
            return RetrievalResult(
                result=f"Error: {exc} (path '{absolute_path}').",
                absolute_path=absolute_path,
            )
        except Exception as exc:  # the model must always get an answer
            _logger.warning("get_file failed for %s (%s): %s", absolute_path, class_name, exc)
            return RetrievalResult(
                result=f"Error: Could not read '{absolute_path}': {exc}",
                absolute_path=absolute_path,
            )

        if location is None:
            return RetrievalResult(
                result=f"Error: File not found at path '{absolute_path}'.",
                absolute_path=absolute_path,
            )
        return RetrievalResult(
            result="Success",
            absolute_path=location.file_path,
            class_name=location.class_name,
            content=location.source_code,
            imports=list(location.imports),
        )

    def dispatch(self, call: ToolCall) -> RetrievalResult:
        """Run a model tool call addressed to this tool."""
        if call.name != GET_FILE:
            return RetrievalResult(result=f"Error: Unknown tool '{call.name}'.")
        absolute_path = call.arguments.get("absolutePath")
        class_name = call.arguments.get("className")
        if not isinstance(absolute_path, str) or not isinstance(class_name, str):
            return RetrievalResult(result="Error: Invalid input for get_file tool.")
        return self.execute(absolute_path, class_name)

    def answer(self, call: ToolCall) -> ToolResult:
        return ToolResult(call_id=call.id, payload=self.dispatch(call).to_dict())


__all__ = ["GET_FILE", "GET_FILE_TOOL", "GetFileTool", "RetrievalResult"]
