"""Bounded tool-calling conversation that gathers a controller's referenced types."""

from __future__ import annotations

from concurrent.futures import ThreadPoolExecutor
from typing import List, Sequence

from ..llm.base import ChatRunner
from ..llm.messages import ChatMessage, ChatRequest, ToolCall, ToolResult
from ..llm.tools import GetFileTool, RetrievalResult
from ..logging import get_logger
from ..models import CollectionResult, RelevantFile, ScannedFile
from ..prompting import PromptBuilder, SourceFile
from ..prompting.constants import COLLECT_MAX_TOKENS

DEFAULT_MAX_ROUNDS = 15
DEFAULT_MAX_WORKERS = 10


class CollectionLoop:
    """Lets the model call ``get_file`` until it stops asking or the round limit is reached.

    Each round sends the whole conversation, records any free text into the
    summary and, when tool calls were requested, answers them concurrently.
    Tool failures are ordinary results for the model to read; only errors
    raised by the runner escape.
    """

    def __init__(
        self,
        runner: ChatRunner,
        *,
        tool: GetFileTool | None = None,
        prompts: PromptBuilder | None = None,
        max_rounds: int = DEFAULT_MAX_ROUNDS,
        max_workers: int = DEFAULT_MAX_WORKERS,
    ) -> None:
        if max_rounds < 1:
            raise ValueError("max_rounds must be at least 1")
        self.runner = runner
        self.tool = tool or GetFileTool()
        self.prompts = prompts or PromptBuilder()
        self.max_rounds = max_rounds
        self.max_workers = max(1, max_workers)
        self.logger = get_logger("pipeline.collector")

    def collect(self, controller: ScannedFile) -> CollectionResult:
        prompt = self.prompts.collect(SourceFile(controller.absolute_path, controller.content))
        messages: List[ChatMessage] = [ChatMessage.user(prompt.user)]
        summary_parts: List[str] = []
        files: List[RelevantFile] = []
        seen_paths = set()

        rounds = 0
        while rounds < self.max_rounds:
            rounds += 1
            response = self.runner.chat(
                ChatRequest(
                    system=prompt.system,
                    messages=list(messages),
                    tools=[self.tool.spec],
                    max_tokens=COLLECT_MAX_TOKENS,
                    cache_system=True,
                )
            )
            if response.text:
                summary_parts.append(response.text)

            if response.tool_calls:
                results = self._run_tools(response.tool_calls)
                for result in results:
                    if result.absolute_path is None or result.content is None:
                        continue
                    if result.absolute_path in seen_paths:
                        self.logger.debug("Already collected %s; skipping", result.absolute_path)
                        continue
                    seen_paths.add(result.absolute_path)
                    files.append(RelevantFile(result.absolute_path, result.content))

                messages.append(ChatMessage.assistant(response.text, response.tool_calls))
                messages.append(
                    ChatMessage.results(
                        tuple(
                            ToolResult(call_id=call.id, payload=result.to_dict())
                            for call, result in zip(response.tool_calls, results)
                        )
                    )
                )

            if not response.wants_tools or not response.tool_calls:
                break
        else:
            self.logger.warning(
                "Stopped collecting for %s after %d rounds", controller.relative_path, rounds
            )

        self.logger.debug(
            "Collected %d file(s) for %s in %d round(s)", len(files), controller.relative_path, rounds
        )
        return CollectionResult(summary="\n".join(summary_parts).strip(), files=tuple(files))

    def _run_tools(self, calls: Sequence[ToolCall]) -> List[RetrievalResult]:
        workers = min(self.max_workers, len(calls))
        with ThreadPoolExecutor(max_workers=workers, thread_name_prefix="get-file") as pool:
            return list(pool.map(self.tool.dispatch, calls))


__all__ = ["CollectionLoop", "DEFAULT_MAX_ROUNDS", "DEFAULT_MAX_WORKERS"]
