"""Runs scan, per-controller generation and merge for a project."""

from __future__ import annotations

import re
import time
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Sequence

from .config import ConfigError, GeneratorConfig, load_config
from .llm.anthropic_client import AnthropicRunner
from .llm.base import DEFAULT_MAX_CONCURRENCY, ChatRunner, RequestGate, shared_gate
from .llm.runner import LLMRunner
from .llm.usage import TokenUsage, UsageTracker
from .logging import get_logger
from .models import OpenApiFragment, ScannedFile
from .openapi.merger import merge_fragments
from .openapi.viewer import render_viewer
from .pipeline.collector import CollectionLoop
from .pipeline.generator import GenerationStep, InvalidOpenApiError
from .prompting import Language, PromptBuilder
from .retry import retry
from .scanner import CodeScanner
from .stores.history import ErrorLog, ExecutionLog


def snake_case(name: str) -> str:
    """``OrderController`` -> ``order_controller``; dashes and spaces become underscores."""
    name = re.sub(r"([A-Z]+)([A-Z][a-z])", r"\1_\2", name)
    name = re.sub(r"([a-z0-9])([A-Z])", r"\1_\2", name)
    name = re.sub(r"[\s\-.]+", "_", name)
    return name.lower().strip("_") or "controller"


@dataclass
class ControllerFailure:
    path: str
    reason: str


@dataclass
class RunOutcome:
    """Tally and artifacts of one generation run."""

    succeeded: int = 0
    failed: int = 0
    fragments: List[Path] = field(default_factory=list)
    failures: List[ControllerFailure] = field(default_factory=list)
    merged_yaml: Optional[Path] = None
    viewer_html: Optional[Path] = None
    usage: TokenUsage = field(default_factory=TokenUsage)

    @property
    def total(self) -> int:
        return self.succeeded + self.failed


class Orchestrator:
    """Coordinates scanning, model-driven generation and merging."""

    def __init__(
        self,
        runner: ChatRunner | None = None,
        *,
        usage: UsageTracker | None = None,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self.usage = usage or UsageTracker()
        self._runner = runner
        self._sleep = sleep
        self.logger = get_logger("orchestrator")

    def scan(self, project_dir: Path | str, *, config: GeneratorConfig | None = None) -> List[ScannedFile]:
        project_path = Path(project_dir).expanduser().resolve()
        config = config or load_config(project_path)
        scanner = CodeScanner(project_path, exclude_paths=config.exclude_paths)
        return scanner.scan().files

    def run(
        self,
        project_dir: Path | str,
        *,
        include: Sequence[str] | None = None,
        config: GeneratorConfig | None = None,
    ) -> RunOutcome:
        """Generate fragments for every detected (or included) controller and merge them."""
        project_path = Path(project_dir).expanduser().resolve()
        if not project_path.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {project_dir}")
        config = config or load_config(project_path)
        output_dir = config.output_dir
        execution_log = ExecutionLog(output_dir / "logs" / "execution_log.json")
        error_log = ErrorLog(output_dir / "logs" / "error.json")

        self.logger.info("Scanning %s", project_path)
        try:
            controllers = self.scan(project_path, config=config)
        except OSError as exc:
            execution_log.log("scan", False, str(exc))
            error_log.log_error("Scan failed", exc)
            raise
        execution_log.log(
            "scan", True, "Scan success", [item.absolute_path for item in controllers]
        )

        if include:
            controllers = self._select(project_path, controllers, include)
            execution_log.log(
                "select", True, "File selection", [item.absolute_path for item in controllers]
            )

        outcome = RunOutcome()
        if not controllers:
            execution_log.log("select", False, "No controllers to process")
            self.logger.warning("No controllers found in %s", project_path)
            outcome.usage = self.usage.total
            return outcome

        runner = self._resolve_runner(config)
        try:
            language = Language.parse(config.language)
        except ValueError as exc:
            raise ConfigError(str(exc)) from exc
        prompts = PromptBuilder(language)
        collector = CollectionLoop(runner, prompts=prompts, max_rounds=config.max_rounds)
        generator = GenerationStep(runner, prompts=prompts, validate=config.validate)

        yamls: List[str] = []
        used_names: Dict[str, int] = {}
        for index, controller in enumerate(controllers, start=1):
            self.logger.info(
                "[%d/%d] Generating OpenAPI for %s", index, len(controllers), controller.relative_path
            )
            try:
                fragment = self._generate(controller, collector, generator, config)
            except Exception as exc:  # one controller must not stop the batch
                self._record_failure(outcome, error_log, controller, str(exc), exc)
                self._sleep(config.failure_pause)
                continue

            if fragment is None:
                self._record_failure(outcome, error_log, controller, "No OpenAPI YAML generated.")
                self._sleep(config.failure_pause)
                continue

            target = self._fragment_path(output_dir, controller, used_names)
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(fragment.yaml, encoding="utf-8")
            yamls.append(fragment.yaml)
            outcome.fragments.append(target)
            outcome.succeeded += 1
            self.logger.info("Wrote %s", target)

        execution_log.log(
            "generate",
            outcome.failed == 0,
            f"{outcome.succeeded} succeeded, {outcome.failed} failed",
            [str(path) for path in outcome.fragments],
        )

        if yamls:
            merged = merge_fragments(yamls, config.output.title, config.output.version)
            openapi_dir = output_dir / "openapi"
            openapi_dir.mkdir(parents=True, exist_ok=True)
            outcome.merged_yaml = openapi_dir / f"{config.output.filename}.yaml"
            outcome.viewer_html = openapi_dir / f"{config.output.filename}.html"
            outcome.merged_yaml.write_text(merged, encoding="utf-8")
            outcome.viewer_html.write_text(
                render_viewer(merged, title=config.output.title), encoding="utf-8"
            )
            execution_log.log(
                "merge",
                True,
                "Merged OpenAPI written",
                [str(outcome.merged_yaml), str(outcome.viewer_html)],
            )
        else:
            execution_log.log("merge", False, "No fragments to merge")

        outcome.usage = self.usage.total
        return outcome

    def _generate(
        self,
        controller: ScannedFile,
        collector: CollectionLoop,
        generator: GenerationStep,
        config: GeneratorConfig,
    ) -> Optional[OpenApiFragment]:
        def attempt(number: int) -> Optional[OpenApiFragment]:
            if number > 0:
                self.logger.info("[Retry: %d] Collecting relevant files for %s", number, controller.relative_path)
            collection = collector.collect(controller)
            for item in collection.files:
                self.logger.debug("[relevant file] %s", item.absolute_path)
            return generator.generate(controller, collection)

        return retry(
            attempt,
            times=config.retry_attempts,
            delay=config.retry_delay,
            retry_on=lambda exc: isinstance(exc, InvalidOpenApiError),
            sleep=self._sleep,
        )

    def _record_failure(
        self,
        outcome: RunOutcome,
        error_log: ErrorLog,
        controller: ScannedFile,
        reason: str,
        exc: BaseException | None = None,
    ) -> None:
        outcome.failed += 1
        outcome.failures.append(ControllerFailure(controller.absolute_path, reason))
        error_log.log_error(f"{controller.relative_path}: {reason}", exc)
        self.logger.error("Failed %s: %s", controller.relative_path, reason)

    @staticmethod
    def _fragment_path(output_dir: Path, controller: ScannedFile, used: Dict[str, int]) -> Path:
        stem = snake_case(Path(controller.absolute_path).stem)
        count = used.get(stem, 0) + 1
        used[stem] = count
        name = stem if count == 1 else f"{stem}_{count}"
        return output_dir / "components" / f"{name}.yaml"

    def _select(
        self, project_path: Path, controllers: List[ScannedFile], include: Sequence[str]
    ) -> List[ScannedFile]:
        """Keep the requested controllers in the given order; unscanned files are read from disk."""
        by_path = {item.absolute_path: item for item in controllers}
        selected: List[ScannedFile] = []
        seen = set()
        for raw in include:
            candidate = Path(raw).expanduser()
            path = candidate if candidate.is_absolute() else project_path / candidate
            path = path.resolve()
            key = str(path)
            if key in seen:
                continue
            if key in by_path:
                selected.append(by_path[key])
                seen.add(key)
                continue
            if not path.is_file():
                self.logger.warning("Skipping %s: not a file", raw)
                continue
            try:
                content = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                self.logger.warning("Skipping %s: %s", raw, exc)
                continue
            try:
                relative = path.relative_to(project_path).as_posix()
            except ValueError:
                relative = raw
            selected.append(
                ScannedFile(
                    absolute_path=key,
                    relative_path=relative,
                    content=content,
                    language=path.suffix.lstrip("."),
                    estimated_endpoints=0,
                )
            )
            seen.add(key)
        return selected

    def _resolve_runner(self, config: GeneratorConfig) -> ChatRunner:
        if self._runner is not None:
            return self._runner

        llm = config.llm
        if llm.max_concurrency == DEFAULT_MAX_CONCURRENCY:
            gate = shared_gate()
        else:
            gate = RequestGate(llm.max_concurrency)

        if llm.provider == "openai":
            kwargs: Dict[str, Any] = {
                "usage": self.usage,
                "gate": gate,
                "max_tokens": llm.max_tokens,
            }
            if llm.base_url:
                kwargs["base_url"] = llm.base_url
            if llm.api_key:
                kwargs["api_key"] = llm.api_key
            if llm.temperature is not None:
                kwargs["temperature"] = llm.temperature
            if llm.request_timeout is not None:
                kwargs["request_timeout"] = llm.request_timeout
            self._runner = LLMRunner(llm.model, **kwargs)
        else:
            self._runner = AnthropicRunner(
                llm.model,
                api_key=llm.api_key,
                max_tokens=llm.max_tokens or AnthropicRunner.DEFAULT_MAX_TOKENS,
                usage=self.usage,
                gate=gate,
            )
        self.logger.debug("Using %s runner", llm.provider)
        return self._runner


__all__ = ["ControllerFailure", "Orchestrator", "RunOutcome", "snake_case"]
