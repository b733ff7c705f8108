"""CLI entrypoints for apidocgen commands."""

from __future__ import annotations

import argparse
import os
import sys
from pathlib import Path

from .config import LANGUAGES, PROVIDERS, ConfigError, GeneratorConfig, load_config
from .llm.base import LLMError
from .logging import configure_logging
from .orchestrator import Orchestrator, RunOutcome

_API_KEY_ENV = {
    "anthropic": ("ANTHROPIC_API_KEY",),
    "openai": ("APIDOCGEN_LLM_API_KEY", "OPENAI_API_KEY"),
}


def _add_verbose_option(
    parser: argparse.ArgumentParser, *, suppress_default: bool = False
) -> None:
    kwargs: dict[str, object] = {
        "action": "store_true",
        "help": "Increase log verbosity for troubleshooting.",
    }
    if suppress_default:
        kwargs["default"] = argparse.SUPPRESS
    else:
        kwargs["default"] = False
    parser.add_argument(
        "-v",
        "--verbose",
        **kwargs,
    )


def _add_project_argument(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "project_dir",
        nargs="?",
        default=".",
        help="Path to the project root (defaults to current directory).",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="apidocgen",
        description="Generate OpenAPI documentation from API controller source code.",
    )
    _add_verbose_option(parser)
    subparsers = parser.add_subparsers(dest="command", required=True)

    generate_parser = subparsers.add_parser(
        "generate",
        help="Generate per-controller OpenAPI fragments and merge them.",
    )
    _add_verbose_option(generate_parser, suppress_default=True)
    _add_project_argument(generate_parser)
    generate_parser.add_argument(
        "-o",
        "--output",
        help="Output directory (defaults to <project>/.apidocgen).",
    )
    generate_parser.add_argument("-m", "--model", help="Model name to use.")
    generate_parser.add_argument("-k", "--api-key", help="API key for the model provider.")
    generate_parser.add_argument(
        "--provider",
        choices=PROVIDERS,
        help="Model provider (defaults to the configured one, else anthropic).",
    )
    generate_parser.add_argument(
        "-l",
        "--language",
        type=str.upper,
        choices=LANGUAGES,
        help="Language of generated descriptions.",
    )
    generate_parser.add_argument(
        "--include",
        nargs="+",
        metavar="PATH",
        help="Only process these controller files (relative to the project or absolute).",
    )
    generate_parser.add_argument(
        "--no-validate",
        action="store_true",
        help="Accept generated fragments without OpenAPI validation.",
    )

    scan_parser = subparsers.add_parser(
        "scan",
        help="List the controller files that would be processed.",
    )
    _add_verbose_option(scan_parser, suppress_default=True)
    _add_project_argument(scan_parser)
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for apidocgen commands."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    project_dir = Path(args.project_dir).expanduser().resolve()
    if not project_dir.is_dir():
        parser.exit(1, f"Project path is not a directory: {args.project_dir}\n")

    try:
        config = load_config(project_dir)
    except ConfigError as exc:
        parser.exit(1, f"{exc}\n")

    if args.command == "scan":
        configure_logging(verbose=bool(args.verbose))
        _run_scan(parser, project_dir, config)
    elif args.command == "generate":
        _apply_overrides(config, args)
        configure_logging(
            verbose=bool(args.verbose),
            log_file=config.output_dir / "logs" / "apidocgen.log",
        )
        if not _has_api_key(config):
            env_names = " or ".join(_API_KEY_ENV[config.llm.provider])
            parser.exit(
                1,
                f"No API key for provider '{config.llm.provider}'. "
                f"Pass --api-key, set llm.api_key in .apidocgen.yml or export {env_names}.\n",
            )
        _run_generate(parser, project_dir, config, args.include)
    else:  # pragma: no cover - argparse enforces choices
        parser.exit(1, "Unknown command\n")


def _apply_overrides(config: GeneratorConfig, args: argparse.Namespace) -> None:
    if args.output:
        config.output.directory = Path(args.output).expanduser().resolve()
    if args.provider:
        config.llm.provider = args.provider
    if args.model:
        config.llm.model = args.model
    if args.api_key:
        config.llm.api_key = args.api_key
    if args.language:
        config.language = args.language
    if args.no_validate:
        config.validate = False


def _has_api_key(config: GeneratorConfig) -> bool:
    if config.llm.api_key:
        return True
    if any(os.getenv(name) for name in _API_KEY_ENV[config.llm.provider]):
        return True
    # Self-hosted OpenAI-compatible servers usually run without keys.
    return config.llm.provider == "openai" and bool(config.llm.base_url)


def _run_scan(parser: argparse.ArgumentParser, project_dir: Path, config: GeneratorConfig) -> None:
    try:
        controllers = Orchestrator().scan(project_dir, config=config)
    except OSError as exc:
        parser.exit(1, f"apidocgen scan failed: {exc}\n")

    if not controllers:
        print("No API controllers found.")
        return
    for item in controllers:
        framework = item.framework or "unknown"
        print(
            f"{item.relative_path}  [{item.language}, {framework}, ~{item.estimated_endpoints} endpoints]"
        )
    total = sum(item.estimated_endpoints for item in controllers)
    print(f"{len(controllers)} controller(s), ~{total} endpoint(s)")


def _run_generate(
    parser: argparse.ArgumentParser,
    project_dir: Path,
    config: GeneratorConfig,
    include: list[str] | None,
) -> None:
    orchestrator = Orchestrator()
    try:
        outcome = orchestrator.run(project_dir, include=include, config=config)
    except (ConfigError, LLMError) as exc:
        parser.exit(1, f"{exc}\n")
    except OSError as exc:
        parser.exit(1, f"apidocgen generate failed: {exc}\nRun with --verbose for more details.\n")
    except KeyboardInterrupt:
        parser.exit(130, "Interrupted; fragments written so far were kept.\n")
    _print_outcome(outcome)
    if outcome.total and outcome.succeeded == 0:
        parser.exit(1, "No controller produced an OpenAPI fragment.\n")


def _print_outcome(outcome: RunOutcome) -> None:
    print(f"Processed {outcome.total} controller(s): {outcome.succeeded} succeeded, {outcome.failed} failed")
    for failure in outcome.failures:
        print(f"  failed: {_relativize(Path(failure.path))} ({failure.reason})")
    usage = outcome.usage
    print(
        f"Tokens: input {usage.input_tokens}, output {usage.output_tokens}, "
        f"cached {usage.cached_tokens} (${usage.dollar_cost:.4f})"
    )
    if outcome.merged_yaml is not None:
        print(f"OpenAPI written to {_relativize(outcome.merged_yaml)}")
    if outcome.viewer_html is not None:
        print(f"Viewer written to {_relativize(outcome.viewer_html)}")


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
