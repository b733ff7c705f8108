"""Detection of API controller and router files across supported languages."""

from __future__ import annotations

import os
import re
from collections import Counter
from dataclasses import dataclass
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Dict, Iterable, Iterator, List, Optional, Pattern, Sequence, Tuple

from .logging import get_logger
from .models import ScannedFile, ScanResult, ScanSummary

DEFAULT_EXCLUDE_DIRS = frozenset(
    {
        # build outputs
        "build",
        "dist",
        "out",
        "target",
        "bin",
        ".next",
        ".nuxt",
        # dependencies
        "node_modules",
        "vendor",
        "Pods",
        # IDE and tools
        ".gradle",
        ".idea",
        ".vscode",
        ".git",
        ".svn",
        # python
        "__pycache__",
        "venv",
        ".venv",
        ".tox",
        "env",
        # tests
        "test",
        "tests",
        "__tests__",
        "spec",
        "specs",
        # other
        "coverage",
        "docs",
        "documentation",
    }
)

MAX_FILE_SIZE = 500_000

_CONTROLLER_PATTERNS: Dict[str, Tuple[Pattern[str], ...]] = {
    # Spring MVC, WebFlux, Ktor
    "kt": (
        re.compile(r"@(Rest)?Controller\b"),
        re.compile(r"@(Get|Post|Put|Delete|Patch|Request)Mapping\s*\("),
        re.compile(r"@RouterOperation\b"),
        re.compile(r"\brouting\s*\{"),
        re.compile(r"\bget\s*\(\s*[\"'/]"),
        re.compile(r"\bpost\s*\(\s*[\"'/]"),
    ),
    # Spring, JAX-RS
    "java": (
        re.compile(r"@(Rest)?Controller\b"),
        re.compile(r"@(Get|Post|Put|Delete|Patch|Request)Mapping\s*\("),
        re.compile(r"@RouterOperation\b"),
        re.compile(r"@Path\s*\("),
    ),
    # NestJS, Express, Hono, Fastify
    "ts": (
        re.compile(r"@Controller\s*\("),
        re.compile(r"@(Get|Post|Put|Delete|Patch)\s*\("),
        re.compile(r"\brouter\.(get|post|put|delete|patch)\s*\("),
        re.compile(r"\bapp\.(get|post|put|delete|patch)\s*\([\"'/]"),
        re.compile(r"\.route\s*\(\s*[\"'/]"),
        re.compile(r"\bHono\s*\(\s*\)"),
        re.compile(r"\bfastify\.(get|post|put|delete)\s*\("),
    ),
    # Express, Koa, Hapi, Fastify
    "js": (
        re.compile(r"\brouter\.(get|post|put|delete|patch)\s*\(\s*[\"'/]"),
        re.compile(r"\bapp\.(get|post|put|delete|patch)\s*\(\s*[\"'/]"),
        re.compile(r"express\.Router\s*\(\s*\)"),
        re.compile(r"\bserver\.route\s*\(\s*\{"),
        re.compile(r"\bfastify\.(get|post|put|delete)\s*\("),
    ),
    # FastAPI, Flask, Django, DRF
    "py": (
        re.compile(r"@(app|router)\.(get|post|put|delete|patch)\s*\("),
        re.compile(r"\bAPIRouter\s*\("),
        re.compile(r"@(app|blueprint)\.route\s*\("),
        re.compile(r"\bpath\s*\(\s*[\"']"),
        re.compile(r"\bre_path\s*\(\s*[\"']"),
        re.compile(r"@api_view\s*\(\s*\["),
        re.compile(r"class\s+\w+\s*\(\s*\w*(APIView|ViewSet|ModelViewSet)"),
    ),
    # net/http, Gin, Echo, Fiber, Chi, Gorilla Mux
    "go": (
        re.compile(r"\bhttp\.(HandleFunc|Handle)\s*\("),
        re.compile(r"\b(GET|POST|PUT|DELETE|PATCH)\s*\(\s*[\"']"),
        re.compile(r"\.(Get|Post|Put|Delete|Patch)\s*\(\s*[\"']"),
        re.compile(r"\bmux\.(HandleFunc|Handle)\s*\("),
        re.compile(r"\becho\.New\s*\("),
        re.compile(r"\bgin\.(Default|New)\s*\("),
        re.compile(r"\bfiber\.New\s*\("),
        re.compile(r"\bchi\.(NewRouter|Router)\s*\("),
    ),
}

_SPRING_ENDPOINT = re.compile(r"@(Get|Post|Put|Delete|Patch|Request)Mapping\s*\(")
_ENDPOINT_PATTERNS: Dict[str, Pattern[str]] = {
    "kt": _SPRING_ENDPOINT,
    "java": _SPRING_ENDPOINT,
    "ts": re.compile(r"(@(Get|Post|Put|Delete|Patch)\s*\()|(\.(?:get|post|put|delete|patch)\s*\(\s*[\"'/])"),
    "js": re.compile(r"\.(?:get|post|put|delete|patch)\s*\(\s*[\"'/]"),
    "py": re.compile(r"@(app|router)\.(get|post|put|delete|patch)\s*\(|path\s*\(\s*[\"']"),
    "go": re.compile(r"(\.(?:Get|Post|Put|Delete|Patch|HandleFunc)\s*\(\s*[\"'])|(http\.Handle)"),
}

_C_STYLE_COMMENTS = (
    re.compile(r"//.*$", re.MULTILINE),
    re.compile(r"/\*[\s\S]*?\*/"),
)
_COMMENT_PATTERNS: Dict[str, Tuple[Pattern[str], ...]] = {
    "kt": _C_STYLE_COMMENTS,
    "java": _C_STYLE_COMMENTS,
    "ts": _C_STYLE_COMMENTS,
    "js": _C_STYLE_COMMENTS,
    "py": (
        re.compile(r"#.*$", re.MULTILINE),
        re.compile(r"('''[\s\S]*?''')|(\"\"\"[\s\S]*?\"\"\")"),
    ),
    "go": _C_STYLE_COMMENTS,
}

_NESTJS_CONTROLLER = re.compile(r"@Controller\s*\(")

_logger = get_logger("scanner")


def strip_comments(content: str, extension: str) -> str:
    for pattern in _COMMENT_PATTERNS.get(extension, ()):
        content = pattern.sub("", content)
    return content


def detect_framework(code: str, extension: str) -> Optional[str]:
    """Label the web framework of comment-free ``code``; first match wins."""
    if extension in ("kt", "java"):
        if "@RestController" in code or "@Controller" in code:
            return "Spring"
        if extension == "kt" and "routing {" in code:
            return "Ktor"
        if extension == "java" and "@Path(" in code:
            return "JAX-RS"
        return None
    if extension == "ts":
        if _NESTJS_CONTROLLER.search(code):
            return "NestJS"
        if "Hono" in code:
            return "Hono"
        if "fastify" in code:
            return "Fastify"
        if "express" in code or "Router()" in code:
            return "Express"
        return None
    if extension == "js":
        for needle, framework in (
            ("express", "Express"),
            ("fastify", "Fastify"),
            ("server.route", "Hapi"),
            ("new Koa", "Koa"),
        ):
            if needle in code:
                return framework
        return None
    if extension == "py":
        if "FastAPI" in code or "APIRouter" in code:
            return "FastAPI"
        if "Flask" in code or "@blueprint" in code:
            return "Flask"
        if "APIView" in code or "ViewSet" in code:
            return "Django REST"
        if "path(" in code or "re_path(" in code:
            return "Django"
        return None
    if extension == "go":
        for needle, framework in (
            ("gin.", "Gin"),
            ("echo.", "Echo"),
            ("fiber.", "Fiber"),
            ("chi.", "Chi"),
            ("mux.", "Gorilla Mux"),
            ("http.HandleFunc", "net/http"),
        ):
            if needle in code:
                return framework
        return None
    return None


def estimate_endpoints(code: str, extension: str) -> int:
    pattern = _ENDPOINT_PATTERNS.get(extension)
    if pattern is None:
        return 0
    return sum(1 for _ in pattern.finditer(code))


@dataclass
class IgnoreRule:
    """A glob from ``exclude_paths`` or ``.gitignore``."""

    pattern: str
    directory_only: bool
    anchored: bool
    negate: bool
    has_slash: bool

    def matches(self, rel_path: str, is_dir: bool) -> bool:
        if not self.pattern:
            return False
        if self.directory_only and not is_dir:
            return False

        if self.anchored or self.has_slash:
            if fnmatchcase(rel_path, self.pattern):
                return True
            return self.directory_only and rel_path.startswith(f"{self.pattern}/")

        return any(fnmatchcase(part, self.pattern) for part in rel_path.split("/"))


def build_ignore_rule(pattern: str, negate: bool = False) -> IgnoreRule | None:
    pattern = pattern.strip()
    if not pattern:
        return None

    directory_only = pattern.endswith("/")
    if directory_only:
        pattern = pattern[:-1]

    anchored = pattern.startswith("/")
    if anchored:
        pattern = pattern[1:]

    return IgnoreRule(
        pattern=pattern,
        directory_only=directory_only,
        anchored=anchored,
        negate=negate,
        has_slash="/" in pattern,
    )


def _parse_gitignore(path: Path) -> List[IgnoreRule]:
    if not path.is_file():
        return []

    rules: List[IgnoreRule] = []
    for raw_line in path.read_text(encoding="utf-8", errors="ignore").splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        negate = line.startswith("!")
        if negate:
            line = line[1:]
        rule = build_ignore_rule(line, negate=negate)
        if rule is not None:
            rules.append(rule)
    return rules


def _should_ignore(rel_path: str, is_dir: bool, rules: Sequence[IgnoreRule]) -> bool:
    ignored = False
    for rule in rules:
        if rule.matches(rel_path, is_dir):
            ignored = not rule.negate
    return ignored


class CodeScanner:
    """Finds files that look like HTTP controllers or routers."""

    def __init__(
        self,
        root: Path | str,
        *,
        exclude_dirs: Iterable[str] = DEFAULT_EXCLUDE_DIRS,
        exclude_paths: Sequence[str] = (),
        use_gitignore: bool = True,
        max_file_size: int = MAX_FILE_SIZE,
    ) -> None:
        self.root = Path(root).expanduser().resolve()
        self.exclude_dirs = frozenset(exclude_dirs)
        self.max_file_size = max_file_size
        self.rules: List[IgnoreRule] = _parse_gitignore(self.root / ".gitignore") if use_gitignore else []
        for pattern in exclude_paths:
            rule = build_ignore_rule(pattern)
            if rule is not None:
                self.rules.append(rule)

    @staticmethod
    def supported_languages() -> Tuple[str, ...]:
        return tuple(_CONTROLLER_PATTERNS)

    def scan(self) -> ScanResult:
        if not self.root.exists():
            raise FileNotFoundError(f"Project path not found: {self.root}")
        if not self.root.is_dir():
            raise NotADirectoryError(f"Project path is not a directory: {self.root}")

        total_scanned = 0
        found: List[ScannedFile] = []
        for path in self._iter_candidates():
            total_scanned += 1
            scanned = self._process_file(path)
            if scanned is not None:
                found.append(scanned)

        # sorted() is stable, so equal estimates keep walk order.
        found = sorted(found, key=lambda item: item.estimated_endpoints, reverse=True)
        summary = ScanSummary(
            total_files_scanned=total_scanned,
            api_files_found=len(found),
            by_language=dict(Counter(item.language for item in found)),
            by_framework=dict(Counter(item.framework for item in found if item.framework)),
            estimated_total_endpoints=sum(item.estimated_endpoints for item in found),
        )
        _logger.debug(
            "Scanned %d file(s); %d controller(s) found", total_scanned, len(found)
        )
        return ScanResult(files=found, summary=summary)

    def _iter_candidates(self) -> Iterator[Path]:
        for dirpath, dirnames, filenames in os.walk(self.root):
            current_dir = Path(dirpath)
            rel_dir = current_dir.relative_to(self.root).as_posix() if current_dir != self.root else ""

            kept = []
            for name in sorted(dirnames):
                if name in self.exclude_dirs or name.startswith("."):
                    continue
                rel_path = f"{rel_dir}/{name}" if rel_dir else name
                if _should_ignore(rel_path, True, self.rules):
                    continue
                kept.append(name)
            dirnames[:] = kept

            for filename in sorted(filenames):
                extension = Path(filename).suffix.lstrip(".")
                if extension not in _CONTROLLER_PATTERNS:
                    continue
                rel_path = f"{rel_dir}/{filename}" if rel_dir else filename
                if _should_ignore(rel_path, False, self.rules):
                    continue
                path = current_dir / filename
                try:
                    if path.stat().st_size >= self.max_file_size:
                        continue
                except OSError:
                    continue
                yield path

    def _process_file(self, path: Path) -> Optional[ScannedFile]:
        try:
            content = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            _logger.debug("Skipping unreadable file %s: %s", path, exc)
            return None

        extension = path.suffix.lstrip(".")
        code = strip_comments(content, extension)
        if not any(pattern.search(code) for pattern in _CONTROLLER_PATTERNS[extension]):
            return None

        return ScannedFile(
            absolute_path=str(path),
            relative_path=path.relative_to(self.root).as_posix(),
            content=content,
            language=extension,
            estimated_endpoints=estimate_endpoints(code, extension),
            framework=detect_framework(code, extension),
        )


__all__ = [
    "CodeScanner",
    "DEFAULT_EXCLUDE_DIRS",
    "IgnoreRule",
    "MAX_FILE_SIZE",
    "build_ignore_rule",
    "detect_framework",
    "estimate_endpoints",
    "strip_comments",
]
