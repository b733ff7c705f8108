"""Core data models shared across apidocgen components."""

from dataclasses import dataclass, field
from typing import Dict, List, Optional, Tuple


@dataclass(frozen=True)
class ScannedFile:
    """A controller candidate discovered by the scanner."""

    absolute_path: str
    relative_path: str
    content: str
    language: str
    estimated_endpoints: int
    framework: Optional[str] = None


@dataclass
class ScanSummary:
    """Aggregate counts for a scan run."""

    total_files_scanned: int
    api_files_found: int
    by_language: Dict[str, int] = field(default_factory=dict)
    by_framework: Dict[str, int] = field(default_factory=dict)
    estimated_total_endpoints: int = 0


@dataclass
class ScanResult:
    """Controllers found in a project, ordered by endpoint estimate."""

    files: List[ScannedFile]
    summary: ScanSummary


@dataclass(frozen=True)
class DeclarationLocation:
    """Where a named declaration lives and its exact source text."""

    class_name: str
    file_path: str
    line_number: int
    source_code: str
    imports: Tuple[str, ...] = ()


@dataclass(frozen=True)
class RelevantFile:
    """Source of a type retrieved while collecting a controller's types."""

    absolute_path: str
    source_code: str


@dataclass(frozen=True)
class CollectionResult:
    """Summary text and deduplicated type sources gathered for one controller."""

    summary: str
    files: Tuple[RelevantFile, ...] = ()


@dataclass(frozen=True)
class OpenApiFragment:
    """Partial OpenAPI YAML produced for a single controller."""

    yaml: str
    source_path: str
