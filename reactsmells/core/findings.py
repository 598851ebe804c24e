from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import TYPE_CHECKING, Any, Dict, List, Literal, Optional

if TYPE_CHECKING:
    from reactsmells.analyze.suppressions import Suppressions

Severity = Literal["info", "warning", "error"]
Category = Literal["syntax", "state", "lifecycle", "dom", "props", "hooks", "composition"]

SEVERITY_ORDER: Dict[str, int] = {"info": 0, "warning": 1, "error": 2}


def severity_rank(severity: str) -> int:
    return SEVERITY_ORDER.get(severity, 0)


@dataclass(frozen=True)
class Location:
    path: str
    line: int
    column: int
    end_line: int
    end_column: int


@dataclass(frozen=True)
class Finding:
    rule_id: str
    category: Category
    severity: Severity
    title: str
    message: str
    location: Location
    recommendation: str = ""
    evidence: Dict[str, Any] = field(default_factory=dict)

    @property
    def sort_key(self):
        return (self.location.path, self.location.line, self.location.column, self.rule_id)

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


@dataclass(frozen=True)
class JsxBlock:
    """Structural fingerprint of one JSX subtree, kept for the cross-file pass."""

    digest: str
    element_count: int
    component: str
    location: Location


@dataclass
class AnalysisResult:
    path: str
    language: Optional[str]
    findings: List[Finding] = field(default_factory=list)
    parse_error: Optional[str] = None
    suppressed: int = 0
    jsx_blocks: List[JsxBlock] = field(default_factory=list)
    suppressions: Optional["Suppressions"] = None

    @property
    def ok(self) -> bool:
        return self.parse_error is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "path": self.path,
            "language": self.language,
            "parseError": self.parse_error,
            "suppressed": self.suppressed,
            "findings": [f.to_dict() for f in self.findings],
        }
