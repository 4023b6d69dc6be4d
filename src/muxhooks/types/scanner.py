"""Static-analysis scanner types consumed by the pre-commit policy."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class Severity(Enum):
    """Severity level of a finding."""

    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


@dataclass(frozen=True, slots=True)
class Finding:
    """A single issue reported by the scanner."""

    file: str
    line: int = 0
    column: int = 0
    severity: Severity = Severity.INFO
    category: str = ""
    message: str = ""
    suggestion: str = ""
    rule_id: str = ""

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Finding:
        try:
            severity = Severity(str(data.get("severity", "info")).lower())
        except ValueError:
            severity = Severity.INFO
        return cls(
            file=str(data.get("file", "")),
            line=int(data.get("line", 0) or 0),
            column=int(data.get("column", 0) or 0),
            severity=severity,
            category=str(data.get("category", "")),
            message=str(data.get("message", "")),
            suggestion=str(data.get("suggestion", "")),
            rule_id=str(data.get("rule_id", "")),
        )


@dataclass(frozen=True, slots=True)
class ScanTotals:
    """Aggregate severity counts from a scan."""

    critical: int = 0
    warning: int = 0
    info: int = 0
    files: int = 0


@dataclass(slots=True)
class ScanResult:
    """Complete output of one scan."""

    project: str = ""
    totals: ScanTotals = field(default_factory=ScanTotals)
    findings: list[Finding] = field(default_factory=list)
    exit_code: int = 0
    duration: float = 0.0

    @property
    def is_healthy(self) -> bool:
        return self.totals.critical == 0 and self.totals.warning == 0

    @property
    def total_issues(self) -> int:
        return self.totals.critical + self.totals.warning + self.totals.info

    def filter_by_severity(self, severity: Severity) -> list[Finding]:
        return [f for f in self.findings if f.severity == severity]

    def to_dict(self) -> dict[str, Any]:
        return {
            "project": self.project,
            "totals": {
                "critical": self.totals.critical,
                "warning": self.totals.warning,
                "info": self.totals.info,
                "files": self.totals.files,
            },
            "findings": [
                {
                    "file": f.file,
                    "line": f.line,
                    "column": f.column,
                    "severity": f.severity.value,
                    "category": f.category,
                    "message": f.message,
                }
                for f in self.findings
            ],
            "exit_code": self.exit_code,
            "duration": self.duration,
        }


@dataclass(frozen=True, slots=True)
class ScanOptions:
    """Options passed through to the scanner."""

    languages: tuple[str, ...] = ()
    exclude_languages: tuple[str, ...] = ()
    ci: bool = False
    fail_on_warning: bool = False
    verbose: bool = False
    staged_only: bool = False
    diff_only: bool = False
    timeout: float = 60.0
