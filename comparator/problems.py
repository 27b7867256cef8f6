"""
Problem collection for an API comparison run.

Every finding is a human-readable string. The collector routes it into
the breaking and/or designed bucket depending on its severity and on
which comparisons the caller asked for.
"""
import json
from dataclasses import dataclass, field
from enum import Enum

from comparator.compatibility import MISSING


class Severity(str, Enum):
    BREAKING = "breaking"
    DESIGNED = "designed"
    # Changes whose impact cannot be classified; reported with breaking problems.
    ADVISORY = "advisory"


@dataclass
class Finding:
    """A single recorded problem."""
    message: str
    severity: Severity

    def to_dict(self) -> dict:
        return {"message": self.message, "severity": self.severity.value}


@dataclass(frozen=True)
class CompareOptions:
    compare_breaking_api_changes: bool = True
    compare_designed_api_changes: bool = True

    @classmethod
    def from_dict(cls, options: dict) -> "CompareOptions":
        """Accept either snake_case or the camelCase names used by descriptor tooling."""
        return cls(
            compare_breaking_api_changes=options.get(
                "compare_breaking_api_changes",
                options.get("compareBreakingAPIChanges", True)
            ),
            compare_designed_api_changes=options.get(
                "compare_designed_api_changes",
                options.get("compareDesignedAPIChanges", True)
            )
        )


@dataclass
class ComparisonReport:
    """Result of comparing a proposed API against a reference API."""
    breaking_problems: list[str] = field(default_factory=list)
    designed_problems: list[str] = field(default_factory=list)
    findings: list[Finding] = field(default_factory=list)

    @property
    def is_breaking(self) -> bool:
        return len(self.breaking_problems) > 0

    @property
    def needs_design_review(self) -> bool:
        """Safe to publish, but deviates from the designed surface."""
        return not self.is_breaking and len(self.designed_problems) > 0

    @property
    def advisories(self) -> list[str]:
        return [f.message for f in self.findings if f.severity == Severity.ADVISORY]

    @property
    def problem_count(self) -> int:
        return len(self.breaking_problems) + len(self.designed_problems)

    def to_dict(self) -> dict:
        return {
            "breakingProblems": list(self.breaking_problems),
            "designedProblems": list(self.designed_problems)
        }


class ProblemCollector:
    """Accumulates findings for one comparison; never shared between runs."""

    def __init__(self, options: CompareOptions):
        self.options = options
        self.report = ComparisonReport()

    def _record(self, message: str, severity: Severity):
        if severity == Severity.DESIGNED:
            if not self.options.compare_designed_api_changes:
                return
            self.report.designed_problems.append(message)
        else:
            if not self.options.compare_breaking_api_changes:
                return
            self.report.breaking_problems.append(message)
        self.report.findings.append(Finding(message=message, severity=severity))

    def append(self, message: str, designed: bool = False):
        self._record(message, Severity.DESIGNED if designed else Severity.BREAKING)

    def append_both(self, message: str, designed_element: bool):
        """Breaking problem that is also a designed problem inside a designed subtree."""
        self.append(message, designed=False)
        if designed_element:
            self.append(message, designed=True)

    def append_advisory(self, message: str):
        self._record(message, Severity.ADVISORY)


def format_value_compact(value) -> str:
    """Format a metadata value for a problem message."""
    if value is MISSING:
        return "undefined"
    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (dict, list)):
        return json.dumps(value, separators=(',', ':'))
    return str(value)
