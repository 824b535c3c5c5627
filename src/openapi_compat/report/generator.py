"""Compatibility report: severity summary, itemized findings and the release verdict."""

from datetime import datetime
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from openapi_compat.diff.changes import SEVERITY_ORDER, ComparisonResult, Severity

SECTION_TITLES = {
    Severity.CRITICAL: "CRITICAL BREAKING CHANGES",
    Severity.HIGH: "HIGH IMPACT CHANGES",
    Severity.MEDIUM: "MEDIUM IMPACT CHANGES",
    Severity.LOW: "LOW IMPACT CHANGES",
}

NEXT_STEPS = (
    "Review breaking changes above",
    "Update API documentation",
    "Notify API consumers of changes",
    "Update integration tests",
)


class Recommendation(str, Enum):
    BLOCK = "block"
    MAJOR_VERSION = "review/major-version"
    SAFE = "safe to release"


RECOMMENDATION_ADVICE = {
    Recommendation.BLOCK: (
        "DO NOT DEPLOY - critical breaking changes detected",
        "Fix breaking changes or bump major version",
    ),
    Recommendation.MAJOR_VERSION: (
        "Consider major version bump",
        "Prepare migration guide for clients",
    ),
    Recommendation.SAFE: ("Safe to deploy with minor version bump",),
}


def rule(char: str, width: int) -> str:
    return char * width


class Report(BaseModel):
    """A rendered view over one ComparisonResult."""

    model_config = ConfigDict(frozen=True)

    result: ComparisonResult
    old_label: str
    new_label: str
    generated_at: datetime = Field(default_factory=datetime.now)

    @property
    def counts(self) -> dict[Severity, int]:
        return self.result.counts()

    @property
    def recommendation(self) -> Recommendation:
        if self.result.count(Severity.CRITICAL):
            return Recommendation.BLOCK
        if self.result.count(Severity.HIGH):
            return Recommendation.MAJOR_VERSION
        return Recommendation.SAFE

    def exit_code(self) -> int:
        """1 if any CRITICAL change exists, else 0."""
        return 1 if self.result.has_critical else 0

    def render(self) -> str:
        lines = [
            "OpenAPI Contract Compatibility Report",
            rule("=", 50),
            f"Generated: {self.generated_at.isoformat(timespec='seconds')}",
            f"Comparing: {self.old_label} -> {self.new_label}",
            "",
        ]

        if self.result.is_empty:
            lines += ["No breaking changes detected!", "The API is backward compatible.", ""]
        else:
            lines.append("Summary:")
            for severity, count in self.counts.items():
                lines.append(f"  {severity.value.title()}: {count}")
            lines.append("")
            for severity in SEVERITY_ORDER:
                lines += self._render_section(severity)

        lines.append(f"Recommendation: {self.recommendation.value}")
        lines += [f"  {advice}" for advice in RECOMMENDATION_ADVICE[self.recommendation]]

        if not self.result.is_empty:
            lines += ["", "Next Steps:"]
            lines += [f"  {i}. {step}" for i, step in enumerate(NEXT_STEPS, start=1)]

        return "\n".join(lines) + "\n"

    def _render_section(self, severity: Severity) -> list[str]:
        changes = self.result.with_severity(severity)
        if not changes:
            return []

        title = SECTION_TITLES[severity] + ":"
        lines = [title, rule("-", len(title))]
        for change in changes:
            lines.append(f"  - {change.description}")
            lines.append(f"    Path: {change.affected_path}")
            if severity == Severity.CRITICAL:
                lines.append(f"    Type: {change.change_type.value}")
            lines.append("")
        return lines

    def to_dict(self) -> dict:
        """Machine-readable verdict for CI consumers."""
        return {
            "generated_at": self.generated_at.isoformat(timespec="seconds"),
            "old": self.old_label,
            "new": self.new_label,
            "summary": {severity.value: count for severity, count in self.counts.items()},
            "recommendation": self.recommendation.value,
            "exit_code": self.exit_code(),
            "changes": [change.model_dump(mode="json") for change in self.result.changes],
        }

    def write(self, path: Path) -> Path:
        path = Path(path)
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(self.render(), encoding="utf-8")
        return path


def generate(
    result: ComparisonResult,
    old_label: str,
    new_label: str,
    generated_at: datetime | None = None,
) -> Report:
    """Build a Report for a comparison between two labelled contracts."""
    return Report(
        result=result,
        old_label=old_label,
        new_label=new_label,
        generated_at=generated_at or datetime.now(),
    )
