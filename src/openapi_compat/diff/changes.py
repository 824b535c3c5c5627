"""Breaking-change records produced by the structural comparator."""

from enum import Enum

from pydantic import BaseModel, ConfigDict


class ChangeType(str, Enum):
    REMOVED_ENDPOINT = "REMOVED_ENDPOINT"
    CHANGED_ENDPOINT_METHOD = "CHANGED_ENDPOINT_METHOD"  # an operation was removed
    REMOVED_PARAMETER = "REMOVED_PARAMETER"
    ADDED_REQUIRED_PARAMETER = "ADDED_REQUIRED_PARAMETER"  # optional -> required
    CHANGED_PARAMETER_TYPE = "CHANGED_PARAMETER_TYPE"
    REMOVED_RESPONSE_CODE = "REMOVED_RESPONSE_CODE"


class Severity(str, Enum):
    """How likely a change is to break existing clients, highest first."""

    CRITICAL = "CRITICAL"
    HIGH = "HIGH"
    MEDIUM = "MEDIUM"
    LOW = "LOW"


SEVERITY_ORDER = (Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW)


class BreakingChange(BaseModel):
    model_config = ConfigDict(frozen=True)

    change_type: ChangeType
    affected_path: str  # "/users" or "POST /users"
    description: str
    severity: Severity


class ComparisonResult(BaseModel):
    """Ordered findings for one (old, new) contract pair."""

    model_config = ConfigDict(frozen=True)

    changes: tuple[BreakingChange, ...] = ()

    def with_severity(self, severity: Severity) -> list[BreakingChange]:
        return [c for c in self.changes if c.severity == severity]

    def count(self, severity: Severity) -> int:
        return len(self.with_severity(severity))

    def counts(self) -> dict[Severity, int]:
        return {severity: self.count(severity) for severity in SEVERITY_ORDER}

    @property
    def critical_count(self) -> int:
        return self.count(Severity.CRITICAL)

    @property
    def has_critical(self) -> bool:
        return self.critical_count > 0

    @property
    def is_empty(self) -> bool:
        return not self.changes
