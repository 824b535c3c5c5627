"""Severity policy for breaking changes.

Errs toward the higher tier: a missed breaking change costs more than a
false alarm in a release gate.
"""

from .changes import ChangeType, Severity

SUCCESS_CLASS_PREFIX = "2"


def is_success_code(status_code: str) -> bool:
    return str(status_code).startswith(SUCCESS_CLASS_PREFIX)


def classify(
    change_type: ChangeType,
    *,
    was_required: bool = False,
    status_code: str | None = None,
) -> Severity:
    """Return the severity tier for a change.

    `was_required` only matters for REMOVED_PARAMETER and `status_code`
    only for REMOVED_RESPONSE_CODE.
    """
    if change_type in (ChangeType.REMOVED_ENDPOINT, ChangeType.CHANGED_ENDPOINT_METHOD):
        return Severity.CRITICAL
    if change_type == ChangeType.REMOVED_PARAMETER:
        return Severity.CRITICAL if was_required else Severity.HIGH
    if change_type in (ChangeType.ADDED_REQUIRED_PARAMETER, ChangeType.CHANGED_PARAMETER_TYPE):
        return Severity.HIGH
    if change_type == ChangeType.REMOVED_RESPONSE_CODE:
        if status_code is None:
            raise ValueError("status_code is required to classify a removed response code")
        return Severity.CRITICAL if is_success_code(status_code) else Severity.MEDIUM
    raise ValueError(f"Unknown change type: {change_type}")
