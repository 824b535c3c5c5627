"""Structural comparator: diffs two ContractDocuments into breaking changes.

Findings come out in a stable order: old document path order, then the
method order of HTTP_METHODS, then parameters (old order) before
responses (old order). Anything that only exists in the new document is
additive and never reported.
"""

from openapi_compat.parser.base import HTTP_METHODS, ContractDocument, Operation, PathItem

from .changes import BreakingChange, ChangeType, ComparisonResult
from .severity import classify


def compare(
    old: ContractDocument,
    new: ContractDocument,
    methods: tuple[str, ...] = HTTP_METHODS,
) -> ComparisonResult:
    """Compare two contracts and return every breaking change, old -> new."""
    changes: list[BreakingChange] = []

    for path, old_item in old.paths.items():
        new_item = new.paths.get(path)
        if new_item is None:
            # Reported once; no per-operation noise for a path that is gone.
            changes.append(
                BreakingChange(
                    change_type=ChangeType.REMOVED_ENDPOINT,
                    affected_path=path,
                    description=f"Endpoint removed: {path}",
                    severity=classify(ChangeType.REMOVED_ENDPOINT),
                )
            )
            continue

        changes.extend(_compare_operations(path, old_item, new_item, methods))

    return ComparisonResult(changes=tuple(changes))


def _compare_operations(
    path: str, old_item: PathItem, new_item: PathItem, methods: tuple[str, ...]
) -> list[BreakingChange]:
    changes = []
    for method in methods:
        old_op = old_item.operation(method)
        if old_op is None:
            continue

        endpoint = f"{method.upper()} {path}"
        new_op = new_item.operation(method)
        if new_op is None:
            changes.append(
                BreakingChange(
                    change_type=ChangeType.CHANGED_ENDPOINT_METHOD,
                    affected_path=endpoint,
                    description=f"Operation removed: {endpoint}",
                    severity=classify(ChangeType.CHANGED_ENDPOINT_METHOD),
                )
            )
            continue

        changes.extend(_compare_parameters(endpoint, old_op, new_op))
        changes.extend(_compare_responses(endpoint, old_op, new_op))
    return changes


def _compare_parameters(endpoint: str, old_op: Operation, new_op: Operation) -> list[BreakingChange]:
    changes = []
    new_params = new_op.parameter_map()

    for old_param in old_op.parameters:
        new_param = new_params.get(old_param.key)

        if new_param is None:
            changes.append(
                BreakingChange(
                    change_type=ChangeType.REMOVED_PARAMETER,
                    affected_path=endpoint,
                    description=f"Parameter removed: {old_param.name} ({old_param.location})",
                    severity=classify(ChangeType.REMOVED_PARAMETER, was_required=old_param.required),
                )
            )
            continue

        if not old_param.required and new_param.required:
            changes.append(
                BreakingChange(
                    change_type=ChangeType.ADDED_REQUIRED_PARAMETER,
                    affected_path=endpoint,
                    description=f"Parameter became required: {new_param.name} ({new_param.location})",
                    severity=classify(ChangeType.ADDED_REQUIRED_PARAMETER),
                )
            )

        if old_param.schema_type != new_param.schema_type:
            changes.append(
                BreakingChange(
                    change_type=ChangeType.CHANGED_PARAMETER_TYPE,
                    affected_path=endpoint,
                    description=(
                        f"Parameter type changed: {old_param.name} "
                        f"from {old_param.schema_type} to {new_param.schema_type}"
                    ),
                    severity=classify(ChangeType.CHANGED_PARAMETER_TYPE),
                )
            )

    return changes


def _compare_responses(endpoint: str, old_op: Operation, new_op: Operation) -> list[BreakingChange]:
    changes = []
    for status_code in old_op.responses:
        if status_code not in new_op.responses:
            changes.append(
                BreakingChange(
                    change_type=ChangeType.REMOVED_RESPONSE_CODE,
                    affected_path=endpoint,
                    description=f"Response code removed: {status_code}",
                    severity=classify(ChangeType.REMOVED_RESPONSE_CODE, status_code=status_code),
                )
            )
    return changes
