"""Plain-text summary of a multi-version validation run."""

from openapi_compat.orchestrator.chain import SKIPPED, ChainResult, Transition

from .generator import rule


def render_transition(transition: Transition) -> str:
    if transition.status == SKIPPED:
        return f"{transition.label}: {SKIPPED} ({transition.skipped_reason})"
    return (
        f"{transition.label}: {transition.status} "
        f"({transition.critical_count} critical, {transition.high_count} high impact)"
    )


def render_chain_summary(chain: ChainResult) -> str:
    lines = ["Multi-Version Validation Summary:", rule("=", 40)]

    if not chain.transitions:
        lines.append("No version transitions to check.")
    for transition in chain.transitions:
        lines.append(render_transition(transition))

    lines.append("")
    if chain.passed:
        overall = chain.status
    else:
        overall = f"{chain.status} ({chain.total_critical} critical issues)"
    lines.append(f"Overall Result: {overall}")

    if chain.skipped:
        lines.append(f"Skipped transitions: {len(chain.skipped)} (missing or unreadable specs)")

    return "\n".join(lines) + "\n"
