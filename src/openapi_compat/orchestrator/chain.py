"""Multi-version orchestrator.

Compares every adjacent pair in an ordered version chain. All transitions
are evaluated even after a failure, and a transition whose contracts
cannot be resolved or loaded is recorded as skipped instead of aborting
the run.
"""

import logging
from collections.abc import Callable, Sequence
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path

from pydantic import BaseModel, ConfigDict

from openapi_compat.diff.changes import ComparisonResult, Severity
from openapi_compat.diff.comparator import compare
from openapi_compat.errors import ContractError
from openapi_compat.parser.base import ContractDocument
from openapi_compat.parser.openapi import load as load_contract

logger = logging.getLogger(__name__)

PASS = "PASS"
FAIL = "FAIL"
SKIPPED = "SKIPPED"


class Transition(BaseModel):
    """The outcome of comparing one version with its successor."""

    model_config = ConfigDict(frozen=True)

    from_version: str
    to_version: str
    result: ComparisonResult | None = None
    skipped_reason: str | None = None

    @property
    def label(self) -> str:
        return f"{self.from_version} -> {self.to_version}"

    @property
    def skipped(self) -> bool:
        return self.result is None

    @property
    def critical_count(self) -> int:
        return self.result.count(Severity.CRITICAL) if self.result else 0

    @property
    def high_count(self) -> int:
        return self.result.count(Severity.HIGH) if self.result else 0

    @property
    def status(self) -> str:
        if self.skipped:
            return SKIPPED
        return FAIL if self.critical_count else PASS


class ChainResult(BaseModel):
    model_config = ConfigDict(frozen=True)

    transitions: tuple[Transition, ...] = ()

    @property
    def total_critical(self) -> int:
        return sum(t.critical_count for t in self.transitions)

    @property
    def skipped(self) -> list[Transition]:
        return [t for t in self.transitions if t.skipped]

    @property
    def passed(self) -> bool:
        return self.total_critical == 0

    @property
    def status(self) -> str:
        return "PASSED" if self.passed else "FAILED"

    def exit_code(self) -> int:
        return 0 if self.passed else 1


def validate_chain(
    versions: Sequence[str],
    resolve: Callable[[str], Path],
    *,
    load: Callable[[Path], ContractDocument] = load_contract,
    max_workers: int = 1,
) -> ChainResult:
    """Compare each adjacent (v[i], v[i+1]) pair of an ordered version chain.

    `resolve` maps a version label to its contract file. With
    max_workers > 1 the transitions run concurrently; the returned
    transitions are always in chain order.
    """
    pairs = list(zip(versions, versions[1:]))

    def run(pair: tuple[str, str]) -> Transition:
        return _run_transition(pair[0], pair[1], resolve, load)

    if max_workers > 1 and len(pairs) > 1:
        with ThreadPoolExecutor(max_workers=max_workers) as executor:
            transitions = list(executor.map(run, pairs))
    else:
        transitions = [run(pair) for pair in pairs]

    return ChainResult(transitions=tuple(transitions))


def _run_transition(
    from_version: str,
    to_version: str,
    resolve: Callable[[str], Path],
    load: Callable[[Path], ContractDocument],
) -> Transition:
    logger.info("Checking: %s -> %s", from_version, to_version)
    try:
        old = load(resolve(from_version))
        new = load(resolve(to_version))
    except ContractError as e:
        logger.warning("Skipping %s -> %s: %s", from_version, to_version, e)
        return Transition(from_version=from_version, to_version=to_version, skipped_reason=str(e))

    result = compare(old, new)
    logger.info(
        "%s -> %s: %d change(s), %d critical",
        from_version,
        to_version,
        len(result.changes),
        result.critical_count,
    )
    return Transition(from_version=from_version, to_version=to_version, result=result)
