"""Error taxonomy for contract loading and version resolution.

Structural differences between two contracts are never errors; they are
reported as BreakingChange records. Only input and configuration problems
raise.
"""

from pathlib import Path


class ContractError(Exception):
    """Base class for every error the CLI converts into a user-facing message."""


class SpecNotFoundError(ContractError):
    """The contract document does not exist."""

    def __init__(self, path: Path):
        self.path = path
        super().__init__(f"File not found: {path}")


class SpecParseError(ContractError):
    """The contract document is not valid YAML/JSON or not a usable OpenAPI shape."""

    def __init__(self, path: Path, cause: str):
        self.path = path
        self.cause = cause
        super().__init__(f"Failed to parse OpenAPI spec {path}: {cause}")


class VersionNotFoundError(ContractError):
    """No contract file could be resolved for a version label."""

    def __init__(self, version: str, path: Path):
        self.version = version
        self.path = path
        super().__init__(f"No API spec found for version {version} under {path}")
