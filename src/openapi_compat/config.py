"""Version-chain configuration.

A VersionLayout maps version labels to contract files following the
`<root>/<version>/current/*.yaml` convention. The CLI binds ROOT_ENV and
VERSIONS_ENV so CI jobs can point the tool at their own layout.
"""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, field_validator

from openapi_compat.errors import VersionNotFoundError

DEFAULT_ROOT = Path("src/main/resources/openapi")
DEFAULT_VERSIONS = ["v1", "v2", "v3", "v4"]

ROOT_ENV = "OPENAPI_COMPAT_ROOT"
VERSIONS_ENV = "OPENAPI_COMPAT_VERSIONS"


def parse_versions(value: str) -> list[str]:
    """Split a comma-separated version list: 'v1, v2,v3' -> ['v1', 'v2', 'v3']."""
    return [v.strip() for v in value.split(",") if v.strip()]


class VersionLayout(BaseModel):
    model_config = ConfigDict(frozen=True)

    root: Path = DEFAULT_ROOT
    versions: list[str] = DEFAULT_VERSIONS
    subdir: str = "current"
    suffixes: tuple[str, ...] = (".yaml", ".yml")

    @field_validator("versions")
    @classmethod
    def _no_blank_versions(cls, value: list[str]) -> list[str]:
        if any(not v.strip() for v in value):
            raise ValueError("version labels must not be blank")
        return value

    def version_dir(self, version: str) -> Path:
        return self.root / version / self.subdir

    def resolve(self, version: str) -> Path:
        """Return the contract file for a version (first match by file name)."""
        directory = self.version_dir(version)
        if not directory.is_dir():
            raise VersionNotFoundError(version, directory)

        candidates = sorted(
            p for p in directory.iterdir() if p.is_file() and p.suffix.lower() in self.suffixes
        )
        if not candidates:
            raise VersionNotFoundError(version, directory)
        return candidates[0]
