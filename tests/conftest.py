import shutil
from pathlib import Path

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture
def make_layout(tmp_path):
    """Build a <root>/<version>/current/openapi.yaml tree from fixture files."""

    def _make(versions: dict[str, str]) -> Path:
        root = tmp_path / "openapi"
        for version, fixture in versions.items():
            current = root / version / "current"
            current.mkdir(parents=True)
            shutil.copy(FIXTURES / fixture, current / "openapi.yaml")
        return root

    return _make
