from pathlib import Path

import pytest

SAMPLE_PATH = Path(__file__).resolve().parents[1] / "md" / "README.md"


@pytest.fixture
def sample_path() -> Path:
    return SAMPLE_PATH


@pytest.fixture
def sample_markdown() -> str:
    return SAMPLE_PATH.read_text(encoding="utf-8")
