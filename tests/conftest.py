import json
import pathlib

import pytest


@pytest.fixture(scope="session")
def repo_root():
    """Return the root directory of the project."""
    return pathlib.Path(__file__).resolve().parents[1]


@pytest.fixture(scope="session")
def fixtures_dir(repo_root):
    return repo_root / "tests" / "fixtures"


@pytest.fixture
def page_schema(fixtures_dir):
    """Schema with defaults for status and tags, none for title."""
    with open(fixtures_dir / "page.schema.json", 'r') as f:
        return json.load(f)


@pytest.fixture
def title_schema():
    return {
        "type": "object",
        "properties": {"title": {"type": "string"}},
        "required": ["title"],
    }
