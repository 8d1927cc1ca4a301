"""Shared test fixtures for schemagraph."""

from pathlib import Path

import pytest

from schemagraph.core.config import FetchConfig, ResolutionConfig

# Path to sample schemas
SAMPLE_SCHEMAS_DIR = Path(__file__).parent.parent / "data" / "schemas"


@pytest.fixture
def resolution_config() -> ResolutionConfig:
    """Create resolution configuration with remote resolution disabled."""
    return ResolutionConfig(
        allow_remote_resolution=False,
        fetch=FetchConfig(timeout=1.0, max_concurrent_fetches=2),
    )


@pytest.fixture
def forward_reference_schema() -> dict:
    """Schema whose $ref appears before its target in traversal order."""
    return {
        "properties": {"a": {"$ref": "#/definitions/X"}},
        "definitions": {"X": {"type": "string"}},
    }


@pytest.fixture
def cyclic_schema() -> dict:
    """Schema whose definitions reference each other and nothing else."""
    return {
        "definitions": {
            "A": {"$ref": "#/definitions/B"},
            "B": {"$ref": "#/definitions/A"},
        },
    }


@pytest.fixture
def sample_schemas_dir() -> Path:
    """Directory holding the sample schema documents."""
    return SAMPLE_SCHEMAS_DIR
