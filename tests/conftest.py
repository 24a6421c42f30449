"""
Shared pytest fixtures and configuration for serp-extractor tests.
"""

import json
from pathlib import Path

import pytest
from bs4 import BeautifulSoup

from core.config import ExtractorConfig
from parser.srp import SrpParseStage


FIXTURES_DIR = Path(__file__).parent / "fixtures"


# ============================================================================
# Fixtures: File Paths
# ============================================================================

@pytest.fixture
def fixtures_dir() -> Path:
    """Path to test fixtures directory."""
    return FIXTURES_DIR


@pytest.fixture
def html_fixtures_dir() -> Path:
    """Path to saved SRP snapshots."""
    return FIXTURES_DIR / "html"


@pytest.fixture
def schemas_dir() -> Path:
    """Path to schemas directory."""
    return Path(__file__).parent.parent / "schemas"


# ============================================================================
# Fixtures: Documents
# ============================================================================

@pytest.fixture
def sample_html(html_fixtures_dir: Path) -> str:
    """Four-card snapshot: two artwork tiles with years, two list cards without."""
    return (html_fixtures_dir / "sample.html").read_text(encoding="utf-8")


@pytest.fixture
def sample_soup(sample_html: str) -> BeautifulSoup:
    """Parsed tree of the four-card snapshot."""
    return BeautifulSoup(sample_html, ExtractorConfig.HTML_PARSER_FEATURES)


@pytest.fixture
def expected_sample(fixtures_dir: Path) -> dict:
    """Expected ParseResult for sample.html."""
    return json.loads((fixtures_dir / "expected_sample.json").read_text(encoding="utf-8"))


@pytest.fixture
def stage() -> SrpParseStage:
    """Default SRP parse stage."""
    return SrpParseStage()


# ============================================================================
# Pytest Configuration
# ============================================================================

def pytest_configure(config):
    """Register custom markers."""
    config.addinivalue_line("markers", "contract: contract schema compliance tests")
    config.addinivalue_line("markers", "integration: end-to-end integration tests")
    config.addinivalue_line("markers", "unit: unit tests")
