#!/usr/bin/env python3
# -*- coding: utf-8 -*-

"""
Pytest configuration file for the Green-Acres CRM Lead Bridge test suite.
"""

import os
import sys
import pytest
from pathlib import Path

# Add the src directory to Python path for accessing greenacres_bridge
project_root = Path(__file__).parent.parent
src_path = os.path.join(project_root, "src")
if src_path not in sys.path:
    sys.path.insert(0, src_path)

from greenacres_bridge.config import AppConfig


SAMPLE_SUBJECT = "Request for information - Villa - Buy - Al Manhal 305m² 2,634,000"


# Define pytest markers
def pytest_configure(config):
    """Configure pytest."""
    config.addinivalue_line(
        "markers", "integration: mark test as requiring a live CRM endpoint"
    )


@pytest.fixture(scope="session")
def test_data_dir() -> Path:
    """Path to the test data directory."""
    return Path(__file__).parent / "data"


@pytest.fixture(scope="session")
def sample_html(test_data_dir: Path) -> str:
    """A complete Green-Acres notification body."""
    return (test_data_dir / "green_acres_lead.html").read_text(encoding="utf-8")


@pytest.fixture(scope="session")
def sample_subject() -> str:
    """Subject line matching the sample notification."""
    return SAMPLE_SUBJECT


@pytest.fixture(scope="session")
def sample_email(test_data_dir: Path) -> bytes:
    """A raw quoted-printable notification email."""
    return (test_data_dir / "green_acres_lead.eml").read_bytes()


@pytest.fixture(scope="function")
def temp_log_path(tmp_path: Path) -> Path:
    """Temporary log file path for testing."""
    return tmp_path / "test.log"


@pytest.fixture(scope="function")
def mock_env_vars(monkeypatch, temp_log_path: Path):
    """
    Set up environment variables for testing.

    Args:
        monkeypatch: Pytest monkeypatch fixture
        temp_log_path: Temporary log file path
    """
    monkeypatch.setenv("LOG_LEVEL", "DEBUG")
    monkeypatch.setenv("LOG_FILE_PATH", str(temp_log_path))
    monkeypatch.setenv("CRM_API_URL", "https://crm.example.com/api/leads")
    monkeypatch.setenv("CRM_API_KEY", "test_api_key")
    monkeypatch.setenv("CRM_TIMEOUT_SECONDS", "15")
    monkeypatch.setenv("REMOTE_CLASSIFICATION_ENABLED", "false")
    monkeypatch.setenv("PORT", "9000")
    monkeypatch.setenv("DEBUG_MODE", "true")


@pytest.fixture(scope="function")
def offline_config() -> AppConfig:
    """Configuration pointing at a fake CRM with the page fetch disabled."""
    return AppConfig(
        crm_api_url="https://crm.example.com/api/leads",
        crm_api_key="test_api_key",
        remote_classification_enabled=False,
    )
