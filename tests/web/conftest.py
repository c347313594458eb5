"""Pytest fixtures for document server tests.

Provides a Flask app and test client backed by a temporary data file.
"""

from __future__ import annotations

from pathlib import Path
from typing import Generator

import pytest
from flask import Flask
from flask.testing import FlaskClient

from clinicsync.web import create_app


@pytest.fixture
def data_file(test_config_dir: Path) -> Path:
    """Get path for the persisted remote document."""
    return test_config_dir / "document.json"


@pytest.fixture
def web_app(data_file: Path) -> Generator[Flask, None, None]:
    """Create Flask app for testing.

    Args:
        data_file: Path the server persists the document to

    Yields:
        Flask application instance
    """
    app = create_app(data_file=data_file)
    app.config["TESTING"] = True
    yield app


@pytest.fixture
def client(web_app: Flask) -> FlaskClient:
    """Create Flask test client.

    Args:
        web_app: Flask application

    Returns:
        Flask test client for making requests
    """
    return web_app.test_client()
