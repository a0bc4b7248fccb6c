"""
Pytest Configuration and Fixtures for Flask Application Testing

This module provides the pytest fixtures shared by the unit and integration suites of the
community threads API.

Key Features:
- Flask application factory fixture with TestingConfig and a fresh in-memory database per test
- Flask test client fixture; every request gets its own application context so ``g`` and the
  database session never leak between requests
- Application context fixture for service and model level tests
- Factory Boy factories bound to the Flask-SQLAlchemy session (see tests/factories.py)

Test Organization:
- tests/unit: pattern library, scanner, sanitizer, rule sets, sweep, response formatting,
  models and services
- tests/integration/api: HTTP behaviour through the Flask test client
"""

import sys
from pathlib import Path
from typing import Callable, Generator

import pytest

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from flask import Flask
from flask.testing import FlaskClient

from app import create_app
from models import db


@pytest.fixture
def app() -> Generator[Flask, None, None]:
    """
    Flask application configured for testing.

    Tables are created in a private in-memory SQLite database and dropped
    after the test. No application context is left pushed while the test
    runs.
    """
    flask_app = create_app('testing')

    with flask_app.app_context():
        db.create_all()

    yield flask_app

    with flask_app.app_context():
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    """Flask test client for HTTP-level tests."""
    return app.test_client()


@pytest.fixture
def app_context(app: Flask) -> Generator[Flask, None, None]:
    """Push an application context for direct model and service access."""
    with app.app_context():
        yield app
        db.session.rollback()


@pytest.fixture
def in_app_context(app: Flask) -> Callable:
    """
    Run a callable inside a short-lived application context.

    Used by HTTP tests to seed data with factories without keeping a
    context pushed across test client requests.

    Example:
        thread_id = in_app_context(lambda: ThreadFactory().id)
    """
    def runner(func: Callable):
        with app.app_context():
            return func()
    return runner


@pytest.fixture
def valid_thread_payload():
    """Request body accepted by POST /api/threads."""
    return {
        'title': 'The Lighthouse Keeper',
        'description': 'A story about a keeper who never left the rock.',
        'tags': ['Mystery', 'sea-tales'],
    }


@pytest.fixture
def valid_strand_payload():
    """Request body for POST /api/strands; ``threadId`` is filled in by the test."""
    return {
        'contributorName': 'Ada Writer',
        'content': 'The lamp flickered twice and went dark.',
    }
