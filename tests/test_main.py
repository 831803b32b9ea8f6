"""Tests for the FastAPI application."""

from pathlib import Path

import pytest
from fastapi.testclient import TestClient

from nomad_service.main import app


def test_health():
    """Test health endpoint."""
    client = TestClient(app)

    response = client.get("/health")

    assert response.status_code == 200
    assert response.json() == {"status": "healthy"}


def test_root_lists_graphql_path():
    """Test root endpoint."""
    client = TestClient(app)

    response = client.get("/")

    assert response.json()["graphql"] == "/graphql"


def test_project_readme_is_packaged():
    """Test that the declared readme ships with the project."""
    tomllib = pytest.importorskip("tomllib")
    root = Path(__file__).resolve().parents[1]

    project = tomllib.loads((root / "pyproject.toml").read_text())["project"]

    assert project["readme"] == "README.md"
    assert (root / project["readme"]).is_file()
