"""Shared fixtures for engine, drawing and API tests."""

import os
import tempfile

# config creates UPLOAD_DIR on import; keep test uploads out of the working tree
os.environ.setdefault("UPLOAD_DIR", tempfile.mkdtemp(prefix="dashboard-uploads-"))

import pytest


@pytest.fixture
def sales_rows():
    return [
        {"region": "North", "sales": "1,200.50"},
        {"region": "South", "sales": "R$800"},
    ]


@pytest.fixture
def fifteen_regions():
    """15 regions with sales 10, 20, ... 150 in scrambled order."""
    order = [7, 2, 15, 11, 4, 9, 1, 13, 6, 14, 3, 10, 5, 12, 8]
    return [{"region": f"Region {n:02d}", "sales": str(n * 10), "target": n} for n in order]


@pytest.fixture
def client():
    from fastapi.testclient import TestClient
    from main import app

    return TestClient(app)
