"""
Test utilities and fixtures.
"""

import sys
import tempfile
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).parent.parent))

from app.catalog.store import CatalogStore
from app.config import Settings
from app.main import create_app
from app.storage import AssetManager


@pytest.fixture
def temp_dir():
    """Temporary working directory."""
    with tempfile.TemporaryDirectory() as tmpdir:
        yield Path(tmpdir)


@pytest.fixture
def test_settings(temp_dir):
    return Settings(
        environment="development",
        backend_url="",
        frontend_url="http://localhost:3000",
        data_dir=temp_dir / "data",
        uploads_dir=temp_dir / "uploads",
        snapshot_name="menuItems.json",
        max_upload_bytes=5 * 1024 * 1024,
        log_level="INFO",
    )


@pytest.fixture
def assets(temp_dir):
    manager = AssetManager(temp_dir / "uploads", public_hosts=["localhost:3001"])
    manager.ensure_directory()
    return manager


@pytest.fixture
def store(temp_dir, assets):
    catalog = CatalogStore(temp_dir / "data" / "menuItems.json", assets=assets)
    catalog.load()
    return catalog


@pytest.fixture
def pork_belly():
    return {
        "name": "Pork Belly",
        "description": "Fresh cut",
        "price": "12.50",
        "category": "freshporkcuts",
        "image": "https://host/uploads/x.jpg",
    }


@pytest.fixture
def client(test_settings):
    app = create_app(test_settings)
    with TestClient(app) as c:
        yield c
