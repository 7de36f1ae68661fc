"""Global pytest configuration and fixtures."""

import pytest
import sys
from pathlib import Path

from bson import ObjectId

# Add parent directory to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from tests.utils import FakeGateway, create_test_config  # noqa: E402


@pytest.fixture
def backup_root(tmp_path):
    """Empty snapshot root directory."""
    root = tmp_path / "backups"
    root.mkdir()
    return root


@pytest.fixture
def user_id():
    return ObjectId("65a1f0c2e4b0a1b2c3d4e5f6")


@pytest.fixture
def shop_gateway(user_id):
    """Fake database with a users collection holding one document."""
    return FakeGateway({"shop": {"users": [{"_id": user_id, "name": "Ana"}]}})


@pytest.fixture
def test_config(backup_root):
    return create_test_config(backup_root)
