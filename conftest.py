"""
Pytest configuration and shared fixtures.
"""
import os

# Keep test runs from writing api.log into the working directory
os.environ.setdefault("LOG_FILE", "")

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient

from api.main import create_app
from models.order import OrderItemRequest
from stores.memory import InMemoryOrderStore
from utils.config import Settings
from utils.feature_flags import StaticFeatureFlags
from workflows.order_workflow import OrderWorkflow


@pytest.fixture
def sample_items():
    """Two lines totalling 125.00."""
    return [
        OrderItemRequest(product_name="Keyboard", quantity=2, unit_price=Decimal("50.00")),
        OrderItemRequest(product_name="Mouse", quantity=1, unit_price=Decimal("25.00")),
    ]


@pytest.fixture
def store():
    return InMemoryOrderStore()


@pytest.fixture
def flags():
    return StaticFeatureFlags(reform_tax_enabled=False)


@pytest.fixture
def workflow(store, flags):
    return OrderWorkflow(store, flags)


@pytest.fixture
def client(store, flags):
    app = create_app(settings=Settings(log_file=""), store=store, feature_flags=flags)
    with TestClient(app) as test_client:
        yield test_client
