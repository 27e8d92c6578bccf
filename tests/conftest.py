"""Shared test fixtures for custodia."""

import os
import tempfile

import pytest

from custodia.core.events import EventBus, EventRecorder
from custodia.portfolio.permissions import Actor, Role
from custodia.portfolio.store import InMemoryHoldingStore
from custodia.portfolio.workflow import ApprovalWorkflow
from custodia.pricing.store import InMemoryPriceSeriesStore

APPLE = "US0378331005"
MICROSOFT = "US5949181045"


@pytest.fixture
def tmp_dir():
    """Provide a temporary directory that is cleaned up after the test."""
    with tempfile.TemporaryDirectory() as d:
        yield d


@pytest.fixture
def tmp_config_file(tmp_dir):
    """Create a temporary YAML config file."""
    import yaml

    config_data = {
        "logging": {"level": "DEBUG"},
        "metrics": {"default_asset_class": "Fund"},
    }
    config_path = os.path.join(tmp_dir, "config.yaml")
    with open(config_path, "w") as f:
        yaml.dump(config_data, f)
    return config_path


@pytest.fixture
def maker():
    return Actor(id="usr-maker1", role=Role.MAKER, username="maker1")


@pytest.fixture
def other_maker():
    return Actor(id="usr-maker2", role=Role.MAKER, username="maker2")


@pytest.fixture
def checker():
    return Actor(id="usr-checker1", role=Role.CHECKER, username="checker1")


@pytest.fixture
def admin():
    return Actor(id="usr-admin1", role=Role.ADMIN, username="admin1")


@pytest.fixture
def draft():
    return {
        "security_id": APPLE,
        "security_name": "Apple Inc",
        "quantity": 100,
        "price": 150,
        "purchase_price": 140,
        "asset_class": "Equity",
    }


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def recorder(bus):
    return EventRecorder(bus)


@pytest.fixture
def holding_store():
    return InMemoryHoldingStore()


@pytest.fixture
def workflow(holding_store, bus):
    return ApprovalWorkflow(holding_store, bus=bus)


@pytest.fixture
def price_store(bus):
    return InMemoryPriceSeriesStore(bus=bus)
