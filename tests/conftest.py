"""Shared fixtures for wizard tests."""

from typing import Any, Dict

import pytest

from formwizard.config.defaults import get_builtin_flow
from formwizard.config.models import FlowConfig
from formwizard.wizard.fields import FileHandle
from formwizard.wizard.persistence import MemoryStore
from formwizard.wizard.scheduler import ManualScheduler
from formwizard.wizard.steps import Flow


@pytest.fixture
def buyer_flow() -> Flow:
    return Flow(FlowConfig(**get_builtin_flow("buyer")))


@pytest.fixture
def seller_flow() -> Flow:
    return Flow(FlowConfig(**get_builtin_flow("seller")))


@pytest.fixture
def store() -> MemoryStore:
    return MemoryStore()


@pytest.fixture
def scheduler() -> ManualScheduler:
    return ManualScheduler()


@pytest.fixture
def license_file() -> FileHandle:
    return FileHandle(name="license.pdf", size=12800)


@pytest.fixture
def valid_seller_data(license_file: FileHandle) -> Dict[str, Any]:
    """Seller answers that pass every step."""
    return {
        "name": "Grace",
        "email": "grace@example.com",
        "phone": "+49 30 1234567",
        "businessType": "LLC",
        "yearsExperience": "4",
        "productCategories": ["Electronics"],
        "mainProducts": "Sensors",
        "location": "Berlin",
        "operationalRegions": ["Europe"],
        "priceRange": "100-500",
        "businessLicense": license_file,
        "productImages": [FileHandle(name="a.png", size=2048)],
        "description": "We build sensors.",
        "termsAccepted": True,
    }
