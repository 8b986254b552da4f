"""Pytest fixtures for seeder tests."""

import random
from datetime import date

import pytest

from app.shared.seeder.config import ActivityConfig, OrganizationConfig, SeederConfig


@pytest.fixture
def rng():
    """Create a seeded random number generator."""
    return random.Random(42)


@pytest.fixture
def activity_config():
    """Create a small activity config for testing."""
    return ActivityConfig(
        customers=10,
        min_transactions_per_day=2,
        max_transactions_per_day=4,
        min_amount=100,
        max_amount=500,
    )


@pytest.fixture
def seeder_config(activity_config):
    """Create a complete seeder config for testing."""
    return SeederConfig(
        seed=42,
        days=14,
        end_date=date(2024, 1, 31),
        organization=OrganizationConfig(name="Test Org", slug="test-org"),
        activity=activity_config,
        batch_size=100,
    )
