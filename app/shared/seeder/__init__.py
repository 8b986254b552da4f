"""Seeder module for generating a demo tenant.

Provides:
- Pure generators for customers, transactions and daily metrics
- DemoSeeder orchestrating idempotent inserts, status counts and deletion
"""

from app.shared.seeder.config import ActivityConfig, OrganizationConfig, SeederConfig
from app.shared.seeder.core import DemoSeeder, SeederResult

__all__ = [
    "ActivityConfig",
    "DemoSeeder",
    "OrganizationConfig",
    "SeederConfig",
    "SeederResult",
]
