"""Data platform feature: the tenant-scoped analytics tables.

- Tenant: Organization
- Dimensions: Customer
- Facts: Transaction, DailyMetric
"""

from app.features.data_platform.models import (
    Customer,
    CustomerStatus,
    DailyMetric,
    Organization,
    Transaction,
    TransactionStatus,
    TransactionType,
)

__all__ = [
    "Customer",
    "CustomerStatus",
    "DailyMetric",
    "Organization",
    "Transaction",
    "TransactionStatus",
    "TransactionType",
]
