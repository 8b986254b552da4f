"""Record generators for demo customers, transactions and daily metrics.

Generators are pure: they take a seeded ``random.Random`` and return plain
dicts ready for bulk INSERT, so the same seed always yields the same data.
"""

from __future__ import annotations

import random
from collections import defaultdict
from datetime import UTC, date, datetime, time, timedelta
from decimal import Decimal
from typing import TYPE_CHECKING, Any

from app.features.data_platform.models import CustomerStatus, TransactionStatus, TransactionType
from app.shared.models import new_id

if TYPE_CHECKING:
    from app.shared.seeder.config import ActivityConfig

CUSTOMER_NAMES = [
    "TechStart Inc",
    "Global Solutions",
    "Digital Dynamics",
    "Cloud Nine Labs",
    "Quantum Computing Co",
    "Neural Networks LLC",
    "Data Driven Systems",
    "AI Innovations",
    "Smart Analytics",
    "Future Tech",
    "Cyber Security Pro",
    "Web Wizards",
    "Mobile Masters",
    "Code Crafters",
    "Dev Ops Elite",
    "Agile Accelerators",
    "Innovation Hub",
    "Tech Titans",
    "Digital Dreams",
    "Cloud Pioneers",
]

# Completed is weighted 3:1:1 against pending and failed
TRANSACTION_STATUSES = [
    TransactionStatus.COMPLETED,
    TransactionStatus.COMPLETED,
    TransactionStatus.COMPLETED,
    TransactionStatus.PENDING,
    TransactionStatus.FAILED,
]

TRANSACTION_TYPES = [
    TransactionType.PAYMENT,
    TransactionType.SUBSCRIPTION,
    TransactionType.ONE_TIME,
]


def customer_email(name: str) -> str:
    """Derive a deterministic contact email from a customer name."""
    return f"contact@{''.join(name.lower().split())}.com"


def date_range(end_date: date, days: int) -> list[date]:
    """The ``days`` calendar days ending at ``end_date``, newest first."""
    return [end_date - timedelta(days=offset) for offset in range(days)]


def pending_days(days: list[date], seeded: set[date]) -> list[date]:
    """Days from ``days`` that have no daily_metric row yet, order kept."""
    return [day for day in days if day not in seeded]


class CustomerGenerator:
    """Generate customers for one organization."""

    def __init__(self, rng: random.Random, config: ActivityConfig) -> None:
        self.rng = rng
        self.config = config

    def _name(self, index: int) -> str:
        base = CUSTOMER_NAMES[index % len(CUSTOMER_NAMES)]
        cycle = index // len(CUSTOMER_NAMES)
        return base if cycle == 0 else f"{base} {cycle + 1}"

    def _status(self, index: int) -> CustomerStatus:
        # First 75% active, next 15% churned, remainder on trial
        ratio = index / self.config.customers
        if ratio < 0.75:
            return CustomerStatus.ACTIVE
        if ratio < 0.9:
            return CustomerStatus.CHURNED
        return CustomerStatus.TRIAL

    def generate(self, organization_id: str, end_date: date) -> list[dict[str, Any]]:
        """Generate customer records.

        Args:
            organization_id: Owning tenant.
            end_date: Reference day for signup and churn timestamps.

        Returns:
            List of customer dicts.
        """
        anchor = datetime.combine(end_date, time(12), tzinfo=UTC)
        records: list[dict[str, Any]] = []
        for index in range(self.config.customers):
            name = self._name(index)
            status = self._status(index)
            records.append(
                {
                    "id": new_id(),
                    "organization_id": organization_id,
                    "name": name,
                    "email": customer_email(name),
                    "status": status.value,
                    "monthly_revenue": Decimal(self.rng.randint(50, 549) * 10),
                    "created_at": anchor - timedelta(days=self.rng.randint(30, 209)),
                    "churned_at": (
                        anchor - timedelta(days=self.rng.randint(0, 29))
                        if status == CustomerStatus.CHURNED
                        else None
                    ),
                }
            )
        return records


class TransactionGenerator:
    """Generate transactions spread over a date range."""

    def __init__(self, rng: random.Random, config: ActivityConfig) -> None:
        self.rng = rng
        self.config = config

    def generate(
        self,
        organization_id: str,
        customers: list[tuple[str, str | None]],
        days: list[date],
    ) -> list[dict[str, Any]]:
        """Generate transaction records.

        Args:
            organization_id: Owning tenant.
            customers: ``(customer_id, customer_name)`` pairs to bill.
            days: Days to generate activity for.

        Returns:
            List of transaction dicts.
        """
        if not customers:
            return []

        amount_low = self.config.min_amount // 10
        amount_high = self.config.max_amount // 10

        records: list[dict[str, Any]] = []
        for day in days:
            count = self.rng.randint(
                self.config.min_transactions_per_day,
                self.config.max_transactions_per_day,
            )
            for _ in range(count):
                customer_id, customer_name = self.rng.choice(customers)
                created_at = datetime.combine(
                    day,
                    time(self.rng.randint(0, 23), self.rng.randint(0, 59), self.rng.randint(0, 59)),
                    tzinfo=UTC,
                )
                records.append(
                    {
                        "id": new_id(),
                        "organization_id": organization_id,
                        "customer_id": customer_id,
                        "amount": Decimal(self.rng.randint(amount_low, amount_high) * 10),
                        "currency": self.config.currency,
                        "type": self.rng.choice(TRANSACTION_TYPES).value,
                        "status": self.rng.choice(TRANSACTION_STATUSES).value,
                        "description": f"Payment from {customer_name or 'customer'}",
                        "created_at": created_at,
                    }
                )
        return records


class DailyMetricGenerator:
    """Derive one daily_metric row per day.

    Revenue and transaction counts come from the generated COMPLETED
    transactions; user and conversion figures are sampled.
    """

    def __init__(self, rng: random.Random, config: ActivityConfig) -> None:
        self.rng = rng
        self.config = config

    def generate(
        self,
        organization_id: str,
        transactions: list[dict[str, Any]],
        days: list[date],
        customer_count: int,
    ) -> list[dict[str, Any]]:
        """Generate daily metric records.

        Args:
            organization_id: Owning tenant.
            transactions: Generated transaction dicts.
            days: Days to emit rows for, newest first.
            customer_count: Customer total on the newest day.

        Returns:
            List of daily metric dicts, one per day.
        """
        revenue_by_day: dict[date, Decimal] = defaultdict(Decimal)
        completed_by_day: dict[date, int] = defaultdict(int)
        for txn in transactions:
            if txn["status"] != TransactionStatus.COMPLETED.value:
                continue
            day = txn["created_at"].date()
            revenue_by_day[day] += txn["amount"]
            completed_by_day[day] += 1

        low_active, high_active = self.config.active_users_range
        low_new, high_new = self.config.new_users_range
        low_conv, high_conv = self.config.conversion_range

        records: list[dict[str, Any]] = []
        for offset, day in enumerate(days):
            conversion = self.rng.uniform(low_conv, high_conv)
            records.append(
                {
                    "organization_id": organization_id,
                    "date": day,
                    "revenue": revenue_by_day[day],
                    "transaction_count": completed_by_day[day],
                    "active_users": self.rng.randint(low_active, high_active),
                    "new_users": self.rng.randint(low_new, high_new),
                    "total_customers": max(customer_count - offset // 10, 0),
                    "new_customers": self.rng.randint(0, 2),
                    "churned_customers": int(
                        self.rng.random() < self.config.churn_probability
                    ),
                    "conversion_rate": Decimal(f"{conversion:.3f}"),
                }
            )
        return records
