"""Configuration dataclasses for the demo data seeder."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date


@dataclass
class OrganizationConfig:
    """Demo tenant to create or reuse.

    Attributes:
        name: Organization display name.
        slug: Unique slug; the API falls back to this tenant when none is given.
        plan: Subscription plan label.
    """

    name: str = "Acme Corporation"
    slug: str = "acme-corp"
    plan: str = "PRO"


@dataclass
class ActivityConfig:
    """Ranges for generated activity.

    Attributes:
        customers: Number of customers to generate.
        min_transactions_per_day: Lower bound of transactions per day.
        max_transactions_per_day: Upper bound of transactions per day.
        min_amount: Smallest transaction amount (whole currency units).
        max_amount: Largest transaction amount (whole currency units).
        currency: ISO 4217 currency code for every transaction.
        active_users_range: Inclusive range of daily active users.
        new_users_range: Inclusive range of daily new users.
        conversion_range: Range of daily conversion rate in percent.
        churn_probability: Probability that one customer churns on a day.
    """

    customers: int = 20
    min_transactions_per_day: int = 3
    max_transactions_per_day: int = 10
    min_amount: int = 500
    max_amount: int = 3500
    currency: str = "USD"
    active_users_range: tuple[int, int] = (800, 1000)
    new_users_range: tuple[int, int] = (10, 40)
    conversion_range: tuple[float, float] = (2.0, 7.0)
    churn_probability: float = 0.3


@dataclass
class SeederConfig:
    """Master configuration for the demo seeder.

    Attributes:
        seed: Random seed for reproducibility.
        days: Number of days of history ending at ``end_date``.
        end_date: Last generated day (defaults to today, UTC).
        organization: Demo tenant settings.
        activity: Customer and transaction volume settings.
        batch_size: Rows per INSERT statement.
    """

    seed: int = 42
    days: int = 90
    end_date: date | None = None
    organization: OrganizationConfig = field(default_factory=OrganizationConfig)
    activity: ActivityConfig = field(default_factory=ActivityConfig)
    batch_size: int = 1000

    def __post_init__(self) -> None:
        """Validate ranges.

        Raises:
            ValueError: If a count or range is invalid.
        """
        if self.days < 1:
            raise ValueError(f"days must be >= 1, got {self.days}")
        if self.activity.customers < 1:
            raise ValueError(f"customers must be >= 1, got {self.activity.customers}")
        if self.activity.min_transactions_per_day > self.activity.max_transactions_per_day:
            raise ValueError("min_transactions_per_day must be <= max_transactions_per_day")
        if self.activity.min_amount > self.activity.max_amount:
            raise ValueError("min_amount must be <= max_amount")
        if self.batch_size < 1:
            raise ValueError(f"batch_size must be >= 1, got {self.batch_size}")
