"""Write generated demo data for one tenant."""

from __future__ import annotations

import random
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from sqlalchemy import delete, func, select
from sqlalchemy.dialects.postgresql import insert as pg_insert
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.logging import get_logger
from app.features.data_platform.models import (
    Customer,
    DailyMetric,
    Organization,
    Transaction,
)
from app.shared.models import new_id
from app.shared.seeder.generators import (
    CustomerGenerator,
    DailyMetricGenerator,
    TransactionGenerator,
    date_range,
    pending_days,
)
from app.shared.utils import utc_today

if TYPE_CHECKING:
    from datetime import date

    from app.shared.seeder.config import SeederConfig

logger = get_logger(__name__)


@dataclass
class SeederResult:
    """Rows inserted by one ``generate_full`` run."""

    organization_id: str = ""
    customers_count: int = 0
    transactions_count: int = 0
    daily_metrics_count: int = 0
    seed: int = 42


class DemoSeeder:
    """Populate one demo organization with customers, transactions and metrics.

    Inserts use ON CONFLICT DO NOTHING. Re-running against an existing
    organization reuses its customers and only generates activity for days
    without a daily_metric row, so a day's transactions and its metric row
    are always written together.
    """

    def __init__(self, config: SeederConfig) -> None:
        self.config = config
        self.rng = random.Random(config.seed)

    async def _batch_insert(
        self,
        db: AsyncSession,
        table: type,
        records: list[dict[str, Any]],
    ) -> int:
        """Multi-row INSERT ... ON CONFLICT DO NOTHING, ``batch_size`` rows at a time.

        Returns the number of rows the database reports as inserted.
        """
        if not records:
            return 0

        inserted = 0
        for start in range(0, len(records), self.config.batch_size):
            chunk = records[start : start + self.config.batch_size]
            result = await db.execute(pg_insert(table).values(chunk).on_conflict_do_nothing())
            rowcount = getattr(result, "rowcount", None)
            inserted += len(chunk) if rowcount is None else rowcount
        return inserted

    async def _ensure_organization(self, db: AsyncSession) -> str:
        """Create the demo organization if missing and return its id."""
        org = self.config.organization
        stmt = (
            pg_insert(Organization)
            .values(id=new_id(), name=org.name, slug=org.slug, plan=org.plan)
            .on_conflict_do_nothing(index_elements=["slug"])
        )
        await db.execute(stmt)

        result = await db.execute(select(Organization.id).where(Organization.slug == org.slug))
        return result.scalar_one()

    async def _seeded_days(self, db: AsyncSession, organization_id: str) -> set[date]:
        result = await db.execute(
            select(DailyMetric.date).where(DailyMetric.organization_id == organization_id)
        )
        return set(result.scalars().all())

    async def generate_full(self, db: AsyncSession) -> SeederResult:
        """Seed the tenant, then commit. Safe to re-run."""
        end_date = self.config.end_date or utc_today()
        activity = self.config.activity

        organization_id = await self._ensure_organization(db)
        logger.info(
            "seeder.organization_ready",
            organization_id=organization_id,
            slug=self.config.organization.slug,
        )

        customer_records = CustomerGenerator(self.rng, activity).generate(
            organization_id, end_date
        )
        customers_count = await self._batch_insert(db, Customer, customer_records)

        # Reuse whatever customers exist, including ones from earlier runs
        result = await db.execute(
            select(Customer.id, Customer.name).where(Customer.organization_id == organization_id)
        )
        customers = [(row.id, row.name) for row in result.all()]
        logger.info("seeder.customers.generated", inserted=customers_count, total=len(customers))

        seeded = await self._seeded_days(db, organization_id)
        days = pending_days(date_range(end_date, self.config.days), seeded)
        logger.info("seeder.days_pending", count=len(days))

        transaction_records = TransactionGenerator(self.rng, activity).generate(
            organization_id, customers, days
        )
        transactions_count = await self._batch_insert(db, Transaction, transaction_records)
        logger.info("seeder.transactions.generated", count=transactions_count)

        metric_records = DailyMetricGenerator(self.rng, activity).generate(
            organization_id, transaction_records, days, len(customers)
        )
        metrics_count = await self._batch_insert(db, DailyMetric, metric_records)
        logger.info("seeder.daily_metrics.generated", count=metrics_count)

        await db.commit()

        return SeederResult(
            organization_id=organization_id,
            customers_count=customers_count,
            transactions_count=transactions_count,
            daily_metrics_count=metrics_count,
            seed=self.config.seed,
        )

    async def get_current_counts(self, db: AsyncSession) -> dict[str, int]:
        """Rows per table, across all tenants."""
        counts: dict[str, int] = {}
        for model in (Organization, Customer, Transaction, DailyMetric):
            result = await db.execute(select(func.count()).select_from(model))
            counts[model.__tablename__] = int(result.scalar_one())
        return counts

    async def delete_data(self, db: AsyncSession, dry_run: bool = False) -> dict[str, int]:
        """Remove the demo tenant and its rows, or with ``dry_run`` only count them.

        Returns an empty dict when the tenant does not exist.
        """
        slug = self.config.organization.slug
        result = await db.execute(select(Organization.id).where(Organization.slug == slug))
        organization_id = result.scalar_one_or_none()
        if organization_id is None:
            logger.info("seeder.delete.no_organization", slug=slug)
            return {}

        counts: dict[str, int] = {}
        # Children first so foreign keys hold without relying on cascades
        for model in (DailyMetric, Transaction, Customer):
            count_result = await db.execute(
                select(func.count())
                .select_from(model)
                .where(model.organization_id == organization_id)
            )
            counts[model.__tablename__] = int(count_result.scalar_one())
            if not dry_run:
                await db.execute(delete(model).where(model.organization_id == organization_id))

        counts[Organization.__tablename__] = 1
        if not dry_run:
            await db.execute(delete(Organization).where(Organization.id == organization_id))
            await db.commit()

        logger.info("seeder.delete.completed", slug=slug, dry_run=dry_run, counts=counts)
        return counts
