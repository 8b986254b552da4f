#!/usr/bin/env python
"""Seed, inspect or remove the demo tenant.

The dashboard falls back to the demo organization when a request names no
tenant, so a fresh install needs this before the UI shows anything.

Usage:
    # First run: create tables and seed 90 days ending today
    uv run python scripts/seed_demo.py --full-new --init-schema --confirm

    # 30 days ending on a fixed day, reproducible with --seed
    uv run python scripts/seed_demo.py --full-new --days 30 --end-date 2024-01-31 --confirm

    # Everything from a YAML file (see examples/seed/demo.yaml)
    uv run python scripts/seed_demo.py --full-new --config examples/seed/demo.yaml --confirm

    # What would --delete remove?
    uv run python scripts/seed_demo.py --delete --dry-run

    # Row counts per table
    uv run python scripts/seed_demo.py --status
"""

from __future__ import annotations

import argparse
import asyncio
import sys
from datetime import date
from pathlib import Path
from typing import Any

import yaml
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import get_settings
from app.core.database import Base, dispose_engine, get_engine, get_session_maker
from app.core.logging import configure_logging
from app.features.data_platform import models  # noqa: F401  (registers tables on Base)
from app.shared.seeder import ActivityConfig, DemoSeeder, OrganizationConfig, SeederConfig

RULE = "-" * 44


def iso_date(value: str) -> date:
    try:
        return date.fromisoformat(value)
    except ValueError as e:
        raise argparse.ArgumentTypeError(f"expected YYYY-MM-DD, got {value!r}") from e


def _pick(section: dict[str, Any], key: str, fallback: Any) -> Any:
    return section.get(key, fallback)


def config_from_yaml(path: Path) -> SeederConfig:
    """Build a SeederConfig from a YAML document.

    Keys left out of the file keep their dataclass defaults, except the
    organization slug, which defaults to ``DEMO_ORGANIZATION_SLUG``.

    Raises:
        FileNotFoundError: If ``path`` does not exist.
        ValueError: If a value fails SeederConfig validation.
    """
    if not path.is_file():
        raise FileNotFoundError(f"No such config file: {path}")
    doc = yaml.safe_load(path.read_text()) or {}

    org = doc.get("organization", {})
    org_defaults = OrganizationConfig()
    act = doc.get("activity", {})
    act_defaults = ActivityConfig()
    per_day = act.get("transactions_per_day", {})
    amount = act.get("amount", {})

    return SeederConfig(
        seed=_pick(doc, "seed", 42),
        days=_pick(doc, "days", 90),
        end_date=iso_date(str(doc["end_date"])) if "end_date" in doc else None,
        batch_size=_pick(doc, "batch_size", 1000),
        organization=OrganizationConfig(
            name=_pick(org, "name", org_defaults.name),
            slug=_pick(org, "slug", get_settings().demo_organization_slug),
            plan=_pick(org, "plan", org_defaults.plan),
        ),
        activity=ActivityConfig(
            customers=_pick(act, "customers", act_defaults.customers),
            min_transactions_per_day=_pick(per_day, "min", act_defaults.min_transactions_per_day),
            max_transactions_per_day=_pick(per_day, "max", act_defaults.max_transactions_per_day),
            min_amount=_pick(amount, "min", act_defaults.min_amount),
            max_amount=_pick(amount, "max", act_defaults.max_amount),
            currency=_pick(act, "currency", act_defaults.currency),
            churn_probability=_pick(act, "churn_probability", act_defaults.churn_probability),
        ),
    )


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="seed_demo.py",
        description="Manage the PulseDash demo tenant.",
    )
    mode = parser.add_mutually_exclusive_group(required=True)
    mode.add_argument("--full-new", action="store_true", help="generate the demo dataset")
    mode.add_argument("--delete", action="store_true", help="remove the demo tenant and its rows")
    mode.add_argument("--status", action="store_true", help="print row counts per table")

    gen = parser.add_argument_group("generation")
    gen.add_argument("--seed", type=int, default=42, help="RNG seed (default: %(default)s)")
    gen.add_argument("--days", type=int, default=90, help="days of history (default: %(default)s)")
    gen.add_argument("--end-date", type=iso_date, help="last generated day (default: today, UTC)")
    gen.add_argument("--customers", type=int, default=20, help="customers (default: %(default)s)")
    gen.add_argument("--batch-size", type=int, default=1000, help="rows per INSERT")
    gen.add_argument("--config", type=Path, help="YAML file; overrides the flags above")

    parser.add_argument("--init-schema", action="store_true", help="create missing tables first")
    parser.add_argument("--confirm", action="store_true", help="required to write or delete")
    parser.add_argument("--dry-run", action="store_true", help="with --delete: only count rows")
    return parser


def print_counts(title: str, counts: dict[str, int]) -> None:
    print(f"\n{title}\n{RULE}")
    for table, count in counts.items():
        print(f"  {table:<30}{count:>10,}")
    print(f"{RULE}\n  {'total':<30}{sum(counts.values()):>10,}\n")


def refuse(reason: str, hint: str) -> int:
    print(f"Refusing to run: {reason}\n  {hint}")
    return 1


def guard(args: argparse.Namespace, writes: bool) -> int | None:
    """Exit code when a safety check fails, else None."""
    settings = get_settings()
    if settings.is_production and not settings.seeder_allow_production:
        return refuse("APP_ENV is production.", "Set SEEDER_ALLOW_PRODUCTION=true to override.")
    if writes and settings.seeder_require_confirm and not args.confirm:
        return refuse("this changes data.", "Pass --confirm (or --dry-run with --delete).")
    return None


async def init_schema() -> None:
    async with get_engine().begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    print("Tables created (existing ones left untouched).")


async def cmd_full_new(args: argparse.Namespace, session: AsyncSession) -> int:
    if (code := guard(args, writes=True)) is not None:
        return code

    settings = get_settings()
    try:
        config = (
            config_from_yaml(args.config)
            if args.config
            else SeederConfig(
                seed=args.seed,
                days=args.days,
                end_date=args.end_date,
                batch_size=args.batch_size,
                organization=OrganizationConfig(slug=settings.demo_organization_slug),
                activity=ActivityConfig(customers=args.customers),
            )
        )
    except (FileNotFoundError, ValueError) as e:
        print(f"Invalid configuration: {e}")
        return 1

    org = config.organization
    print(
        f"Seeding {org.name} ({org.slug}): {config.activity.customers} customers, "
        f"{config.days} days ending {config.end_date or 'today'}, seed {config.seed}"
    )
    result = await DemoSeeder(config).generate_full(session)

    print(f"\nOrganization {result.organization_id}")
    print_counts(
        "Inserted",
        {
            "customer": result.customers_count,
            "transaction": result.transactions_count,
            "daily_metric": result.daily_metrics_count,
        },
    )
    return 0


async def cmd_delete(args: argparse.Namespace, session: AsyncSession) -> int:
    if (code := guard(args, writes=not args.dry_run)) is not None:
        return code

    slug = get_settings().demo_organization_slug
    seeder = DemoSeeder(SeederConfig(seed=args.seed, organization=OrganizationConfig(slug=slug)))
    counts = await seeder.delete_data(session, dry_run=args.dry_run)
    if not counts:
        print(f"No organization with slug '{slug}'; nothing to delete.")
        return 0

    print_counts(f"{'Would delete' if args.dry_run else 'Deleted'} ({slug})", counts)
    return 0


async def cmd_status(session: AsyncSession) -> int:
    print_counts("Rows per table", await DemoSeeder(SeederConfig()).get_current_counts(session))
    return 0


async def main() -> int:
    args = build_parser().parse_args()
    configure_logging()

    try:
        if args.init_schema:
            await init_schema()
        async with get_session_maker()() as session:
            if args.full_new:
                return await cmd_full_new(args, session)
            if args.delete:
                return await cmd_delete(args, session)
            return await cmd_status(session)
    finally:
        await dispose_engine()


if __name__ == "__main__":
    sys.exit(asyncio.run(main()))
