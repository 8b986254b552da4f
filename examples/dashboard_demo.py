#!/usr/bin/env python
"""Walk through the dashboard and report endpoints.

Usage:
    uv run python examples/dashboard_demo.py

This script demonstrates:
1. Headline KPIs with period-over-period change
2. The daily revenue / active users series
3. Searching and paging transactions
4. A filtered report and its CSV export

Prerequisites:
    - PostgreSQL running with the demo tenant seeded
      (uv run python scripts/seed_demo.py --full-new --init-schema --confirm)
    - API running (uv run uvicorn app.main:app --reload --port 8000)
"""

import json
import sys
from datetime import date, timedelta

import httpx

from app.core.config import get_settings


def api_base_url() -> str:
    """Base URL of the locally running API, from API_HOST and API_PORT."""
    settings = get_settings()
    host = "localhost" if settings.api_host == "0.0.0.0" else settings.api_host  # noqa: S104
    return f"http://{host}:{settings.api_port}"


def print_section(title: str) -> None:
    """Print a section header."""
    print(f"\n{'=' * 60}")
    print(f"  {title}")
    print(f"{'=' * 60}\n")


def print_response(response: httpx.Response, label: str = "") -> dict:
    """Print HTTP response details."""
    content_type = response.headers.get("content-type", "")
    data = response.json() if "json" in content_type else {}
    status_mark = "OK " if response.status_code < 400 else "ERR"
    print(f"[{status_mark}] {label} [{response.status_code}]")
    if data:
        print(json.dumps(data, indent=2, default=str)[:1500])
    return data


def main() -> int:
    """Run the dashboard demo workflow."""
    print_section("PulseDash - Dashboard Demo")

    base_url = api_base_url()
    client = httpx.Client(base_url=base_url, timeout=30)

    try:
        health = client.get("/health/ready")
    except httpx.ConnectError:
        print(f"Cannot connect to API at {base_url}")
        port = get_settings().api_port
        print(f"Start the API with: uv run uvicorn app.main:app --reload --port {port}")
        return 1
    if health.json().get("database") != "connected":
        print("API is up but the database is not reachable.")
        return 1

    print_section("Step 1: KPIs (last 30 days vs the 30 before)")
    print_response(client.get("/dashboard/kpis"), "GET /dashboard/kpis")

    print_section("Step 2: Daily series (last 7 days)")
    series = print_response(
        client.get("/dashboard/series", params={"days": 7}), "GET /dashboard/series"
    )
    for point in series.get("points", []):
        revenue, users = point["revenue"], point["active_users"]
        print(f"  {point['date']}  revenue={revenue:>10,.2f}  users={users}")

    print_section("Step 3: Completed transactions matching 'tech', page 1")
    page = print_response(
        client.get(
            "/dashboard/transactions",
            params={"search": "tech", "status": "COMPLETED", "page_size": 5},
        ),
        "GET /dashboard/transactions",
    )
    print(f"\n-> {page.get('total_count', 0)} matches over {page.get('pages', 0)} pages")

    print_section("Step 4: Report for the last 14 days")
    end = date.today()
    start = end - timedelta(days=13)
    params = {"start_date": start.isoformat(), "end_date": end.isoformat(), "status": "all"}

    report = client.get("/reports", params=params)
    summary = report.json().get("summary", {}) if report.status_code == 200 else {}
    print(json.dumps(summary, indent=2))

    export = client.get("/reports/export", params=params)
    print(f"\n{export.headers.get('content-disposition')}")
    for line in export.text.split("\n")[:4]:
        print(f"  {line}")

    print_section("Done")
    return 0


if __name__ == "__main__":
    sys.exit(main())
