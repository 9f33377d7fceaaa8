#!/usr/bin/env python3
"""Seed the appraisal containers with demo employees and forms.

Run from the backend/ directory:

    python3 scripts/seed_demo.py seed.json [--dry-run] [--verbose]

The seed file holds ``forms`` (lists of questions) and ``employees``. An
employee's ``supervisor`` may name another entry's ``key``; it is replaced by
that entry's generated employee id, and the new employee is appended to the
supervisor's team. Supervisors must therefore be listed before their reports.
Unknown supervisor values are stored as-is (Admin-supervised).
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
import os
import sys
from pathlib import Path
from typing import Any

_project_root = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if _project_root not in sys.path:
    sys.path.insert(0, _project_root)

from appraisal.core.config import Settings  # noqa: E402
from appraisal.core.cosmos import cosmos_store  # noqa: E402
from appraisal.models.employee import EmployeeCreate  # noqa: E402
from appraisal.models.form import FormCreate  # noqa: E402
from appraisal.services.employee_service import EmployeeService  # noqa: E402
from appraisal.services.form_service import FormService  # noqa: E402

logger = logging.getLogger(__name__)


def load_seed(path: Path) -> dict[str, list[dict[str, Any]]]:
    with path.open(encoding="utf-8") as handle:
        data = json.load(handle)

    if not isinstance(data, dict):
        raise ValueError(f"{path}: expected a JSON object with 'employees' and 'forms'")

    return {
        "employees": list(data.get("employees") or []),
        "forms": list(data.get("forms") or []),
    }


def build_employee_request(entry: dict[str, Any], created_ids: dict[str, str]) -> EmployeeCreate:
    """Validate one seed entry, swapping a supervisor key for its generated id."""
    supervisor = entry.get("supervisor", "")
    return EmployeeCreate(
        name=entry.get("name", ""),
        role=entry.get("role", ""),
        department=entry.get("department", ""),
        supervisor=created_ids.get(supervisor, supervisor),
        team=entry.get("team") or [],
    )


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed demo employees and appraisal forms")
    parser.add_argument("seed_file", type=Path, help="JSON file with 'employees' and 'forms'")
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the seed file without writing to Cosmos DB",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Enable verbose (DEBUG) logging",
    )
    return parser.parse_args(argv)


async def seed(
    args: argparse.Namespace,
    employees: EmployeeService | None = None,
    forms: FormService | None = None,
) -> dict[str, str]:
    """Create the seed records; returns seed key -> generated employee id."""
    level = logging.DEBUG if args.verbose else logging.INFO
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(message)s")

    data = load_seed(args.seed_file)
    logger.info("Loaded %d employees and %d forms", len(data["employees"]), len(data["forms"]))

    if args.dry_run:
        known: dict[str, str] = {}
        for entry in data["employees"]:
            build_employee_request(entry, known)
            if entry.get("key"):
                known[entry["key"]] = entry["key"]
        for entry in data["forms"]:
            FormCreate(questions=entry.get("questions", []))
        logger.info("[DRY RUN] Seed file is valid, nothing written.")
        return {}

    own_services = employees is None or forms is None
    if own_services:
        settings = Settings()
        employees = EmployeeService()
        forms = FormService()
        await employees.initialize(settings)
        await forms.initialize(settings)

    created_ids: dict[str, str] = {}
    try:
        for entry in data["forms"]:
            form = await forms.create_form(FormCreate(questions=entry.get("questions", [])))
            logger.info("Created form %s", form.form_id)

        for entry in data["employees"]:
            request = build_employee_request(entry, created_ids)
            employee = await employees.create_employee(request)
            if entry.get("key"):
                created_ids[entry["key"]] = employee.employee_id

            if await employees.add_team_member(employee.supervisor, employee.employee_id) is None:
                logger.debug("%s reports to Admin", employee.employee_id)
            logger.info("Created employee %s (%s)", employee.employee_id, employee.name)
    finally:
        if own_services:
            await employees.close()
            await forms.close()
            await cosmos_store.close()

    logger.info("Seeding complete: %d employees, %d forms", len(data["employees"]), len(data["forms"]))
    return created_ids


def main() -> None:
    args = parse_args()
    asyncio.run(seed(args))


if __name__ == "__main__":
    main()
