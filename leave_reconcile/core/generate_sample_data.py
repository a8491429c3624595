"""
generate_sample_data.py

Seeded generator for synthetic DRMIS and Oracle leave exports.

This script writes three Excel files into data/sample/: a DRMIS time sheet
report, an Oracle leave report for the same (fake) employee, and the
leave-code allow-list. Both reports start with title rows and a blank
leading column so the header detector is exercised the way real exports do.
The outputs are deterministic given a seed and mix agreeing days with every
kind of discrepancy the reconciler reports.
"""

from __future__ import annotations

import argparse
import random
from datetime import date, timedelta
from pathlib import Path

import pandas as pd
from faker import Faker

from ..config import ALLOW_LIST_FILENAME, BUSINESS_CALENDAR_CONFIG, SAMPLE_DIR
from .business_calendar import next_business_day


DEFAULT_SEED = 20250428
DEFAULT_START = date(2025, 4, 1)
DEFAULT_DAYS = 40
WORK_DAY_HOURS = 7.5

# 4-digit DRMIS code -> description; Oracle uses the last three digits
LEAVE_TYPES = {
    "1110": "Vacation Leave",
    "1120": "Sick Leave",
    "1130": "Family Related Responsibilities",
    "1150": "Personal Leave",
    "1160": "Volunteer Leave",
}

SCENARIO_WEIGHTS = [
    ("no_leave", 0.55),
    ("matching", 0.18),
    ("drmis_only", 0.07),
    ("oracle_only", 0.07),
    ("code_differs", 0.07),
    ("hours_differ", 0.06),
]

DRMIS_HEADERS = ["Pers.No.", "Name", "Date", "Rec. Order", "Act", "A/AType", "A/A type text", "Hours"]
ORACLE_HEADERS = ["Absence Type", "From Date", "To Date", "Hours Recorded", "Leave Code", "Status"]


def _leave_hours(rng: random.Random) -> float:
    return rng.choice([WORK_DAY_HOURS, WORK_DAY_HOURS, 4.0, 3.75, 2.0])


def _business_days(start: date, count: int) -> list[date]:
    days = []
    current = next_business_day(start, BUSINESS_CALENDAR_CONFIG.holidays)
    while len(days) < count:
        days.append(current)
        current = next_business_day(current + timedelta(days=1), BUSINESS_CALENDAR_CONFIG.holidays)
    return days


def _oracle_code(code: str) -> str:
    return code[1:]


def _build_scenarios(rng: random.Random, days: list[date]) -> list[dict[str, object]]:
    """One scenario per day: what DRMIS and Oracle each hold for leave."""
    labels = [label for label, _ in SCENARIO_WEIGHTS]
    weights = [weight for _, weight in SCENARIO_WEIGHTS]
    codes = sorted(LEAVE_TYPES)

    scenarios = []
    for day in days:
        kind = rng.choices(labels, weights=weights, k=1)[0]
        code = rng.choice(codes)
        hours = _leave_hours(rng)
        drmis = oracle = None
        if kind == "matching":
            drmis, oracle = (code, hours), (code, hours)
        elif kind == "drmis_only":
            drmis = (code, hours)
        elif kind == "oracle_only":
            oracle = (code, hours)
        elif kind == "code_differs":
            other = rng.choice([c for c in codes if c != code])
            drmis, oracle = (code, hours), (other, hours)
        elif kind == "hours_differ":
            drmis, oracle = (code, hours), (code, 2.0 if hours != 2.0 else 4.0)
        scenarios.append({"date": day, "kind": kind, "drmis": drmis, "oracle": oracle})
    return scenarios


def _build_drmis_rows(
    scenarios: list[dict[str, object]],
    multi_day: list[date],
    rng: random.Random,
    faker: Faker,
) -> tuple[list[list[object]], str]:
    pers_no = faker.numerify("########")
    name = faker.name()
    work_orders = [faker.numerify("############") for _ in range(3)]
    activities = ["0010", "0020", "0030"]

    rows: list[list[object]] = []

    def _work(day: date, hours: float) -> None:
        if hours <= 0:
            return
        # Split the day over one or two work orders
        if hours > 4 and rng.random() < 0.5:
            first = round(hours / 2, 2)
            parts = [first, round(hours - first, 2)]
        else:
            parts = [hours]
        for part in parts:
            idx = rng.randrange(len(work_orders))
            rows.append([pers_no, name, day.strftime("%d.%m.%Y"), work_orders[idx], activities[idx], None, None, part])

    for scenario in scenarios:
        day = scenario["date"]
        leave = scenario["drmis"]
        leave_hours = 0.0
        if leave is not None:
            code, leave_hours = leave
            rows.append([pers_no, name, day.strftime("%d.%m.%Y"), None, None, code, LEAVE_TYPES[code], leave_hours])
        _work(day, WORK_DAY_HOURS - leave_hours)

    # Multi-day vacation: 20 hours booked day by day in DRMIS
    for day, hours in zip(multi_day, [8.0, 8.0, 4.0]):
        rows.append([pers_no, name, day.strftime("%d.%m.%Y"), None, None, "1110", LEAVE_TYPES["1110"], hours])
        _work(day, max(0.0, WORK_DAY_HOURS - hours))

    # Administrative entries are never reconciled
    rows.append([pers_no, name, multi_day[0].strftime("%d.%m.%Y"), None, None, "3001", "Admin", 0.5])
    return rows, pers_no


def _build_oracle_rows(scenarios: list[dict[str, object]], multi_day: list[date]) -> list[list[object]]:
    rows: list[list[object]] = []
    for scenario in scenarios:
        leave = scenario["oracle"]
        if leave is None:
            continue
        code, hours = leave
        day = scenario["date"]
        rows.append([LEAVE_TYPES[code], day, day, hours, _oracle_code(code), "Approved"])

    start, end = multi_day[0], multi_day[-1]
    rows.append([LEAVE_TYPES["1110"], start, end, 20.0, "110", "Approved"])
    return rows


def _with_title_block(title: str, subtitle: str, headers: list[str], rows: list[list[object]]) -> pd.DataFrame:
    """Raw sheet: two title rows, a blank row, then the table, all shifted one column right."""
    width = len(headers) + 1
    grid: list[list[object]] = [
        [None, title] + [None] * (width - 2),
        [None, subtitle] + [None] * (width - 2),
        [None] * width,
        [None] + headers,
    ]
    grid.extend([None] + list(row) for row in rows)
    return pd.DataFrame(grid)


def generate_sample_data(
    output_dir: Path = SAMPLE_DIR,
    seed: int = DEFAULT_SEED,
    start: date = DEFAULT_START,
    days: int = DEFAULT_DAYS,
) -> dict[str, Path]:
    rng = random.Random(seed)
    faker = Faker()
    faker.seed_instance(seed)
    output_dir.mkdir(parents=True, exist_ok=True)

    calendar = _business_days(start, days + 3)
    scenario_days, multi_day = calendar[:days], calendar[days:]

    scenarios = _build_scenarios(rng, scenario_days)
    drmis_rows, pers_no = _build_drmis_rows(scenarios, multi_day, rng, faker)
    oracle_rows = _build_oracle_rows(scenarios, multi_day)

    run_stamp = f"Run date: {calendar[-1].isoformat()}"
    drmis_df = _with_title_block("DRMIS Time Sheet Report", run_stamp, DRMIS_HEADERS, drmis_rows)
    oracle_df = _with_title_block(f"Oracle Leave Report - Employee {pers_no}", run_stamp, ORACLE_HEADERS, oracle_rows)
    allow_df = pd.DataFrame(
        {
            "A/AType": list(LEAVE_TYPES),
            "Description": list(LEAVE_TYPES.values()),
        }
    )

    outputs = {
        "drmis": output_dir / "drmis_sample.xlsx",
        "oracle": output_dir / "oracle_sample.xlsx",
        "allow_list": output_dir / ALLOW_LIST_FILENAME,
    }

    drmis_df.to_excel(outputs["drmis"], index=False, header=False)
    oracle_df.to_excel(outputs["oracle"], index=False, header=False)
    allow_df.to_excel(outputs["allow_list"], index=False)

    return outputs


def _parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Generate seeded synthetic sample data for DRMIS/Oracle leave inputs."
    )
    parser.add_argument("--seed", type=int, default=DEFAULT_SEED, help="Deterministic RNG seed")
    parser.add_argument("--days", type=int, default=DEFAULT_DAYS, help="Number of business days to generate")
    parser.add_argument(
        "--output-dir",
        type=Path,
        default=SAMPLE_DIR,
        help="Destination directory for sample Excel files",
    )
    return parser.parse_args()


def main() -> None:
    args = _parse_args()
    outputs = generate_sample_data(output_dir=args.output_dir, seed=args.seed, days=args.days)
    for label, path in outputs.items():
        print(f"Wrote {label} sample to: {path}")


if __name__ == "__main__":
    main()
