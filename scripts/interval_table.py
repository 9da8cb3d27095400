#!/usr/bin/env python3
"""Print the review schedule an interval table produces.

Example::

    python scripts/interval_table.py fibonacci --reviews 8
"""

import argparse
import sys
from pathlib import Path

sys.path.append(str(Path(__file__).resolve().parent.parent))

from palace_mem.spacing.intervals import (  # noqa: E402
    available_tables,
    calculate_next_review,
    get_interval_table,
)
from palace_mem.spacing.records import MemoryRecord  # noqa: E402


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(description=__doc__.splitlines()[0])
    parser.add_argument("algorithm", choices=available_tables())
    parser.add_argument("--reviews", type=int, default=10, help="number of reviews to list")
    args = parser.parse_args(argv)

    table = get_interval_table(args.algorithm)
    day = 0
    print(f"{'review':>6} {'index':>5} {'offset':>6} {'day':>5} {'scheduled':>9}")
    for n in range(args.reviews):
        record = MemoryRecord("schedule", review_count=n, last_review_day=day)
        nxt = calculate_next_review(record, table)
        day = nxt.due_day
        print(
            f"{nxt.total_reviews:>6} {nxt.interval_index:>5} {nxt.days_from_now:>6} "
            f"{day:>5} {nxt.scheduled_days:>9}"
        )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
