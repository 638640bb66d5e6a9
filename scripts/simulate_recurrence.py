"""Simulate a recurring template: expansion, slot de-duplication and statuses.

Usage:
    python scripts/simulate_recurrence.py
"""

import datetime
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from academy.engine.dedupe import deduplicate_occurrences, occurrence_key
from academy.engine.performance import average_performance, overall_rating
from academy.engine.recurrence import count_matching_days, expand_recurring
from academy.engine.status import refresh_statuses
from academy.schemas.session import SessionDocument, SessionStatus

ACADEMY = "demo-academy"

# ─── Template: Mon/Wed evenings for four weeks ──────────────────────
TEMPLATE = SessionDocument(academy_id=ACADEMY, name="U12 Technical", category="technical",
                           date=datetime.date(2026, 3, 2), start_time="17:00", end_time="18:30",
                           coach_ids=["coach-1"], assigned_players=["p-1", "p-2", "p-3"], is_recurring=True,
                           selected_days=["monday", "wednesday"], recurring_end_date=datetime.date(2026, 3, 29), )

# An already-played session sitting on the first Wednesday slot
EXISTING = SessionDocument(academy_id=ACADEMY, name="U12 Technical (moved)", date=datetime.date(2026, 3, 4),
                           start_time="17:00", end_time="18:30", status=SessionStatus.FINISHED, )

NOW = datetime.datetime(2026, 3, 11, 17, 45)

SAMPLE_ATTRIBUTES = { "shooting": 72, "pace": 80, "positioning": 65, "passing": 70, "ballControl": 78,
                      "crossing": 60, "sessionRating": 8 }
SAMPLE_HISTORY = [{ "date": "2026-03-02", "rating": 6, "attributes": { "shooting": 68, "pace": 82 } },
                  { "date": "2026-03-04", "attributes": { "sessionRating": 8, "shooting": 70 } }, ]


def main() -> None:
    expected = count_matching_days(TEMPLATE.date, TEMPLATE.recurring_end_date, TEMPLATE.selected_days)
    occurrences = expand_recurring(TEMPLATE)
    print(f"Template '{TEMPLATE.name}' {TEMPLATE.date} -> {TEMPLATE.recurring_end_date} "
          f"on {', '.join(TEMPLATE.selected_days)}")
    print(f"Expanded {len(occurrences)} occurrences (expected {expected})")
    print()

    merged = deduplicate_occurrences([EXISTING, *occurrences])
    print(f"After de-duplication against 1 existing session: {len(merged)} scheduled")
    print(f"{'slot':<28} {'status':<10} name")
    print("-" * 60)
    for session in refresh_statuses(merged, NOW):
        print(f"{occurrence_key(session):<28} {session.status.value:<10} {session.name}")
    print()

    print(f"Overall rating:      {overall_rating(SAMPLE_ATTRIBUTES, SAMPLE_HISTORY)}")
    print(f"Average performance: {average_performance(SAMPLE_HISTORY)}")


if __name__ == "__main__":
    main()
