"""Personal-record detection for a just-completed exercise."""

from __future__ import annotations

import logging
from typing import List, Sequence

from lift_cli.core.constants import PR_UNITS
from lift_cli.core.formulas import best_set_by_score, calculate_workout_volume, estimated_1rm, round_weight
from lift_cli.core.models import PersonalRecordEvent, PreviousBest, WorkoutSet

logger = logging.getLogger(__name__)


def _session_1rm(sets: Sequence[WorkoutSet]) -> float:
    best = best_set_by_score(sets)
    if best is None:
        return 0.0
    return estimated_1rm(best.weight, best.reps) or 0.0


def session_bests(sets: Sequence[WorkoutSet]) -> PreviousBest:
    """Metrics of one session in record-book form."""
    if not sets:
        return PreviousBest()
    return PreviousBest(
        max_weight=max(float(s.weight or 0.0) for s in sets),
        max_reps=max(int(s.reps or 0) for s in sets),
        max_volume=calculate_workout_volume(sets),
        estimated_1rm=_session_1rm(sets),
    )


def detect_personal_records(
    sets: Sequence[WorkoutSet],
    previous_best: PreviousBest,
) -> List[PersonalRecordEvent]:
    """Compare a session against the record book and return new records.

    A record fires only when the new value strictly exceeds the stored best.
    ``previous_best`` is never modified.
    """
    if not sets:
        return []

    current = session_bests(sets)
    candidates = (
        ("max_weight", current.max_weight, previous_best.max_weight),
        ("max_reps", current.max_reps, previous_best.max_reps),
        ("max_volume", current.max_volume, previous_best.max_volume),
        ("1rm", current.estimated_1rm, previous_best.estimated_1rm),
    )

    records: List[PersonalRecordEvent] = []
    for record_type, value, stored in candidates:
        if (value or 0) > (stored or 0):
            reported = round_weight(float(value)) if record_type == "1rm" else value
            records.append(PersonalRecordEvent(type=record_type, value=reported, unit=PR_UNITS[record_type]))

    if records:
        logger.debug("Detected %d personal records: %s", len(records), [r.type for r in records])
    return records


def _higher(stored, value):
    if stored is None:
        return value
    if value is None:
        return stored
    return max(stored, value)


def merge_bests(previous_best: PreviousBest, session: PreviousBest) -> PreviousBest:
    """Return a new record book holding the higher of each stored and session value.

    Pass ``session_bests`` output, not event values: event 1RMs are rounded for display.
    """
    return PreviousBest(
        max_weight=_higher(previous_best.max_weight, session.max_weight),
        max_reps=_higher(previous_best.max_reps, session.max_reps),
        max_volume=_higher(previous_best.max_volume, session.max_volume),
        estimated_1rm=_higher(previous_best.estimated_1rm, session.estimated_1rm),
    )
