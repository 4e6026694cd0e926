"""
Career timeline analysis over parsed date ranges.

Computes total experience and flags gaps (more than one month between jobs)
and overlaps (a job starting before the previous one ended).
"""

import logging
from datetime import date
from typing import Iterable, List, Optional

from resume_pipeline.core.date_parser import months_between
from resume_pipeline.core.schemas import CareerAnalysis, CareerGap, CareerOverlap, DateRangeResult

logger = logging.getLogger(__name__)

GAP_THRESHOLD_MONTHS = 1


def analyze_career_timeline(
    ranges: Iterable[DateRangeResult],
    today: Optional[date] = None,
) -> CareerAnalysis:
    """
    Analyze a sequence of date ranges.

    Invalid ranges and ranges without a start are ignored. Ongoing ranges
    (end_date None) count up to `today` for arithmetic, but career_end_date
    stays None when the latest position is ongoing.

    Args:
        ranges: Parsed date ranges in any order
        today: Reference date for ongoing positions (defaults to date.today())

    Returns:
        CareerAnalysis
    """
    today = today or date.today()
    valid: List[DateRangeResult] = sorted(
        (r for r in ranges if r.is_valid and r.start_date is not None),
        key=lambda r: r.start_date,
    )
    if not valid:
        return CareerAnalysis()

    total = 0
    gaps: List[CareerGap] = []
    overlaps: List[CareerOverlap] = []
    previous_end: Optional[date] = None

    for current in valid:
        start = current.start_date
        end = current.end_date or today
        total += max(months_between(start, end), 0)

        if previous_end is not None:
            delta = months_between(previous_end, start)
            if delta > GAP_THRESHOLD_MONTHS:
                gaps.append(CareerGap(start=previous_end, end=start, months=delta))
            elif delta < 0:
                overlaps.append(CareerOverlap(start=start, end=previous_end, months=abs(delta)))

        previous_end = end

    last = valid[-1]
    analysis = CareerAnalysis(
        total_experience_months=total,
        career_start_date=valid[0].start_date,
        career_end_date=last.end_date,
        has_gaps=bool(gaps),
        has_overlaps=bool(overlaps),
        gaps=gaps,
        overlaps=overlaps,
    )
    logger.debug(
        "Career timeline: %d ranges, %d months, %d gaps, %d overlaps",
        len(valid), total, len(gaps), len(overlaps),
    )
    return analysis
