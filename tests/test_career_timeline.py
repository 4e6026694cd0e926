from datetime import date

from resume_pipeline.core.career_timeline import analyze_career_timeline
from resume_pipeline.core.date_parser import parse_date_range
from resume_pipeline.core.schemas import DateRangeResult

TODAY = date(2024, 6, 1)


def _range(start, end=None, valid=True):
    return DateRangeResult(start_date=start, end_date=end, is_valid=valid)


def test_empty_input():
    analysis = analyze_career_timeline([], today=TODAY)
    assert analysis.total_experience_months == 0
    assert analysis.career_start_date is None
    assert analysis.career_end_date is None
    assert not analysis.has_gaps and not analysis.has_overlaps
    assert analysis.gaps == [] and analysis.overlaps == []


def test_six_month_gap_detected():
    analysis = analyze_career_timeline(
        [
            _range(date(2019, 12, 1), date(2021, 1, 1)),
            _range(date(2018, 1, 1), date(2019, 6, 1)),
        ],
        today=TODAY,
    )
    assert analysis.has_gaps
    assert not analysis.has_overlaps
    assert len(analysis.gaps) == 1
    gap = analysis.gaps[0]
    assert gap.start == date(2019, 6, 1)
    assert gap.end == date(2019, 12, 1)
    assert gap.months >= 5
    assert analysis.total_experience_months == 17 + 13
    assert analysis.career_start_date == date(2018, 1, 1)
    assert analysis.career_end_date == date(2021, 1, 1)


def test_one_month_transition_is_not_a_gap():
    analysis = analyze_career_timeline(
        [
            _range(date(2018, 6, 1), date(2019, 12, 1)),
            _range(date(2020, 1, 1)),
        ],
        today=TODAY,
    )
    assert not analysis.has_gaps
    assert analysis.career_end_date is None  # still employed


def test_overlap_detected():
    analysis = analyze_career_timeline(
        [
            _range(date(2018, 1, 1), date(2020, 6, 1)),
            _range(date(2020, 1, 1), date(2021, 1, 1)),
        ],
        today=TODAY,
    )
    assert analysis.has_overlaps
    assert not analysis.has_gaps
    overlap = analysis.overlaps[0]
    assert overlap.start == date(2020, 1, 1)
    assert overlap.end == date(2020, 6, 1)
    assert overlap.months == 5


def test_ongoing_position_counts_until_today():
    analysis = analyze_career_timeline([_range(date(2023, 6, 1))], today=TODAY)
    assert analysis.total_experience_months == 12
    assert analysis.career_end_date is None


def test_invalid_ranges_ignored():
    ranges = [
        parse_date_range("January 2020 - December 2022", today=TODAY),
        parse_date_range("December 2022 - January 2020", today=TODAY),
        parse_date_range("not a date", today=TODAY),
    ]
    analysis = analyze_career_timeline(ranges, today=TODAY)
    assert analysis.total_experience_months == 35
    assert analysis.career_start_date == date(2020, 1, 1)
