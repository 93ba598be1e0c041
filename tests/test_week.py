from datetime import date

from fleetdesk.utils.week import get_week_label, week_span


def test_week_span_starts_on_monday():
    start, days, sunday = week_span(date(2024, 6, 12))
    assert start == date(2024, 6, 10)
    assert sunday == date(2024, 6, 16)
    assert len(days) == 7


def test_week_label_has_no_zero_padding():
    assert get_week_label(date(2024, 6, 3)) == "June 3 - 9"
    assert get_week_label(date(2024, 6, 12)) == "June 10 - 16"


def test_week_label_across_months():
    assert get_week_label(date(2024, 7, 29)) == "Jul 29 - Aug 4"
