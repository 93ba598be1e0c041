from datetime import date, timedelta


def monday_of(d: date) -> date:
    return d - timedelta(days=d.weekday())


def week_span(any_day: date):
    """Monday, the seven days of its week, and the Sunday closing it."""
    start = monday_of(any_day)
    days = [start + timedelta(days=i) for i in range(7)]
    return start, days, days[-1]


def default_week_end(week_start: date) -> date:
    return week_start + timedelta(days=6)


def get_week_label(week_start: date) -> str:
    """'June 10 - 16', or 'Jun 30 - Jul 6' when the week straddles two months."""
    start = monday_of(week_start)
    end = start + timedelta(days=6)
    if start.month == end.month:
        return f"{start.strftime('%B')} {start.day} - {end.day}"
    return f"{start.strftime('%b')} {start.day} - {end.strftime('%b')} {end.day}"
