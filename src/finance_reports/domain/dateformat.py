from datetime import datetime, tzinfo

from finance_reports.domain.timestamps import parse_timestamp
from finance_reports.models import UserPreferences


def _date_part(moment: datetime, date_format: str) -> str:
    if date_format == "DD/MM/YYYY":
        return f"{moment.day:02d}/{moment.month:02d}/{moment.year}"
    return f"{moment.month:02d}/{moment.day:02d}/{moment.year}"


def _time_part(moment: datetime, time_format: str) -> str:
    if time_format == "12h":
        period = "PM" if moment.hour >= 12 else "AM"
        hour = moment.hour % 12 or 12
        return f"{hour}:{moment.minute:02d}:{moment.second:02d} {period}"
    return f"{moment.hour:02d}:{moment.minute:02d}:{moment.second:02d}"


def format_date(
    value: str | datetime,
    preferences: UserPreferences | None = None,
    tz: tzinfo | None = None,
) -> str:
    prefs = preferences or UserPreferences()
    moment = parse_timestamp(value, tz)
    if moment is None:
        return ""
    return _date_part(moment, prefs.date_format)


def format_date_time(
    value: str | datetime,
    preferences: UserPreferences | None = None,
    tz: tzinfo | None = None,
) -> str:
    prefs = preferences or UserPreferences()
    moment = parse_timestamp(value, tz)
    if moment is None:
        return ""
    return f"{_date_part(moment, prefs.date_format)} {_time_part(moment, prefs.time_format)}"
