from datetime import date, datetime, timezone
from zoneinfo import ZoneInfo

from fastapi import Request


def today_in(tz_name: str) -> date:
    return datetime.now(ZoneInfo(tz_name)).date()


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def get_today(request: Request) -> date:
    tz_name = request.app.state.settings.TIMEZONE
    return today_in(tz_name)
