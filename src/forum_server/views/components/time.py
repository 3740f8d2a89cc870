from datetime import datetime

from htpy import BaseElement, time as time_


def format_timestamp(value: datetime) -> str:
    return value.strftime("%Y-%m-%d %H:%M")


def render_time(value: datetime | None) -> BaseElement:
    if value is None:
        return time_()["-"]
    return time_(datetime=value.isoformat())[format_timestamp(value)]
