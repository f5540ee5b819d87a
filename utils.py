from datetime import datetime
from dateutil import tz
from dateutil import parser as dtparser

from settings import load_settings


def get_local_now():
    return datetime.now(tz=tz.gettz(load_settings().timezone))


def format_local(value) -> str:
    """ISO timestamp from the API or a stored draft -> local 'dd.mm.YYYY HH:MM'."""
    if not value:
        return ""
    try:
        dt = dtparser.isoparse(str(value))
    except ValueError:
        return str(value)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz.UTC)
    return dt.astimezone(tz.gettz(load_settings().timezone)).strftime("%d.%m.%Y %H:%M")
