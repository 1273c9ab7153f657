"""Jinja2 template configuration."""

from datetime import datetime
from pathlib import Path
from zoneinfo import ZoneInfo

from fastapi.templating import Jinja2Templates

from imobi.core.config import settings
from imobi.web.dependencies import get_flash_messages

# Template directory is at imobi/templates/
BASE_DIR = Path(__file__).resolve().parent.parent
templates = Jinja2Templates(directory=str(BASE_DIR / "templates"))

_TZ = ZoneInfo(settings.TIMEZONE)


def format_brl(value: float | None, decimals: int = 2) -> str:
    """Format a value as Brazilian reais, e.g. ``R$ 1.234,50``."""
    number = f"{float(value or 0):,.{decimals}f}"
    return "R$ " + number.replace(",", "_").replace(".", ",").replace("_", ".")


def format_datetime_br(timestamp_ms: int | None) -> str:
    """Day/month and time of an epoch-millis timestamp, e.g. ``19/10 14:30``."""
    if not timestamp_ms:
        return ""
    return datetime.fromtimestamp(timestamp_ms / 1000, _TZ).strftime("%d/%m %H:%M")


def format_date_input(timestamp_ms: int | None) -> str:
    """ISO date for an ``<input type="date">`` value."""
    if not timestamp_ms:
        return ""
    return datetime.fromtimestamp(timestamp_ms / 1000, _TZ).date().isoformat()


templates.env.filters["brl"] = format_brl
templates.env.filters["datetime_br"] = format_datetime_br
templates.env.filters["date_input"] = format_date_input
templates.env.globals["get_flash_messages"] = get_flash_messages
