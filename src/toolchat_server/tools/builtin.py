"""Built-in tools: current time and current weather."""

import logging
from datetime import datetime, tzinfo
from typing import Any, Callable
from zoneinfo import ZoneInfo

from toolchat_server.tools.registry import ToolRegistry
from toolchat_server.tools.types import ToolDeclaration, ToolParameter
from toolchat_server.tools.weather import WeatherClient

logger = logging.getLogger(__name__)

TIME_FORMAT = "%d/%m/%Y, %H:%M:%S"

CURRENT_TIME_DECLARATION = ToolDeclaration(
    name="getCurrentTime",
    description="Get the current date and time.",
)

WEATHER_DECLARATION = ToolDeclaration(
    name="getWeather",
    description="Get the current weather for a city.",
    parameters=(
        ToolParameter(
            name="location",
            type="string",
            description='City to look up, e.g. "Lisbon, PT"',
            required=True,
        ),
    ),
)


def make_current_time_tool(
    tz: tzinfo | None = None,
    clock: Callable[[tzinfo | None], datetime] = datetime.now,
) -> Callable[[], dict[str, Any]]:
    """Create the getCurrentTime handler.

    Args:
        tz: Timezone to report the time in. None uses the server's local time.
        clock: Source of the current time, replaceable in tests
    """

    def get_current_time() -> dict[str, Any]:
        return {"current_time": clock(tz).strftime(TIME_FORMAT)}

    return get_current_time


def make_weather_tool(weather_client: WeatherClient):
    """Create the getWeather handler bound to a WeatherClient."""

    async def get_weather(location: str) -> dict[str, Any]:
        return await weather_client.current_weather(location)

    return get_weather


def build_default_registry(
    weather_client: WeatherClient, timezone: str | None = None
) -> ToolRegistry:
    """Build and seal the registry with the built-in tools.

    Args:
        weather_client: Client used by getWeather
        timezone: IANA timezone name for getCurrentTime (e.g. "America/Sao_Paulo")

    Returns:
        A sealed ToolRegistry
    """
    tz = ZoneInfo(timezone) if timezone else None

    registry = ToolRegistry()
    registry.register(CURRENT_TIME_DECLARATION, make_current_time_tool(tz))
    registry.register(WEATHER_DECLARATION, make_weather_tool(weather_client))
    registry.seal()
    return registry
