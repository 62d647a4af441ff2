"""Async client for the OpenWeatherMap current-weather API.

The client wraps a single httpx.AsyncClient that is created once at startup
and closed on shutdown.
"""

import logging
from typing import Any

import httpx

from toolchat_server.errors import ToolExecutionError

logger = logging.getLogger(__name__)

DEFAULT_WEATHER_URL = "https://api.openweathermap.org/data/2.5/weather"


class WeatherClient:
    """Fetches current weather conditions for a location.

    Attributes:
        base_url: OpenWeatherMap endpoint for current weather
        lang: Language code for the condition description (e.g. "en", "pt_br")
    """

    def __init__(
        self,
        api_key: str | None,
        base_url: str = DEFAULT_WEATHER_URL,
        lang: str = "en",
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        """Initialize the weather client.

        Args:
            api_key: OpenWeatherMap API key. Requests fail if it is missing.
            base_url: Endpoint URL
            lang: Language for descriptions
            timeout: Request timeout in seconds
            transport: Optional httpx transport (used by tests)
        """
        self._api_key = api_key
        self.base_url = base_url
        self.lang = lang
        self._client = httpx.AsyncClient(
            timeout=httpx.Timeout(timeout), transport=transport
        )
        logger.info(f"WeatherClient initialized with url: {base_url}")

    async def current_weather(self, location: str) -> dict[str, Any]:
        """Get current conditions for a location.

        Args:
            location: City name, optionally with country (e.g. "Lisbon, PT")

        Returns:
            Dict with location, temperature (Celsius) and description

        Raises:
            ToolExecutionError: If no API key is configured, the request fails
                or the response cannot be parsed
        """
        if not self._api_key:
            raise ToolExecutionError("Failed to get weather: no API key configured")

        params = {
            "q": location,
            "appid": self._api_key,
            "units": "metric",
            "lang": self.lang,
        }

        try:
            response = await self._client.get(self.base_url, params=params)
            response.raise_for_status()
            data = response.json()
        except httpx.HTTPStatusError as e:
            logger.warning(
                f"Weather API error for {location}: {e.response.status_code}"
            )
            raise ToolExecutionError(
                f"Failed to get weather: HTTP {e.response.status_code}"
            ) from e
        except (httpx.HTTPError, ValueError) as e:
            logger.warning(f"Weather request for {location} failed: {e}")
            raise ToolExecutionError(f"Failed to get weather: {e}") from e

        try:
            return {
                "location": data["name"],
                "temperature": data["main"]["temp"],
                "description": data["weather"][0]["description"],
            }
        except (KeyError, IndexError, TypeError) as e:
            logger.warning(f"Unexpected weather payload for {location}: {data}")
            raise ToolExecutionError(
                "Failed to get weather: unexpected response format"
            ) from e

    async def close(self) -> None:
        """Close the underlying HTTP client."""
        await self._client.aclose()
        logger.debug("WeatherClient closed")
