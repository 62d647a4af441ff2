"""Pytest configuration for integration tests.

This module provides integration-test-specific fixtures that ensure
proper test isolation and mocking for API endpoint tests.
"""

from unittest.mock import AsyncMock, patch

import pytest


@pytest.fixture(autouse=True)
def mock_ollama_client():
    """Mock OllamaClient for all integration tests.

    This fixture patches the OllamaClient class before the app is created,
    ensuring the lifespan uses our mock instead of creating a real client.
    Tests queue model replies through mock_ollama_client.chat.side_effect.
    """
    with patch("toolchat_server.app.OllamaClient") as mock_client_class:
        # Create the mock instance
        mock_instance = AsyncMock()
        mock_instance.host = "http://localhost:11434"
        mock_instance.check_connection.return_value = True

        # Return the mock instance when OllamaClient is instantiated
        mock_client_class.return_value = mock_instance

        yield mock_instance


@pytest.fixture(autouse=True)
def mock_weather_client():
    """Mock WeatherClient so getWeather never reaches the network."""
    with patch("toolchat_server.app.WeatherClient") as mock_client_class:
        mock_instance = AsyncMock()
        mock_instance.current_weather.return_value = {
            "location": "Lisbon",
            "temperature": 21.5,
            "description": "clear sky",
        }
        mock_client_class.return_value = mock_instance

        yield mock_instance


@pytest.fixture(autouse=True)
def clean_transcripts_dir(test_settings):
    """Ensure the transcripts directory is clean before each test.

    Args:
        test_settings: The test settings fixture from parent conftest
    """
    transcripts_dir = test_settings.resolved_transcripts_dir

    if transcripts_dir.exists():
        for transcript_file in transcripts_dir.glob("*.json"):
            transcript_file.unlink()

    yield
