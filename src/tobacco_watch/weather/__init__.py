"""tobacco_watch.weather: OpenWeatherMap access."""

from tobacco_watch.weather.client import WeatherClient

__all__ = ["WeatherClient"]
