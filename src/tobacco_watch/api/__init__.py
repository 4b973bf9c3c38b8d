"""tobacco_watch.api: HTTP surface for prices, weather and advice."""

from tobacco_watch.api.app import create_app

__all__ = ["create_app"]
