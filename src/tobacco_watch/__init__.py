"""tobacco-watch: tobacco commodity prices, weather and farming advice."""

__version__ = "0.1.0"
