"""tobacco_watch.advice: weather-based farming recommendations."""

from tobacco_watch.advice.recommendation import advanced_recommendation, recommend

__all__ = ["recommend", "advanced_recommendation"]
