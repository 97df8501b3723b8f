"""Metrics — накопительные счётчики ликвидности и свопов по пользователям."""

from .tracker import MetricsTracker

__all__ = ["MetricsTracker"]
