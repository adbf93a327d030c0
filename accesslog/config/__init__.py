"""Application configuration."""

from .settings import AnalyticsConfig, DatabaseConfig, Settings, settings

__all__ = ["AnalyticsConfig", "DatabaseConfig", "Settings", "settings"]
