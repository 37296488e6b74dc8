"""
Showroom Dashboard
Configuration Module
"""
from .settings import DashboardSettings, FailurePolicy, Settings, SourceKind, get_settings

__all__ = ["DashboardSettings", "FailurePolicy", "Settings", "SourceKind", "get_settings"]
