"""
Data Ingestion Module
"""
from .sources import (
    CsvDashboardSource,
    DashboardSource,
    SOURCE_NAMES,
    SourceFetchError,
    SqlDashboardSource,
    create_source,
)

__all__ = [
    "CsvDashboardSource",
    "DashboardSource",
    "SOURCE_NAMES",
    "SourceFetchError",
    "SqlDashboardSource",
    "create_source",
]
