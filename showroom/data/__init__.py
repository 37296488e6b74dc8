"""
Data Generation Module
"""
from .generators import CSV_FILES, ShowroomDataGenerator, write_csv

__all__ = [
    "CSV_FILES",
    "ShowroomDataGenerator",
    "write_csv",
]
