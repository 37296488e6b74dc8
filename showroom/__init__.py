"""
Showroom Dashboard

Fetches a showroom's sales, stock, expenses and payroll records and
aggregates them into a single business summary.
"""

__version__ = "1.0.0"
