"""
Export Package

Session results as CSV.
"""

from .csv_export import CSV_HEADER, results_csv, results_rows, write_results_csv

__all__ = [
    "CSV_HEADER",
    "results_csv",
    "results_rows",
    "write_results_csv",
]
