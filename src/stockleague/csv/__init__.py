"""CSV upload parsing."""

from stockleague.csv.importer import CSV_COLUMNS, ParsedCsv, parse_positions_csv

__all__ = [
    "CSV_COLUMNS",
    "ParsedCsv",
    "parse_positions_csv",
]
