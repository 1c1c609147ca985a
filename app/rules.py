"""
Deterministic output rules.

This file exists to make the CSV contract explicit and enforceable.
"""

PLACEHOLDER = "N/A"

CSV_HEADER = ("Name", "Title", "Body")
CSV_DELIMITER = ","
CSV_LINE_TERMINATOR = "\n"
OUTPUT_ENCODING = "utf-8"
FILENAME_PREFIX = "data-"

# Leading characters spreadsheets evaluate as formulas
FORMULA_PREFIXES = ("=", "+", "@", "-")
FORMULA_ESCAPE = "'"
