"""
Field sanitization for spreadsheet-safe CSV output.

Rules:
- Every value is coerced to text first.
- Runs of CR/LF characters collapse to a single space, so each row stays on one line.
- Surrounding whitespace is trimmed, before the formula check.
- Text starting with a formula character (= + @ -) gets a leading quote.
- Applying the rules twice gives the same result as applying them once.
"""

from __future__ import annotations

import re
from typing import Any

from .models import JoinedRow
from .rules import FORMULA_ESCAPE, FORMULA_PREFIXES

_LINE_BREAKS = re.compile(r"[\r\n]+")


def sanitize_field(value: Any) -> str:
    text = _LINE_BREAKS.sub(" ", str(value)).strip()
    if text.startswith(FORMULA_PREFIXES):
        text = FORMULA_ESCAPE + text
    return text


def sanitize_row(row: JoinedRow) -> JoinedRow:
    return JoinedRow(
        name=sanitize_field(row.name),
        title=sanitize_field(row.title),
        body=sanitize_field(row.body),
    )
