from __future__ import annotations

import re

from ..models.preview import CsvPreview

"""CSV text reader: tokenizer + preview sampler.

tokenize(): 改行で行分割してから行内をクォート考慮で走査する。
クォート内の改行は未対応 (行分割がクォート解析より先に行われるため)。

The scanner is total: malformed quoting never raises, every input string
produces some list of rows. Empty lines and lines whose fields are all empty
are dropped rather than emitted as empty rows.
"""

__all__ = [
    "IngestError",
    "EmptyInputError",
    "InsufficientRowsError",
    "PREVIEW_SAMPLE_SIZE",
    "parse_line",
    "tokenize",
    "preview_csv",
]

PREVIEW_SAMPLE_SIZE = 3

_LINE_BREAK = re.compile(r"\r\n|\r|\n")


class IngestError(Exception):
    """Base class for fatal ingestion errors."""


class EmptyInputError(IngestError):
    """Raised when the input yields no rows at all."""


class InsufficientRowsError(IngestError):
    """Raised when there is no data row after the header."""


def parse_line(line: str) -> list[str]:
    """Split one CSV line into trimmed fields.

    A doubled quote inside a quoted section emits one literal quote; a comma
    ends the current field only outside quotes.

    >>> parse_line('A,"B, with comma","C ""quoted"" text"')
    ['A', 'B, with comma', 'C "quoted" text']
    """
    fields: list[str] = []
    current: list[str] = []
    in_quotes = False
    i = 0
    n = len(line)
    while i < n:
        char = line[i]
        if char == '"':
            if in_quotes and i + 1 < n and line[i + 1] == '"':
                current.append('"')
                i += 1
            else:
                in_quotes = not in_quotes
        elif char == "," and not in_quotes:
            fields.append("".join(current).strip())
            current = []
        else:
            current.append(char)
        i += 1
    fields.append("".join(current).strip())
    return fields


def tokenize(text: str) -> list[list[str]]:
    """Lex a CSV blob into rows of string fields."""
    rows: list[list[str]] = []
    for line in _LINE_BREAK.split(text):
        if not line.strip():
            continue
        fields = parse_line(line)
        if not any(fields):
            continue
        rows.append(fields)
    return rows


def preview_csv(text: str, sample_size: int = PREVIEW_SAMPLE_SIZE) -> CsvPreview:
    """Headers, the first ``sample_size`` data rows and the data row count.

    Raises:
        EmptyInputError: when the text tokenizes to zero rows
    """
    rows = tokenize(text)
    if not rows:
        raise EmptyInputError("CSV input is empty")
    return CsvPreview(
        headers=rows[0],
        sample_rows=rows[1 : 1 + sample_size],
        row_count=len(rows) - 1,
    )
