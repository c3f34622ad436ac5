from .reader import (
    EmptyInputError,
    IngestError,
    InsufficientRowsError,
    parse_line,
    preview_csv,
    tokenize,
)

__all__ = [
    "IngestError",
    "EmptyInputError",
    "InsufficientRowsError",
    "parse_line",
    "preview_csv",
    "tokenize",
]
