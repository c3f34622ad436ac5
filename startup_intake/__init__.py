"""CSV intake pipeline for startup deal-flow exports.

Raw CSV text -> tokenized rows -> column mapping -> normalized records,
with founder extraction and a CSV re-export as the inverse direction.
"""

__version__ = "0.1.0"
