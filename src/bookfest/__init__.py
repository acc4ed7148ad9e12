"""Keyword trends in book-festival event descriptions."""

from .exceptions import BookfestError, DataLoadError, ExternalLookupError
from .data_prep import load_events, tokenize, tokenize_events, iter_year_tokens
from .metrics import (
    YearSummary,
    apply_residual_blocklist,
    complete_grid,
    count_by_year_word,
    keyword_predicate,
    keyword_share,
    summarize,
    tag,
)

__version__ = "0.1.0"

__all__ = [
    "BookfestError",
    "DataLoadError",
    "ExternalLookupError",
    "load_events",
    "tokenize",
    "tokenize_events",
    "iter_year_tokens",
    "YearSummary",
    "count_by_year_word",
    "apply_residual_blocklist",
    "complete_grid",
    "keyword_predicate",
    "keyword_share",
    "summarize",
    "tag",
]
