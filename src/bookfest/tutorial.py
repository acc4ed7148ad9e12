# src/bookfest/tutorial.py
"""
End-to-end walkthrough: load -> tokenize -> keyword share -> tables/charts,
plus the optional artist-gender join.
"""
from __future__ import annotations
import logging
import os
from typing import Any, Dict, Iterable, Optional

from .config import GENDER_YEAR_RANGE, KEYWORD_SETS, MARKUP_PATTERNS, RESIDUAL_BLOCKLIST, STOP_WORDS
from .data_prep import first_names, load_events, select_columns, tokenize_events
from .exceptions import ExternalLookupError
from .gender import LookupFn, infer_gender, join_artist_gender
from .metrics import (
    apply_residual_blocklist,
    count_by_year_word,
    gender_share_by_year,
    genre_counts,
    keyword_predicate,
    keyword_share,
    top_words,
)
from .viz import plot_gender_share, plot_keyword_share, plot_top_words, save_table

logger = logging.getLogger(__name__)


def _out(out_dir: Optional[str], name: str) -> Optional[str]:
    return os.path.join(out_dir, name) if out_dir else None


def run_tutorial(
    path: str,
    out_dir: Optional[str] = None,
    *,
    keyword_set: str = "gender",
    terms: Optional[Iterable[str]] = None,
    with_gender: bool = False,
    gender_lookup: Optional[LookupFn] = None,
    stop_words: Iterable[str] = STOP_WORDS,
    patterns: Iterable[str] = MARKUP_PATTERNS,
    blocklist: Iterable[str] = RESIDUAL_BLOCKLIST,
) -> Dict[str, Any]:
    """
    Run every step of the walkthrough and return the intermediate tables:
      events, tokens, counts, top_words, genres, keyword_share
      (+ artist_genders, gender_share when `with_gender` is set or a
      `gender_lookup` is passed)

    `terms` overrides the named `keyword_set`. Charts and CSVs are written to
    `out_dir` when given. If the gender lookup fails, the ExternalLookupError
    carries the tables computed so far in `.partial`.
    """
    if terms is None:
        if keyword_set not in KEYWORD_SETS:
            raise ValueError(f"Unknown keyword_set {keyword_set!r}; choose from {sorted(KEYWORD_SETS)}")
        terms = KEYWORD_SETS[keyword_set]
    label = keyword_set if terms is KEYWORD_SETS.get(keyword_set) else "custom"

    events = select_columns(load_events(path))
    tokens = tokenize_events(events, stop_words=stop_words, patterns=patterns)
    counts = apply_residual_blocklist(count_by_year_word(tokens), blocklist)

    results: Dict[str, Any] = {
        "events": events,
        "tokens": tokens,
        "counts": counts,
        "top_words": save_table(top_words(counts, n=15), _out(out_dir, "top_words.csv")),
        "genres": save_table(genre_counts(events), _out(out_dir, "genres.csv")),
        "keyword_share": save_table(
            keyword_share(tokens, keyword_predicate(terms), blocklist=blocklist),
            _out(out_dir, f"{label}_share.csv"),
        ),
    }
    plot_top_words(results["top_words"], _out(out_dir, "top_words.png"))
    plot_keyword_share(results["keyword_share"], _out(out_dir, f"{label}_share.png"), label=label)

    if with_gender or gender_lookup is not None:
        try:
            genders = infer_gender(first_names(events), *GENDER_YEAR_RANGE, lookup_fn=gender_lookup)
        except ExternalLookupError as exc:
            logger.error("Gender lookup failed; keeping keyword results: %s", exc)
            raise ExternalLookupError(exc.message, details=exc.details, partial=results) from exc
        artists = join_artist_gender(events, genders)
        results["artist_genders"] = artists
        results["gender_share"] = save_table(gender_share_by_year(artists), _out(out_dir, "artist_gender_share.csv"))
        plot_gender_share(results["gender_share"], _out(out_dir, "artist_gender_share.png"))

    logger.info("Tutorial finished for %s (%d events, %d tokens)", path, len(events), len(tokens))
    return results
