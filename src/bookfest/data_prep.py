# src/bookfest/data_prep.py
from __future__ import annotations
import logging
import re
from typing import Iterable, Iterator, List, Optional, Sequence, Tuple

import pandas as pd

from .config import APOSTROPHE_PATTERNS, MARKUP_PATTERNS, OPTIONAL_COLUMNS, REQUIRED_COLUMNS, STOP_WORDS
from .exceptions import DataLoadError

logger = logging.getLogger(__name__)

# words keep inner apostrophes ("women's", "don't"); punctuation never joins a token
WORD_RX = re.compile(r"\w+(?:['’]\w+)*")
POSSESSIVE_RX = re.compile(r"['’]s?$")


def _compile(patterns: Iterable[str]) -> Optional[re.Pattern]:
    patterns = [p for p in patterns if p]
    if not patterns:
        return None
    return re.compile("|".join(f"(?:{p})" for p in patterns), re.IGNORECASE)


# ----------------------------
# Loader
# ----------------------------
def load_events(path: str) -> pd.DataFrame:
    """
    Load the events CSV and normalize column names:
      description, year (required), artist, genre (optional)
    (case-insensitive). Missing optional columns are added as empty.
    `year` becomes a nullable Int64; unparseable years turn into <NA>.
    """
    try:
        df = pd.read_csv(path)
    except (OSError, ValueError) as exc:
        raise DataLoadError(path, str(exc)) from exc

    cols = {c.strip().lower(): c for c in df.columns}
    missing = [r for r in REQUIRED_COLUMNS if r not in cols]
    if missing:
        raise DataLoadError(path, f"missing required columns {missing}; found {list(df.columns)}")

    df = df.rename(columns={cols[c]: c for c in (*REQUIRED_COLUMNS, *OPTIONAL_COLUMNS) if c in cols})
    for c in OPTIONAL_COLUMNS:
        if c not in df.columns:
            df[c] = pd.NA

    df["year"] = coerce_years(df["year"])
    bad = int(df["year"].isna().sum())
    if bad:
        logger.warning("%d of %d rows in %s have no usable year", bad, len(df), path)
    logger.info("Loaded %d events from %s", len(df), path)
    return df


def coerce_years(values: pd.Series) -> pd.Series:
    """Numeric, whole-number years as Int64; anything else becomes <NA>."""
    num = pd.to_numeric(values, errors="coerce").astype("float64")
    num = num.where(num % 1 == 0)
    return num.astype("Int64")


def select_columns(events: pd.DataFrame, columns: Sequence[str] = ("description", "year", "artist", "genre")) -> pd.DataFrame:
    missing = [c for c in columns if c not in events.columns]
    if missing:
        raise ValueError(f"events is missing columns: {missing}")
    return events.loc[:, list(columns)].copy()


def first_names(events: pd.DataFrame, column: str = "artist") -> pd.Series:
    """First word of each artist name, title-cased; <NA> where the name is blank."""
    names = events[column].astype("string").str.strip()
    first = names.str.split().str[0].str.title()
    return first.rename("first_name")


# ----------------------------
# Tokenizer / cleaner
# ----------------------------
def strip_markup(
    text: str,
    patterns: Iterable[str] = MARKUP_PATTERNS,
    apostrophes: Iterable[str] = APOSTROPHE_PATTERNS,
) -> str:
    """
    Decode apostrophe entities to "'", then remove every markup pattern.
    Markup matches are replaced with a space so "one<br>two" still splits
    into two words, while "Women&rsquo;s" stays one word.
    """
    rx = _compile(apostrophes)
    if rx is not None:
        text = rx.sub("'", text)
    rx = _compile(patterns)
    if rx is None:
        return text
    return rx.sub(" ", text)


def _is_stop(tok: str, stop_words: Iterable[str]) -> bool:
    if tok in stop_words:
        return True
    bare = POSSESSIVE_RX.sub("", tok)
    return bare != tok and bare in stop_words


def tokenize(
    text: str,
    stop_words: Iterable[str] = STOP_WORDS,
    patterns: Iterable[str] = MARKUP_PATTERNS,
    apostrophes: Iterable[str] = APOSTROPHE_PATTERNS,
) -> List[str]:
    """
    Turn one description into content words:
      1. decode apostrophe entities, strip markup patterns
      2. lowercase
      3. split on word boundaries
      4. drop stop words (also after removing a trailing possessive 's)
         and tokens without any letter
    """
    if not isinstance(text, str) or not text.strip():
        return []
    stop_words = stop_words if isinstance(stop_words, (set, frozenset)) else set(stop_words)
    s = strip_markup(text, patterns, apostrophes).lower()
    out = []
    for tok in WORD_RX.findall(s):
        if _is_stop(tok, stop_words):
            continue
        if not any(ch.isalpha() for ch in tok):
            continue
        out.append(tok)
    return out


def iter_year_tokens(
    events: pd.DataFrame,
    stop_words: Iterable[str] = STOP_WORDS,
    patterns: Iterable[str] = MARKUP_PATTERNS,
    apostrophes: Iterable[str] = APOSTROPHE_PATTERNS,
) -> Iterator[Tuple[int, str]]:
    """
    Lazily yield one (year, word) pair per retained token.

    Rows without a whole-number year or without description text are
    skipped. Each call starts a fresh pass over `events`.
    """
    missing = [c for c in REQUIRED_COLUMNS if c not in events.columns]
    if missing:
        raise ValueError(f"events is missing columns: {missing}")

    stop_words = frozenset(stop_words)
    patterns = list(patterns)
    apostrophes = list(apostrophes)
    years = coerce_years(events["year"])
    skipped = 0
    for year, text in zip(years, events["description"]):
        if pd.isna(year) or not isinstance(text, str) or not text.strip():
            skipped += 1
            continue
        for word in tokenize(text, stop_words=stop_words, patterns=patterns, apostrophes=apostrophes):
            yield int(year), word
    if skipped:
        logger.warning("Skipped %d events with no year or description", skipped)


def tokenize_events(
    events: pd.DataFrame,
    stop_words: Iterable[str] = STOP_WORDS,
    patterns: Iterable[str] = MARKUP_PATTERNS,
    apostrophes: Iterable[str] = APOSTROPHE_PATTERNS,
) -> pd.DataFrame:
    """Materialized token table with columns year, word."""
    rows = list(iter_year_tokens(
        events, stop_words=stop_words, patterns=patterns, apostrophes=apostrophes,
    ))
    tokens = pd.DataFrame(rows, columns=["year", "word"])
    tokens["year"] = tokens["year"].astype("int64")
    tokens["word"] = tokens["word"].astype(object)
    logger.debug("Tokenized %d events into %d tokens", len(events), len(tokens))
    return tokens
