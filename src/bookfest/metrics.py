from __future__ import annotations
import logging
import re
from dataclasses import dataclass
from typing import Callable, Iterable, List, Optional, Tuple, Union

import numpy as np
import pandas as pd

from .config import RESIDUAL_BLOCKLIST

logger = logging.getLogger(__name__)

Tokens = Union[pd.DataFrame, Iterable[Tuple[int, str]]]
Predicate = Callable[[str], bool]


@dataclass(frozen=True)
class YearSummary:
    year: int
    tagged_sum: int
    year_total: int

    @property
    def share(self) -> float:
        return self.tagged_sum / self.year_total if self.year_total else 0.0


def _empty_counts() -> pd.DataFrame:
    return pd.DataFrame({
        "year": pd.Series(dtype="int64"),
        "word": pd.Series(dtype=object),
        "n": pd.Series(dtype="int64"),
    })


# ----------------------------
# Keyword predicates
# ----------------------------
def _never(word: str) -> bool:
    return False


def keyword_predicate(terms: Optional[Iterable[str]]) -> Predicate:
    """
    Case-insensitive substring match against any of `terms`
    ("women" also matches "womens"). No terms -> matches nothing.
    """
    clean = sorted({t.strip().lower() for t in (terms or ()) if t and t.strip()})
    if not clean:
        return _never
    rx = re.compile("|".join(re.escape(t) for t in clean), re.IGNORECASE)

    def predicate(word: str) -> bool:
        return bool(rx.search(str(word)))

    predicate.terms = tuple(clean)
    return predicate


# ----------------------------
# Aggregation stages
# ----------------------------
def count_by_year_word(tokens: Tokens) -> pd.DataFrame:
    """Tally tokens into one row per (year, word) with count `n`."""
    if isinstance(tokens, pd.DataFrame):
        df = tokens.loc[:, ["year", "word"]]
    else:
        df = pd.DataFrame(list(tokens), columns=["year", "word"])
    if df.empty:
        return _empty_counts()
    counts = df.groupby(["year", "word"]).size().reset_index(name="n")
    counts["year"] = counts["year"].astype("int64")
    counts["n"] = counts["n"].astype("int64")
    return counts


def apply_residual_blocklist(counts: pd.DataFrame, blocklist: Iterable[str] = RESIDUAL_BLOCKLIST) -> pd.DataFrame:
    """Drop markup leftovers (e.g. "amp", "nbsp") that survived tokenizing."""
    blocked = counts["word"].isin(set(blocklist or ()))
    if blocked.any():
        logger.debug("Residual blocklist removed %d rows", int(blocked.sum()))
    return counts.loc[~blocked].reset_index(drop=True)


def complete_grid(counts: pd.DataFrame) -> pd.DataFrame:
    """
    Give every observed year a row for every observed word, filling the
    combinations that never occurred with n = 0.
    """
    if counts.empty:
        return counts.reset_index(drop=True)
    years = sorted(counts["year"].unique())
    words = sorted(counts["word"].unique())
    idx = pd.MultiIndex.from_product([years, words], names=["year", "word"])
    grid = (counts.groupby(["year", "word"])["n"].sum()
                  .reindex(idx, fill_value=0)
                  .reset_index())
    grid["year"] = grid["year"].astype("int64")
    grid["n"] = grid["n"].astype("int64")
    return grid


def tag(counts: pd.DataFrame, predicate: Optional[Predicate]) -> pd.DataFrame:
    out = counts.copy()
    predicate = predicate or _never
    out["tagged"] = np.array([bool(predicate(w)) for w in out["word"]], dtype=bool)
    return out


def summarize(tagged: pd.DataFrame) -> List[YearSummary]:
    """
    One YearSummary per year: tagged_sum over tagged words, year_total over
    all words. Years without a tagged word keep an explicit 0.
    """
    if tagged.empty:
        return []
    per_year = (tagged.assign(tagged_n=tagged["n"].where(tagged["tagged"], 0))
                      .groupby("year")
                      .agg(tagged_sum=("tagged_n", "sum"), year_total=("n", "sum"))
                      .sort_index())
    return [
        YearSummary(year=int(y), tagged_sum=int(t), year_total=int(n))
        for y, t, n in zip(per_year.index, per_year["tagged_sum"], per_year["year_total"])
    ]


def summaries_to_frame(summaries: Iterable[YearSummary]) -> pd.DataFrame:
    rows = [
        {"year": s.year, "tagged_sum": s.tagged_sum, "year_total": s.year_total, "share": s.share}
        for s in summaries
    ]
    return pd.DataFrame(rows, columns=["year", "tagged_sum", "year_total", "share"])


def keyword_share(
    tokens: Tokens,
    predicate: Optional[Predicate],
    blocklist: Iterable[str] = RESIDUAL_BLOCKLIST,
) -> pd.DataFrame:
    """
    count -> residual blocklist -> complete grid -> tag -> summarize.

    Pass the same token table with different predicates to compare keyword
    sets; nothing is re-tokenized.
    """
    counts = complete_grid(apply_residual_blocklist(count_by_year_word(tokens), blocklist))
    summary = summaries_to_frame(summarize(tag(counts, predicate)))
    logger.info("Keyword share computed for %d years", len(summary))
    return summary


# ----------------------------
# Supporting tables
# ----------------------------
def top_words(counts: pd.DataFrame, n: int = 10, by_year: bool = False) -> pd.DataFrame:
    """Most frequent words overall, or the top `n` within each year."""
    counts = counts.loc[counts["n"] > 0]
    if by_year:
        ranked = counts.sort_values(["year", "n", "word"], ascending=[True, False, True])
        return ranked.groupby("year").head(n).reset_index(drop=True)[["year", "word", "n"]]
    totals = counts.groupby("word", as_index=False)["n"].sum()
    return totals.sort_values(["n", "word"], ascending=[False, True]).head(n).reset_index(drop=True)


def genre_counts(events: pd.DataFrame, missing_label: str = "Unknown") -> pd.DataFrame:
    """Number of events per (year, genre); blank genres are grouped under `missing_label`."""
    df = events.loc[events["year"].notna(), ["year", "genre"]].copy()
    df["genre"] = df["genre"].astype("string").str.strip().replace("", pd.NA).fillna(missing_label)
    out = df.groupby(["year", "genre"]).size().reset_index(name="events")
    out["year"] = out["year"].astype("int64")
    return out.sort_values(["year", "events", "genre"], ascending=[True, False, True]).reset_index(drop=True)


def gender_share_by_year(events: pd.DataFrame) -> pd.DataFrame:
    """
    Per year: female / male / unknown artist counts and the female share
    among artists with a known gender (NaN if none are known).
    """
    need = {"year", "gender"}
    miss = need - set(events.columns)
    if miss:
        raise ValueError(f"events is missing columns: {miss}")
    df = events.loc[events["year"].notna(), ["year", "gender"]].copy()
    df["gender"] = df["gender"].fillna("unknown")
    table = pd.crosstab(df["year"], df["gender"])
    for g in ("female", "male", "unknown"):
        if g not in table.columns:
            table[g] = 0
    table = table[["female", "male", "unknown"]]
    known = table["female"] + table["male"]
    table["female_share"] = np.where(known > 0, table["female"] / known.where(known > 0, 1), np.nan)
    out = table.reset_index()
    out.columns.name = None
    out["year"] = out["year"].astype("int64")
    return out
