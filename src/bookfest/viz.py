from __future__ import annotations
import os
from typing import Iterable, Optional, Tuple
import pandas as pd
import matplotlib.pyplot as plt

def _ensure_dir(p: Optional[str]) -> None:
    if p:
        d = os.path.dirname(p)
        if d and not os.path.exists(d):
            os.makedirs(d, exist_ok=True)

def _require(df: pd.DataFrame, required: Iterable[str], name: str) -> None:
    missing = set(required) - set(df.columns)
    if missing:
        raise ValueError(f"{name} is missing columns: {missing}")

def _finish(fig: plt.Figure, out_path: Optional[str], show: bool) -> Optional[str]:
    fig.tight_layout()
    saved = None
    if out_path:
        _ensure_dir(out_path)
        fig.savefig(out_path, dpi=150, bbox_inches="tight")
        saved = out_path
    if show:
        plt.show()
    else:
        plt.close(fig)
    return saved


def plot_keyword_share(
    summary: pd.DataFrame,
    out_path: Optional[str] = None,
    show: bool = False,
    *,
    label: str = "keyword",
    title: Optional[str] = None,
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    """
    Line chart of the yearly share of tagged words (in %).

    Expects the output of `metrics.keyword_share`: ['year','tagged_sum','year_total','share'].
    """
    _require(summary, {"year", "share"}, "summary")
    data = summary.sort_values("year")

    fig, ax = plt.subplots(figsize=(9, 4))
    ax.plot(data["year"].to_numpy(), (data["share"] * 100).to_numpy(),
            marker="o", linewidth=1.8, label=label)
    ax.set_title(title or f"Share of {label} words in event descriptions")
    ax.set_xlabel("Year")
    ax.set_ylabel("% of all words")
    ax.set_ylim(bottom=0)
    ax.legend()

    return fig, ax, _finish(fig, out_path, show)


def plot_top_words(
    top: pd.DataFrame,
    out_path: Optional[str] = None,
    show: bool = False,
    *,
    title: str = "Most common words",
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    """Horizontal bars for ['word','n'] (most frequent on top)."""
    _require(top, {"word", "n"}, "top")
    data = top.sort_values("n")

    fig, ax = plt.subplots(figsize=(7, max(3.0, 0.35 * len(data) + 1)))
    ax.barh(data["word"].astype(str).to_numpy(), data["n"].to_numpy())
    ax.set_title(title)
    ax.set_xlabel("Count")

    return fig, ax, _finish(fig, out_path, show)


def plot_gender_share(
    shares: pd.DataFrame,
    out_path: Optional[str] = None,
    show: bool = False,
) -> Tuple[plt.Figure, plt.Axes, Optional[str]]:
    """Female share of artists with a known gender, by year (from `metrics.gender_share_by_year`)."""
    _require(shares, {"year", "female_share"}, "shares")
    data = shares.sort_values("year")

    fig, ax = plt.subplots(figsize=(9, 4))
    ax.plot(data["year"].to_numpy(), (data["female_share"] * 100).to_numpy(),
            marker="o", linewidth=1.8)
    ax.axhline(50, linestyle="--", linewidth=0.8, alpha=0.6)
    ax.set_title("Female artists (% of artists with an inferred gender)")
    ax.set_xlabel("Year")
    ax.set_ylabel("% female")
    ax.set_ylim(0, 100)

    return fig, ax, _finish(fig, out_path, show)


def save_table(
    df: pd.DataFrame,
    out_csv_path: Optional[str] = None,
    required: Iterable[str] = (),
) -> pd.DataFrame:
    """
    Validate and (optionally) save a result table as CSV. Returns the table
    so it can be displayed in the walkthrough.
    """
    _require(df, required, "table")
    if out_csv_path:
        _ensure_dir(out_csv_path)
        df.to_csv(out_csv_path, index=False)
    return df
