# src/bookfest/config.py
"""
Default cleaning and keyword settings.

Every stage takes these as keyword arguments, so swapping a list here (or
passing your own) changes behaviour without touching the pipeline code.
"""
from typing import Dict, FrozenSet, List, Tuple

from sklearn.feature_extraction.text import ENGLISH_STOP_WORDS

# ----------------------------
# Pass 1: markup removed before tokenizing
# ----------------------------
# Literal entities are matched with their trailing ';' only. A fragment such as
# "&amp" with the semicolon missing survives and shows up later as the token
# "amp"; RESIDUAL_BLOCKLIST catches those.
MARKUP_PATTERNS: List[str] = [
    r"<[^>]*>",          # html tags, e.g. <p>, </em>, <br/>
    r"&amp;",
    r"&lt;",
    r"&gt;",
    r"&nbsp;",
    r"&quot;",
    r"&rdquo;",
    r"&ldquo;",
    r"&ndash;",
    r"&mdash;",
    r"&hellip;",
    r"&#\d+;",           # other numeric entities, e.g. &#8212;
]

# Apostrophe entities are decoded to a plain apostrophe before MARKUP_PATTERNS
# run, so "Women&rsquo;s" tokenizes exactly like "Women's".
APOSTROPHE_PATTERNS: List[str] = [
    r"&rsquo;",
    r"&lsquo;",
    r"&apos;",
    r"&#0*39;",
    r"&#0*821[67];",     # curly quotes as numeric entities
]

# ----------------------------
# Pass 2: words dropped after counting
# ----------------------------
RESIDUAL_BLOCKLIST: FrozenSet[str] = frozenset({
    "amp", "nbsp", "quot", "lt", "gt",
    "rsquo", "lsquo", "rdquo", "ldquo",
    "ndash", "mdash", "hellip",
    "br", "em", "strong",
})

# same set CountVectorizer(stop_words="english") uses
STOP_WORDS: FrozenSet[str] = frozenset(ENGLISH_STOP_WORDS)

# ----------------------------
# Keyword sets (substring match, case-insensitive)
# ----------------------------
GENDER_TERMS: FrozenSet[str] = frozenset({
    "women", "feminist", "feminism", "gender", "harassment", "sexism", "sexist",
})
RACE_TERMS: FrozenSet[str] = frozenset({"race", "racism", "racist"})

KEYWORD_SETS: Dict[str, FrozenSet[str]] = {
    "gender": GENDER_TERMS,
    "race": RACE_TERMS,
}

# birth-year window handed to the name -> gender lookup
GENDER_YEAR_RANGE: Tuple[int, int] = (1932, 2012)

REQUIRED_COLUMNS: Tuple[str, ...] = ("description", "year")
OPTIONAL_COLUMNS: Tuple[str, ...] = ("artist", "genre")
