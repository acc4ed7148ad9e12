# src/bookfest/gender.py
"""
Name -> gender lookup.

The tutorial treats gender inference as an outside service: give it a first
name and a birth-year window, get back a label plus female/male proportions.
`openai_gender_call` is the default service; any callable with the same
signature can be passed to `infer_gender` instead.
"""
import json
import logging
import os
import random
import re
import time
from typing import Any, Callable, Dict, Iterable, Optional

import pandas as pd
from openai import APIError, OpenAI, RateLimitError

from .config import GENDER_YEAR_RANGE
from .data_prep import first_names
from .exceptions import ExternalLookupError

logger = logging.getLogger(__name__)

LookupFn = Callable[[str, int, int], Dict[str, Any]]

GENDER_LABELS = ("female", "male", "unknown")

GENDER_SCHEMA: Dict = {
    "name": "gender_schema",
    "schema": {
        "type": "object",
        "additionalProperties": False,
        "properties": {
            "gender": {"type": "string", "enum": list(GENDER_LABELS)},
            "proportion_female": {"type": "number"},
            "proportion_male": {"type": "number"},
        },
        "required": ["gender", "proportion_female", "proportion_male"],
    },
}

_SYSTEM = (
    "You estimate the gender distribution of a given first name among people born "
    "in the given year range, as recorded in historical birth registers. "
    "Proportions must be between 0 and 1 and sum to 1. "
    "Use 'unknown' with 0.5/0.5 if the name is not a recognisable first name. "
    "Your output MUST be valid JSON and should match the provided JSON schema."
)

DEFAULT_MODEL = "gpt-4o-mini"

_client: Optional[OpenAI] = None
def _get_client(api_key: Optional[str] = None) -> OpenAI:
    global _client
    if api_key:  # explicit key wins
        return OpenAI(api_key=api_key)
    if _client is None:
        key = os.getenv("OPENAI_API_KEY")
        if not key:
            raise ExternalLookupError("Set OPENAI_API_KEY or pass api_key to openai_gender_call().")
        _client = OpenAI(api_key=key)
    return _client


def build_gender_prompt(name: str, year_min: int, year_max: int) -> str:
    return f"First name: {name}\nBirth years: {year_min}-{year_max}\n\nJSON only:"


def parse_gender_response(text: str) -> Dict[str, Any]:
    """Parse and validate one JSON answer; raises ExternalLookupError on anything off."""
    try:
        js = json.loads(text)
    except (TypeError, ValueError):
        m = re.search(r"\{.*\}", text or "", re.S)
        if not m:
            raise ExternalLookupError("Gender lookup returned no JSON", details={"response": str(text)[:200]})
        try:
            js = json.loads(m.group(0))
        except ValueError as exc:
            raise ExternalLookupError("Gender lookup returned invalid JSON", details={"response": str(text)[:200]}) from exc

    gender = str(js.get("gender", "")).lower() if isinstance(js, dict) else ""
    if gender not in GENDER_LABELS:
        raise ExternalLookupError("Gender lookup returned an unknown label", details={"gender": gender})
    try:
        pf = float(js["proportion_female"])
        pm = float(js["proportion_male"])
    except (KeyError, TypeError, ValueError) as exc:
        raise ExternalLookupError("Gender lookup returned bad proportions", details={"response": str(js)[:200]}) from exc
    if not (0.0 <= pf <= 1.0 and 0.0 <= pm <= 1.0):
        raise ExternalLookupError("Gender proportions out of range", details={"female": str(pf), "male": str(pm)})
    return {"gender": gender, "proportion_female": pf, "proportion_male": pm}


def openai_gender_call(
    name: str,
    year_min: int = GENDER_YEAR_RANGE[0],
    year_max: int = GENDER_YEAR_RANGE[1],
    model: Optional[str] = None,
    api_key: Optional[str] = None,
    max_attempts: int = 4,
) -> Dict[str, Any]:
    """
    Ask Chat Completions for the gender split of one first name.
    Retries rate-limit / API errors with exponential backoff, then raises
    ExternalLookupError.
    """
    client = _get_client(api_key)
    model = model or os.getenv("BOOKFEST_OPENAI_MODEL", DEFAULT_MODEL)

    for attempt in range(max_attempts):
        try:
            resp = client.chat.completions.create(
                model=model,
                temperature=0,
                response_format={"type": "json_schema", "json_schema": GENDER_SCHEMA},
                messages=[
                    {"role": "system", "content": _SYSTEM},
                    {"role": "user", "content": build_gender_prompt(name, year_min, year_max)},
                ],
            )
            return parse_gender_response(resp.choices[0].message.content)
        except (RateLimitError, APIError) as exc:
            if attempt == max_attempts - 1:
                raise ExternalLookupError(
                    f"Gender lookup failed for {name!r}",
                    details={"attempts": str(max_attempts), "reason": str(exc)},
                ) from exc
            logger.warning("Gender lookup for %r failed (attempt %d): %s", name, attempt + 1, exc)
            time.sleep(1.2 * (2 ** attempt) + random.random() * 0.4)


def infer_gender(
    names: Iterable[str],
    year_min: int = GENDER_YEAR_RANGE[0],
    year_max: int = GENDER_YEAR_RANGE[1],
    lookup_fn: Optional[LookupFn] = None,
) -> pd.DataFrame:
    """
    Look up each distinct, non-blank name once.
    Returns columns: name, gender, proportion_female, proportion_male.
    """
    lookup_fn = lookup_fn or openai_gender_call
    distinct = pd.Series(list(names), dtype="string").str.strip().dropna()
    distinct = distinct[distinct != ""].drop_duplicates()

    rows = []
    for name in distinct:
        try:
            res = lookup_fn(name, year_min, year_max)
        except ExternalLookupError:
            raise
        except Exception as exc:
            raise ExternalLookupError(f"Gender lookup failed for {name!r}", details={"reason": str(exc)}) from exc
        rows.append({
            "name": name,
            "gender": res.get("gender", "unknown"),
            "proportion_female": float(res.get("proportion_female", float("nan"))),
            "proportion_male": float(res.get("proportion_male", float("nan"))),
        })

    logger.info("Inferred gender for %d distinct names", len(rows))
    return pd.DataFrame(rows, columns=["name", "gender", "proportion_female", "proportion_male"])


def join_artist_gender(events: pd.DataFrame, genders: pd.DataFrame, column: str = "artist") -> pd.DataFrame:
    """Left-join lookup results onto events by artist first name; no match -> 'unknown'."""
    out = events.copy()
    out["first_name"] = first_names(out, column=column).astype(object)
    lookup = genders.rename(columns={"name": "first_name"}).drop_duplicates("first_name")
    lookup["first_name"] = lookup["first_name"].astype(object)
    out = out.merge(lookup, on="first_name", how="left")
    out["gender"] = out["gender"].fillna("unknown")
    return out
