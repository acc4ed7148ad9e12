"""Shared test fixtures for bookfest tests."""

import matplotlib

matplotlib.use("Agg")

import pandas as pd
import pytest


@pytest.fixture
def events():
    """Small events table covering markup, leaks, blanks and bad years."""
    return pd.DataFrame({
        "description": [
            "<p>Women &amp; feminism</p>",
            "A debut novel about racism &amp the history of racist laws.",
            "Poetry, history and women's voices.",
            None,
            "Novel writing workshop&nbsp;for beginners",
            "Graphic novel launch",
        ],
        "year": [2012, 2012, 2013, 2013, "unknown", 2014],
        "artist": ["Jane Smith", "john doe", "Zadie Smith", "Ali Smith", None, ""],
        "genre": ["Non-fiction", "Fiction", "Poetry", None, "Workshop", "Fiction"],
    })


@pytest.fixture
def example_tokens():
    """Four tokens over two years; 'women' only appears in 2012."""
    return [(2012, "women"), (2012, "women"), (2012, "book"), (2013, "book")]


@pytest.fixture
def events_csv(tmp_path, events):
    path = tmp_path / "events.csv"
    events.rename(columns={"description": "Description", "year": "Year"}).to_csv(path, index=False)
    return str(path)


@pytest.fixture
def fake_lookup():
    """Gender lookup stand-in that records every call."""
    table = {
        "Jane": ("female", 0.99, 0.01),
        "John": ("male", 0.01, 0.99),
        "Zadie": ("female", 1.0, 0.0),
        "Ali": ("unknown", 0.5, 0.5),
    }
    calls = []

    def lookup(name, year_min, year_max):
        calls.append((name, year_min, year_max))
        g, pf, pm = table.get(name, ("unknown", 0.5, 0.5))
        return {"gender": g, "proportion_female": pf, "proportion_male": pm}

    lookup.calls = calls
    return lookup
