"""Tests for loading events and tokenizing descriptions."""

import pandas as pd
import pytest

from bookfest.config import MARKUP_PATTERNS, STOP_WORDS
from bookfest.data_prep import (
    coerce_years,
    first_names,
    iter_year_tokens,
    load_events,
    select_columns,
    strip_markup,
    tokenize,
    tokenize_events,
)
from bookfest.exceptions import DataLoadError


class TestStripMarkup:
    def test_tags_and_entities_removed(self):
        out = strip_markup("<p>Women &amp; feminism</p>")
        assert "<" not in out and "&" not in out
        assert out.split() == ["Women", "feminism"]

    def test_entity_without_semicolon_survives(self):
        assert "&amp" in strip_markup("poetry &amp prose")

    def test_removed_markup_does_not_glue_words(self):
        assert strip_markup("one<br>two").split() == ["one", "two"]

    def test_custom_pattern_list(self):
        assert strip_markup("hello [[x]] world", patterns=[r"\[\[x\]\]"]).split() == ["hello", "world"]

    def test_empty_pattern_list_is_noop(self):
        assert strip_markup("<p>hi</p>", patterns=[]) == "<p>hi</p>"

    def test_apostrophe_entities_decoded(self):
        for encoded in ("Women&rsquo;s", "Women&#39;s", "Women&#039;s", "Women&apos;s", "Women&#8217;s"):
            assert strip_markup(encoded) == "Women's"

    def test_apostrophe_list_is_configurable(self):
        assert strip_markup("Women&#39;s", apostrophes=[]).split() == ["Women", "s"]


class TestTokenize:
    def test_markup_example(self):
        assert tokenize("<p>Women &amp; feminism</p>") == ["women", "feminism"]

    def test_lowercases_and_drops_punctuation(self):
        assert tokenize("Poetry, Prose; DRAMA!") == ["poetry", "prose", "drama"]

    def test_stop_words_dropped(self):
        assert tokenize("the history of the novel") == ["history", "novel"]

    def test_possessive_of_stop_word_dropped(self):
        assert tokenize("it's a novel") == ["novel"]

    def test_possessive_of_content_word_kept(self):
        assert tokenize("women's voices") == ["women's", "voices"]

    def test_non_alphabetic_tokens_dropped(self):
        assert tokenize("2012 festival 3d 42") == ["festival", "3d"]

    def test_encoded_apostrophe_matches_plain(self):
        assert tokenize("Women&#39;s history") == tokenize("Women's history") == ["women's", "history"]
        encoded = tokenize("Women&rsquo;s history and don&rsquo;t miss it")
        assert encoded == tokenize("Women's history and don't miss it")
        assert "s" not in encoded and "t" not in encoded

    def test_encoded_possessive_of_stop_word_dropped(self):
        assert tokenize("it&rsquo;s a novel") == ["novel"]

    def test_leftover_entity_fragment_reaches_tokens(self):
        assert "amp" in tokenize("poetry &amp prose")

    def test_blank_and_missing_text(self):
        assert tokenize("") == []
        assert tokenize("   ") == []
        assert tokenize(None) == []
        assert tokenize(float("nan")) == []

    def test_custom_stop_words(self):
        assert tokenize("poetry and prose", stop_words={"poetry"}) == ["and", "prose"]

    def test_default_stop_words_are_english(self):
        assert "the" in STOP_WORDS and "women" not in STOP_WORDS


class TestIterYearTokens:
    def test_pairs_carry_source_year(self, events):
        pairs = list(iter_year_tokens(events))
        assert (2012, "women") in pairs
        assert (2013, "women's") in pairs
        assert (2014, "graphic") in pairs

    def test_rows_without_year_or_text_skipped(self, events):
        pairs = list(iter_year_tokens(events))
        assert "workshop" not in {w for _, w in pairs}
        assert {y for y, _ in pairs} == {2012, 2013, 2014}

    def test_restartable(self, events):
        assert list(iter_year_tokens(events)) == list(iter_year_tokens(events))

    def test_is_lazy(self, events):
        gen = iter_year_tokens(events)
        assert next(gen) == (2012, "women")

    def test_missing_column_raises(self):
        with pytest.raises(ValueError, match="missing"):
            list(iter_year_tokens(pd.DataFrame({"description": ["x"]})))

    def test_tokenize_events_frame(self, events):
        tokens = tokenize_events(events)
        assert list(tokens.columns) == ["year", "word"]
        assert tokens["year"].dtype == "int64"
        assert len(tokens) == len(list(iter_year_tokens(events)))

    def test_tokenize_events_empty(self):
        tokens = tokenize_events(pd.DataFrame({"description": [], "year": []}))
        assert tokens.empty
        assert list(tokens.columns) == ["year", "word"]

    def test_patterns_passed_through(self, events):
        words = {w for _, w in iter_year_tokens(events, patterns=[])}
        assert "p" in words or "amp" in words
        assert "p" not in {w for _, w in iter_year_tokens(events, patterns=MARKUP_PATTERNS)}


class TestLoadEvents:
    def test_normalizes_columns(self, events_csv):
        df = load_events(events_csv)
        assert {"description", "year", "artist", "genre"} <= set(df.columns)
        assert str(df["year"].dtype) == "Int64"

    def test_bad_year_becomes_na(self, events_csv):
        df = load_events(events_csv)
        assert df["year"].isna().sum() == 1

    def test_optional_columns_added(self, tmp_path):
        path = tmp_path / "min.csv"
        pd.DataFrame({"description": ["a book"], "year": [2012]}).to_csv(path, index=False)
        df = load_events(str(path))
        assert "artist" in df.columns and "genre" in df.columns
        assert df["genre"].isna().all()

    def test_missing_file(self, tmp_path):
        with pytest.raises(DataLoadError) as exc:
            load_events(str(tmp_path / "nope.csv"))
        assert "nope.csv" in str(exc.value)

    def test_missing_required_column(self, tmp_path):
        path = tmp_path / "bad.csv"
        pd.DataFrame({"description": ["x"]}).to_csv(path, index=False)
        with pytest.raises(DataLoadError, match="Cannot load events"):
            load_events(str(path))


class TestHelpers:
    def test_coerce_years(self):
        out = coerce_years(pd.Series([2012, "2013", "x", 2014.5, None]))
        assert out.tolist()[:2] == [2012, 2013]
        assert out.isna().tolist() == [False, False, True, True, True]

    def test_select_columns(self, events):
        assert list(select_columns(events, ["year", "genre"]).columns) == ["year", "genre"]
        with pytest.raises(ValueError):
            select_columns(events, ["venue"])

    def test_first_names(self, events):
        names = first_names(events)
        assert names.iloc[0] == "Jane"
        assert names.iloc[1] == "John"
        assert pd.isna(names.iloc[4])
        assert pd.isna(names.iloc[5])
