"""Tests for the error hierarchy."""

from bookfest.exceptions import BookfestError, DataLoadError, ExternalLookupError


class TestBookfestError:
    def test_message_only(self):
        assert str(BookfestError("Nothing to chart")) == "Nothing to chart"

    def test_details_listed_under_message(self):
        err = BookfestError("Gender lookup failed", details={"reason": "timeout", "attempts": 4})
        assert str(err).splitlines() == ["Gender lookup failed", "  attempts: 4", "  reason: timeout"]
        assert err.details["attempts"] == "4"

    def test_error_kinds_are_distinguishable(self):
        load = DataLoadError("events.csv", "no such file")
        lookup = ExternalLookupError("service down", partial={"keyword_share": None})
        assert isinstance(load, BookfestError) and isinstance(lookup, BookfestError)
        assert not isinstance(load, ExternalLookupError)
        assert load.reason == "no such file"
        assert "  path: events.csv" in str(load).splitlines()
        assert lookup.partial == {"keyword_share": None}
