"""Unit tests for the header normalizer."""

import pytest
from prometheus_client import REGISTRY
from structlog.testing import capture_logs

from header_fanout.config import FanoutConfig
from header_fanout.core.normalizer import HeaderNormalizer, fix_multiple_set_cookie
from header_fanout.exceptions import CapacityExceededError
from header_fanout.models import FanoutOutcome
from header_fanout.utils.headers import HeaderCollection, count_values


def _sample(name: str, labels: dict[str, str] | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels or {}) or 0.0


class TestFix:
    """Tests for HeaderNormalizer.fix."""

    def test_fans_out_three_cookies(self, normalizer: HeaderNormalizer):
        """Three values should land under three distinct spellings, in order."""
        headers: HeaderCollection = {
            "Set-Cookie": ["first=tj", "last=holowaychuk", "pet=tobi"],
        }

        result = normalizer.fix(headers)

        assert result is None
        assert headers == {
            "set-cookie": ["first=tj"],
            "Set-cookie": ["last=holowaychuk"],
            "sEt-cookie": ["pet=tobi"],
        }

    def test_merges_case_distinct_keys_in_first_seen_order(self, normalizer: HeaderNormalizer):
        """Values under several spellings should be gathered key by key."""
        headers: HeaderCollection = {
            "Set-Cookie": ["first=tj", "last=holowaychuk"],
            "set-cookie": ["pet=tobi"],
        }

        normalizer.fix(headers)

        assert len(headers) == 3
        assert headers["set-cookie"] == ["first=tj"]
        assert headers["Set-cookie"] == ["last=holowaychuk"]
        assert headers["sEt-cookie"] == ["pet=tobi"]

    def test_single_value_moves_to_lowercase_key(self, normalizer: HeaderNormalizer):
        """One value should be stored under the lowercase spelling."""
        headers: HeaderCollection = {"SET-COOKIE": ["session=abc"]}

        normalizer.fix(headers)

        assert headers == {"set-cookie": ["session=abc"]}

    def test_no_matching_header_is_noop(self, normalizer: HeaderNormalizer):
        """A collection without the target should be left alone."""
        headers: HeaderCollection = {"Content-Type": ["text/html"], "Vary": ["Accept"]}

        normalizer.fix(headers)

        assert headers == {"Content-Type": ["text/html"], "Vary": ["Accept"]}
        assert list(headers) == ["Content-Type", "Vary"]

    def test_empty_collection(self, normalizer: HeaderNormalizer):
        """An empty collection should stay empty."""
        headers: HeaderCollection = {}

        normalizer.fix(headers)

        assert headers == {}

    def test_empty_matching_entry_is_removed(self, normalizer: HeaderNormalizer):
        """A matching key with no values should be dropped."""
        headers: HeaderCollection = {"Set-Cookie": [], "Vary": ["Accept"]}

        normalizer.fix(headers)

        assert headers == {"Vary": ["Accept"]}

    def test_unrelated_headers_untouched(
        self, normalizer: HeaderNormalizer, cookie_headers: HeaderCollection
    ):
        """Other headers should keep their values and relative order."""
        normalizer.fix(cookie_headers)

        assert cookie_headers["Content-Type"] == ["text/html"]
        assert cookie_headers["Cache-Control"] == ["no-cache"]
        unrelated = [key for key in cookie_headers if key.lower() != "set-cookie"]
        assert unrelated == ["Content-Type", "Cache-Control"]

    def test_unrelated_multi_valued_headers_untouched(self, normalizer: HeaderNormalizer):
        """Only the target header should be fanned out."""
        headers: HeaderCollection = {
            "Vary": ["Accept", "Origin"],
            "Set-Cookie": ["a=1", "b=2"],
        }

        normalizer.fix(headers)

        assert headers["Vary"] == ["Accept", "Origin"]

    def test_idempotent(self, normalizer: HeaderNormalizer, cookie_headers: HeaderCollection):
        """Running fix on its own output should change nothing."""
        normalizer.fix(cookie_headers)
        once = {key: list(values) for key, values in cookie_headers.items()}

        normalizer.fix(cookie_headers)

        assert cookie_headers == once

    def test_idempotent_single_value(self, normalizer: HeaderNormalizer):
        """A normalized single value should settle immediately."""
        headers: HeaderCollection = {"Set-Cookie": ["a=1"]}

        normalizer.fix(headers)
        normalizer.fix(headers)

        assert headers == {"set-cookie": ["a=1"]}

    def test_every_matching_key_single_valued(
        self, normalizer: HeaderNormalizer, cookie_headers: HeaderCollection
    ):
        """No matching key should hold more than one value afterwards."""
        normalizer.fix(cookie_headers)

        matching = {k: v for k, v in cookie_headers.items() if k.lower() == "set-cookie"}
        assert len(matching) == 3
        assert all(len(values) == 1 for values in matching.values())


class TestTargets:
    """Tests for non-default target headers."""

    def test_custom_target(self):
        """Any header name can be the target."""
        normalizer = HeaderNormalizer(target="Link")
        headers: HeaderCollection = {
            "Link": ["</a>; rel=preload", "</b>; rel=preload"],
            "Set-Cookie": ["a=1", "b=2"],
        }

        normalizer.fix(headers)

        assert headers["link"] == ["</a>; rel=preload"]
        assert headers["Link"] == ["</b>; rel=preload"]
        assert headers["Set-Cookie"] == ["a=1", "b=2"]

    def test_target_is_lowercased(self):
        """The target should be stored lowercased."""
        assert HeaderNormalizer(target="Set-Cookie").target == "set-cookie"

    def test_from_config(self):
        """Should take target and overflow policy from config."""
        config = FanoutConfig(target_header="X-Trace", overflow_policy="raise")

        normalizer = HeaderNormalizer.from_config(config)

        assert normalizer.target == "x-trace"
        assert normalizer.overflow_policy == "raise"
        assert normalizer.capacity == 64

    def test_invalid_overflow_policy_rejected(self):
        """A misspelled policy should not silently fall back to wrapping."""
        with pytest.raises(ValueError, match="Invalid overflow policy: 'rasie'"):
            HeaderNormalizer(overflow_policy="rasie")


class TestCapacityOverflow:
    """Tests for value counts beyond the number of case variants."""

    def test_wrap_collides_without_error(self):
        """Extra values should overwrite earlier keys and not raise."""
        normalizer = HeaderNormalizer(target="ab")
        headers: HeaderCollection = {"AB": ["v0", "v1", "v2", "v3", "v4", "v5"]}

        normalizer.fix(headers)

        # Positions 4 and 5 wrap onto indices 0 and 1
        assert headers == {"ab": ["v4"], "Ab": ["v5"], "aB": ["v2"], "AB": ["v3"]}

    def test_wrap_logs_warning(self):
        """Overflow should be logged as a warning."""
        normalizer = HeaderNormalizer(target="ab")
        headers: HeaderCollection = {"ab": ["1", "2", "3", "4", "5"]}

        with capture_logs() as logs:
            normalizer.fix(headers)

        warnings = [log for log in logs if log["event"] == "headers.fanout.capacity_exceeded"]
        assert len(warnings) == 1
        assert warnings[0]["log_level"] == "warning"
        assert warnings[0]["value_count"] == 5
        assert warnings[0]["capacity"] == 4
        assert warnings[0]["collisions"] == 1

    def test_name_without_letters_collapses_to_one_key(self):
        """A letterless target can only ever hold the last value."""
        normalizer = HeaderNormalizer(target="123")
        headers: HeaderCollection = {"123": ["a", "b", "c"]}

        report = normalizer.fanout(headers)

        assert headers == {"123": ["c"]}
        assert report.collisions == 2
        assert report.key_count == 1

    def test_raise_policy_rejects_before_mutation(self):
        """Strict mode should raise and leave the headers as they were."""
        normalizer = HeaderNormalizer(target="ab", overflow_policy="raise")
        headers: HeaderCollection = {"Ab": ["1", "2", "3"], "aB": ["4", "5"]}
        original = {key: list(values) for key, values in headers.items()}

        with pytest.raises(CapacityExceededError) as exc_info:
            normalizer.fix(headers)

        assert headers == original
        error = exc_info.value
        assert error.header == "ab"
        assert error.value_count == 5
        assert error.capacity == 4

    def test_raise_policy_allows_full_capacity(self):
        """Exactly capacity values should be accepted in strict mode."""
        normalizer = HeaderNormalizer(target="ab", overflow_policy="raise")
        headers: HeaderCollection = {"ab": ["1", "2", "3", "4"]}

        normalizer.fix(headers)

        assert len(headers) == 4


class TestFanoutReport:
    """Tests for HeaderNormalizer.fanout reporting."""

    def test_report_fanned_out(
        self, normalizer: HeaderNormalizer, cookie_headers: HeaderCollection
    ):
        """Several values should be reported as fanned out."""
        report = normalizer.fanout(cookie_headers)

        assert report.outcome == FanoutOutcome.FANNED_OUT
        assert report.header == "set-cookie"
        assert report.value_count == 3
        assert report.key_count == 3
        assert report.capacity == 512
        assert report.collisions == 0
        assert not report.overflowed

    def test_report_normalized(self, normalizer: HeaderNormalizer):
        """One value should be reported as normalized."""
        report = normalizer.fanout({"Set-Cookie": ["a=1"]})

        assert report.outcome == FanoutOutcome.NORMALIZED
        assert report.key_count == 1

    def test_report_noop(self, normalizer: HeaderNormalizer):
        """No values should be reported as noop."""
        report = normalizer.fanout({"Vary": ["Accept"]})

        assert report.outcome == FanoutOutcome.NOOP
        assert report.value_count == 0
        assert report.key_count == 0

    def test_report_overflow(self):
        """Lost values should be reported as overflow."""
        report = HeaderNormalizer(target="a").fanout({"a": ["1", "2", "3"]})

        assert report.outcome == FanoutOutcome.OVERFLOW
        assert report.capacity == 2
        assert report.collisions == 1
        assert report.key_count == 2
        assert report.overflowed

    def test_report_matches_collection(
        self, normalizer: HeaderNormalizer, cookie_headers: HeaderCollection
    ):
        """key_count should equal the matching keys left in the collection."""
        report = normalizer.fanout(cookie_headers)

        matching = [key for key in cookie_headers if key.lower() == "set-cookie"]
        assert report.key_count == len(matching)
        assert count_values(cookie_headers, "set-cookie") == report.key_count

    def test_debug_log_on_fanout(self, normalizer: HeaderNormalizer):
        """A fan-out should emit a debug event naming the source keys."""
        with capture_logs() as logs:
            normalizer.fix({"Set-Cookie": ["a=1"], "set-cookie": ["b=2"]})

        events = [log for log in logs if log["event"] == "headers.fanout"]
        assert len(events) == 1
        assert events[0]["source_keys"] == ["Set-Cookie", "set-cookie"]
        assert events[0]["value_count"] == 2

    def test_metrics_recorded(self, normalizer: HeaderNormalizer):
        """Each pass should be counted by outcome."""
        before_passes = _sample("header_fanout_passes_total", {"outcome": "fanned_out"})
        before_values = _sample("header_fanout_values_total")

        normalizer.fix({"Set-Cookie": ["a=1", "b=2"]})

        after_passes = _sample("header_fanout_passes_total", {"outcome": "fanned_out"})
        after_values = _sample("header_fanout_values_total")
        assert after_passes - before_passes == 1
        assert after_values - before_values == 2

    def test_collision_metric_recorded(self):
        """Overflowing passes should count lost values."""
        before = _sample("header_fanout_collisions_total")

        HeaderNormalizer(target="a").fix({"a": ["1", "2", "3", "4", "5"]})

        assert _sample("header_fanout_collisions_total") - before == 3


class TestFixMultipleSetCookie:
    """Tests for the module-level shortcut."""

    def test_fixes_set_cookie(self):
        """Should behave like a default normalizer."""
        headers: HeaderCollection = {
            "Set-Cookie": ["first=tj", "last=holowaychuk"],
            "set-cookie": ["pet=tobi"],
        }

        fix_multiple_set_cookie(headers)

        assert len(headers) == 3
        assert headers["Set-cookie"] == ["last=holowaychuk"]
        assert headers["sEt-cookie"] == ["pet=tobi"]
        assert headers["set-cookie"] == ["first=tj"]
