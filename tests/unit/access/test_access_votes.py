import itertools
from unittest.mock import MagicMock

import pytest

from tagflow.access import MATCHER_REGISTRY, AccessAggregator, AccessVote, TrackingMatcher, load_matchers
from tagflow.access.exceptions import MatcherLoadError, MatcherRegistrationError


def voting(vote):
    matcher = MagicMock(spec=TrackingMatcher)
    matcher.access.return_value = vote
    return matcher


class TestAccessVote:
    """Test suite for vote combination."""

    @pytest.mark.parametrize(
        "first,second,expected",
        [
            (AccessVote.FORBIDDEN, AccessVote.ALLOWED, AccessVote.FORBIDDEN),
            (AccessVote.FORBIDDEN, AccessVote.NEUTRAL, AccessVote.FORBIDDEN),
            (AccessVote.ALLOWED, AccessVote.NEUTRAL, AccessVote.ALLOWED),
            (AccessVote.NEUTRAL, AccessVote.NEUTRAL, AccessVote.NEUTRAL),
        ],
    )
    def test_or_if_precedence(self, first, second, expected):
        assert first.or_if(second) is expected
        assert second.or_if(first) is expected

    def test_predicates(self):
        assert AccessVote.FORBIDDEN.is_forbidden
        assert AccessVote.ALLOWED.is_allowed
        assert AccessVote.NEUTRAL.is_neutral
        assert not AccessVote.NEUTRAL.is_forbidden


class TestAccessAggregator:
    """Test suite for folding matcher votes."""

    def test_no_matchers_is_neutral(self):
        assert AccessAggregator().evaluate([]) is AccessVote.NEUTRAL

    def test_combine_is_order_independent(self):
        votes = [AccessVote.ALLOWED, AccessVote.NEUTRAL, AccessVote.FORBIDDEN]
        results = {AccessAggregator.combine(order) for order in itertools.permutations(votes)}
        assert results == {AccessVote.FORBIDDEN}

    def test_allowed_beats_neutral(self):
        matchers = [voting(AccessVote.NEUTRAL), voting(AccessVote.ALLOWED)]
        assert AccessAggregator().evaluate(matchers) is AccessVote.ALLOWED

    def test_every_matcher_is_consulted(self):
        """A FORBIDDEN vote does not stop the remaining matchers from voting."""
        matchers = [voting(AccessVote.FORBIDDEN), voting(AccessVote.ALLOWED)]

        assert AccessAggregator().evaluate(matchers) is AccessVote.FORBIDDEN
        for matcher in matchers:
            matcher.access.assert_called_once_with()


class TestMatcherRegistry:
    """Test suite for matcher registration and loading."""

    def test_subclass_with_name_is_registered(self):
        class PreviewMatcher(TrackingMatcher):
            matcher_name = "preview"

        assert MATCHER_REGISTRY["preview"] is PreviewMatcher

    def test_subclass_without_name_is_not_registered(self):
        before = dict(MATCHER_REGISTRY)

        class AbstractMatcher(TrackingMatcher):
            pass

        assert MATCHER_REGISTRY == before

    def test_default_access_is_neutral(self):
        class QuietMatcher(TrackingMatcher):
            matcher_name = "quiet"

        assert QuietMatcher().access() is AccessVote.NEUTRAL

    def test_duplicate_name_raises(self):
        class FirstMatcher(TrackingMatcher):
            matcher_name = "duplicate"

        with pytest.raises(MatcherRegistrationError, match="already registered"):

            class SecondMatcher(TrackingMatcher):
                matcher_name = "duplicate"

    def test_load_matchers_in_order(self, configured_settings, node_request):
        matchers = load_matchers(["role", "admin_route"], configured_settings, node_request)

        assert [m.matcher_name for m in matchers] == ["role", "admin_route"]

    def test_load_matchers_without_create(self, configured_settings, node_request):
        class PlainMatcher(TrackingMatcher):
            matcher_name = "plain"

        matchers = load_matchers(["plain"], configured_settings, node_request)

        assert isinstance(matchers[0], PlainMatcher)

    def test_load_unknown_matcher(self, configured_settings, node_request):
        with pytest.raises(MatcherLoadError, match="Matcher 'missing': not registered"):
            load_matchers(["missing"], configured_settings, node_request)
