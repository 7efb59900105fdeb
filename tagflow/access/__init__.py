"""Tracking access decisions.

Matchers vote on each request; AccessAggregator combines the votes with
FORBIDDEN > ALLOWED > NEUTRAL precedence.
"""

from tagflow.access.base import MATCHER_REGISTRY, AccessAggregator, AccessVote, TrackingMatcher
from tagflow.access.loader import load_matchers
from tagflow.access.matchers import AdminRouteMatcher, RoleMatcher

__all__ = [
    "MATCHER_REGISTRY",
    "AccessAggregator",
    "AccessVote",
    "AdminRouteMatcher",
    "RoleMatcher",
    "TrackingMatcher",
    "load_matchers",
]
