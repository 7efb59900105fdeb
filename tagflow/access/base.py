import logging
from collections.abc import Iterable
from typing import Any, ClassVar

from tagflow.access.exceptions import MatcherRegistrationError
from tagflow.constants import StrEnum

logger = logging.getLogger(__name__)

MATCHER_REGISTRY: dict[str, type["TrackingMatcher"]] = {}


class AccessVote(StrEnum):
    """
    A matcher's opinion on whether the current request should be tracked.

    Votes combine with FORBIDDEN > ALLOWED > NEUTRAL precedence, so combining
    is commutative and a single FORBIDDEN always wins.
    """

    FORBIDDEN = "forbidden"
    ALLOWED = "allowed"
    NEUTRAL = "neutral"

    @property
    def is_forbidden(self) -> bool:
        return self is AccessVote.FORBIDDEN

    @property
    def is_allowed(self) -> bool:
        return self is AccessVote.ALLOWED

    @property
    def is_neutral(self) -> bool:
        return self is AccessVote.NEUTRAL

    def or_if(self, other: "AccessVote") -> "AccessVote":
        """Combine two votes."""
        if AccessVote.FORBIDDEN in (self, other):
            return AccessVote.FORBIDDEN
        if AccessVote.ALLOWED in (self, other):
            return AccessVote.ALLOWED
        return AccessVote.NEUTRAL


class TrackingMatcher:
    """Base class for rules deciding whether a request is tracked.

    Any class that inherits from TrackingMatcher and defines a matcher_name is
    registered when the class is defined, so it can be enabled by name from
    settings (see load_matchers).

    Example:
        class PreviewMatcher(TrackingMatcher):
            matcher_name = "preview"

            def access(self) -> AccessVote:
                return AccessVote.FORBIDDEN if self.request.is_preview else AccessVote.NEUTRAL

    Attributes:
        matcher_name: Unique identifier for this matcher type.
    """

    matcher_name: ClassVar[str | None] = None

    def __init_subclass__(cls, **kwargs: Any):
        """Register matcher subclasses when they are defined.

        Raises:
            MatcherRegistrationError: If a different class already registered
                                      the same matcher_name.
        """
        super().__init_subclass__(**kwargs)

        if not getattr(cls, "matcher_name", None):
            return

        existing_class = MATCHER_REGISTRY.get(cls.matcher_name)
        if existing_class is not None and existing_class is not cls:
            raise MatcherRegistrationError(
                f"Matcher name '{cls.matcher_name}' is already registered "
                f"by {existing_class.__module__}.{existing_class.__name__}. "
                f"Cannot register {cls.__module__}.{cls.__name__}"
            )

        MATCHER_REGISTRY[cls.matcher_name] = cls

    def access(self) -> AccessVote:
        """Vote on tracking the current request.

        Implementations may read request state but must not change it.
        """
        return AccessVote.NEUTRAL


class AccessAggregator:
    """Folds the votes of a sequence of matchers into one decision."""

    @staticmethod
    def combine(votes: Iterable[AccessVote]) -> AccessVote:
        """Combine votes; no votes means no opinion (NEUTRAL)."""
        result = AccessVote.NEUTRAL
        for vote in votes:
            result = result.or_if(vote)
        return result

    def evaluate(self, matchers: Iterable[TrackingMatcher]) -> AccessVote:
        """
        Ask every matcher for its vote and combine the results.

        Every matcher is consulted even after a FORBIDDEN vote, so each one
        can log its reasoning.

        Args:
            matchers: Matchers in registration order.

        Returns:
            FORBIDDEN if any matcher forbids, else ALLOWED if any allows,
            else NEUTRAL.
        """
        votes = []
        for matcher in matchers:
            vote = matcher.access()
            logger.debug(f"Matcher {type(matcher).__name__} voted {vote.value}")
            votes.append(vote)
        return self.combine(votes)
