from collections.abc import Iterable
from typing import Any, TYPE_CHECKING

from tagflow.access.base import MATCHER_REGISTRY
from tagflow.access.exceptions import MatcherLoadError

if TYPE_CHECKING:
    from tagflow.access.base import TrackingMatcher


def load_matchers(matcher_names: Iterable[str], settings: Any, request: Any) -> list["TrackingMatcher"]:
    """Instantiate registered matchers by name.

    Each matcher class builds itself from the settings and the request through
    its ``create`` classmethod, or is instantiated without arguments if it has none.

    Args:
        matcher_names: Registered matcher names, in the order they should run.
        settings: The TagFlow settings.
        request: Object implementing the collaborator protocols the matchers need.

    Returns:
        List of matcher instances, in the given order.

    Raises:
        MatcherLoadError: If a name is not registered.
    """
    matchers = []
    for name in matcher_names:
        matcher_class = MATCHER_REGISTRY.get(name)
        if matcher_class is None:
            raise MatcherLoadError(name)
        create = getattr(matcher_class, "create", None)
        matchers.append(create(settings, request) if create else matcher_class())
    return matchers
