"""
Interfaces of the services the rendering pipeline relies on.

TagFlow does not own entity storage, routing, users or token grammars. The
host application provides them through these protocols; tagflow.request offers
a static, data-driven implementation of all of them.
"""

from collections.abc import Mapping
from typing import Any, Protocol, runtime_checkable


@runtime_checkable
class TokenReplacer(Protocol):
    """Substitutes [type:field] placeholders in text."""

    def replace(self, text: str, data: Mapping[str, Any], clear: bool = False, sanitize: bool = False) -> str:
        """
        Args:
            text: Text containing placeholders.
            data: Context objects keyed by token type.
            clear: Remove placeholders that cannot be resolved.
            sanitize: Escape substituted values for markup.
        """
        ...


@runtime_checkable
class EntityLoader(Protocol):
    """Loads domain entities by type and identifier."""

    def load_entity(self, entity_type: str, entity_id: Any) -> Any | None:
        """Return the entity, or None when it does not exist.

        Implementations may raise EntityLoadError when no storage exists for
        the entity type. LookupError (KeyError included) is read the same way
        as a missing entity.
        """
        ...


@runtime_checkable
class PathRouter(Protocol):
    """Exposes the current request path and maps paths to route parameters."""

    def current_path(self) -> str: ...

    def parse_route_parameters(self, path: str) -> dict[str, Any]:
        """Return raw route parameters (entity identifiers) for a path."""
        ...


@runtime_checkable
class RouteMatch(Protocol):
    """The current route with its parameters already upcast to entities."""

    def get_parameter(self, name: str) -> Any | None: ...


@runtime_checkable
class FieldIntrospector(Protocol):
    """Finds which entity types carry a field of a given type."""

    def field_map_for_field_type(self, field_type: str) -> dict[str, str]:
        """Return entity type -> field name for every field of ``field_type``."""
        ...


@runtime_checkable
class AdminContext(Protocol):
    def is_admin_route(self) -> bool: ...


@runtime_checkable
class CurrentUser(Protocol):
    def get_roles(self) -> list[str]: ...
