from collections.abc import Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from tagflow.collaborators import FieldIntrospector, RouteMatch
from tagflow.constants import (
    DEFAULT_ANALYTICS_FIELD_TYPE,
    FIELD_CUSTOM_SNIPPET,
    FIELD_INCLUDE_MAIN_SNIPPET,
    FIELD_INCLUDE_SECTION_VARIABLES,
)


class EntityOverride(BaseModel):
    """
    Per-entity control over what a page emits.

    Read from the analytics field of the entity being viewed. The defaults
    apply when the page shows no such entity or the field is empty. A stored
    value that is present but null disables its flag.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    include_main_snippet: bool = Field(default=True, alias=FIELD_INCLUDE_MAIN_SNIPPET)
    include_section_variables: bool = Field(default=True, alias=FIELD_INCLUDE_SECTION_VARIABLES)
    custom_snippet: str = Field(default="", alias=FIELD_CUSTOM_SNIPPET)

    @field_validator("include_main_snippet", "include_section_variables", mode="before")
    @classmethod
    def coerce_flag(cls, v: Any) -> bool:
        """Stored flags are loosely typed: "", "0", 0 and None all switch them off."""
        if isinstance(v, str):
            return v not in ("", "0")
        return bool(v)

    @field_validator("custom_snippet", mode="before")
    @classmethod
    def coerce_snippet(cls, v: Any) -> str:
        return "" if v is None else str(v)


def get_field_values(entity: Any, field_name: str) -> list[Mapping[str, Any]]:
    """Return the values stored in an entity field as a list of mappings."""
    if isinstance(entity, Mapping):
        values = entity.get(field_name)
    else:
        values = getattr(entity, field_name, None)

    if not values:
        return []
    if isinstance(values, Mapping):
        return [values]
    return [value for value in values if isinstance(value, Mapping)]


def extract_entity_override(
    field_introspector: FieldIntrospector,
    route_match: RouteMatch,
    field_type: str = DEFAULT_ANALYTICS_FIELD_TYPE,
) -> EntityOverride:
    """
    Extract overrides when the current route shows an entity with an analytics field.

    Entity types are tried in the order the field map lists them and only the
    first one present on the route is used, even if later types would match too.

    Args:
        field_introspector: Lists entity types carrying a field of ``field_type``.
        route_match: The current route, with parameters upcast to entities.
        field_type: The analytics field type.

    Returns:
        The overrides from the field's first value, or the defaults.
    """
    entity = None
    field_name = None
    for entity_type, candidate_field in field_introspector.field_map_for_field_type(field_type).items():
        entity = route_match.get_parameter(entity_type)
        if entity:
            field_name = candidate_field
            break

    if not entity:
        return EntityOverride()

    values = get_field_values(entity, field_name)
    if not values:
        return EntityOverride()

    return EntityOverride.model_validate(values[0])
