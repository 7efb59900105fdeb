from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from tagflow.exceptions import ResourceError
from tagflow.tokens.exceptions import EntityLoadError


class StaticRequest(BaseModel):
    """
    A request described entirely by data.

    Implements every collaborator protocol of tagflow.collaborators, which
    makes it suitable for the CLI, for previews and for tests. Entities are
    plain mappings; route parameters hold entity identifiers.

    Example YAML:
        path: /node/12
        roles: [authenticated]
        route_parameters:
          node: 12
        entities:
          node:
            12:
              title: Hello
              field_analytics:
                - include_main_codesnippet: true
                  include_custom_variables: false
                  codesnippet: 's.prop1="[node:title]";'
        field_map:
          adobe_analytics:
            node: field_analytics
    """

    model_config = ConfigDict(extra="forbid")

    path: str = "/"
    admin_route: bool = False
    roles: list[str] = Field(default_factory=lambda: ["anonymous"])
    route_parameters: dict[str, Any] = Field(default_factory=dict)
    routes: dict[str, dict[str, Any]] = Field(
        default_factory=dict, description="Route parameters of paths other than the current one"
    )
    entities: dict[str, dict[str, Any]] = Field(default_factory=dict)
    field_map: dict[str, dict[str, str]] = Field(default_factory=dict)

    @field_validator("entities", mode="before")
    @classmethod
    def stringify_entity_ids(cls, v: Any) -> Any:
        """YAML turns numeric ids into ints; storage is keyed by string ids."""
        if not isinstance(v, dict):
            return v
        return {
            entity_type: {str(entity_id): entity for entity_id, entity in (storage or {}).items()}
            for entity_type, storage in v.items()
        }

    @classmethod
    def load(cls, request_file: str | Path) -> "StaticRequest":
        """
        Load a request description from a YAML file.

        Raises:
            ResourceError: If the file is missing or does not describe a request.
        """
        request_path = Path(request_file)
        if not request_path.is_file():
            raise ResourceError(
                "File not found", resource_type="Request file", resource_name=str(request_file)
            )

        try:
            with request_path.open() as f:
                data = yaml.safe_load(f) or {}
            return cls.model_validate(data)
        except (yaml.YAMLError, ValidationError) as e:
            raise ResourceError(
                f"Invalid request description: {e}",
                resource_type="Request file",
                resource_name=str(request_file),
            ) from e

    # PathRouter
    def current_path(self) -> str:
        return self.path

    def parse_route_parameters(self, path: str) -> dict[str, Any]:
        if path == self.path:
            return dict(self.route_parameters)
        return dict(self.routes.get(path, {}))

    # EntityLoader
    def load_entity(self, entity_type: str, entity_id: Any) -> Any | None:
        storage = self.entities.get(entity_type)
        if storage is None:
            raise EntityLoadError(entity_type)
        return storage.get(str(entity_id))

    # RouteMatch
    def get_parameter(self, name: str) -> Any | None:
        entity_id = self.route_parameters.get(name)
        if entity_id is None:
            return None
        try:
            return self.load_entity(name, entity_id)
        except EntityLoadError:
            return None

    # FieldIntrospector
    def field_map_for_field_type(self, field_type: str) -> dict[str, str]:
        return dict(self.field_map.get(field_type, {}))

    # AdminContext
    def is_admin_route(self) -> bool:
        return self.admin_route

    # CurrentUser
    def get_roles(self) -> list[str]:
        return list(self.roles)
