import logging
from collections.abc import Mapping
from typing import Any

from tagflow.collaborators import EntityLoader, PathRouter, TokenReplacer
from tagflow.constants import TOKEN_PATTERN, TOKEN_TYPE_ALIASES
from tagflow.tokens.exceptions import EntityLoadError

logger = logging.getLogger(__name__)


def normalize_token_type(token_type: str) -> str:
    """Map a token vocabulary name to the entity type it loads ('term' -> 'taxonomy_term')."""
    return TOKEN_TYPE_ALIASES.get(token_type, token_type)


def get_entity_type_from_text(text: str) -> str | None:
    """
    Return the entity type of the first placeholder in ``text``.

    Only the first [type:field] placeholder is considered; when its type part
    is empty, no type is returned even if later placeholders have one.

    Args:
        text: The text to inspect.

    Returns:
        The normalized entity type, or None.
    """
    match = TOKEN_PATTERN.search(text)
    if not match or not match.group(1):
        return None
    return normalize_token_type(match.group(1))


class TokenResolver:
    """
    Resolves placeholders in text, loading entity context from the current path.

    For each text, the entity type of its first placeholder decides which
    entity is needed. Caller-supplied overrides win; otherwise the entity is
    looked up from the current path's route parameters. Substitution is always
    done with clear and sanitize enabled.
    """

    def __init__(self, replacer: TokenReplacer, path_router: PathRouter, entity_loader: EntityLoader):
        self.replacer = replacer
        self.path_router = path_router
        self.entity_loader = entity_loader

    def resolve(self, text: str, overrides: Mapping[str, Any] | None = None) -> str:
        """
        Replace the placeholders in ``text``.

        Args:
            text: The text to process.
            overrides: Entities keyed by entity type, used instead of entities
                       derived from the path. Never modified.

        Returns:
            The substituted text. Unresolved placeholders are removed.
        """
        data = dict(overrides or {})
        token_type = get_entity_type_from_text(text)

        if token_type and token_type not in data:
            entity = self.extract_entity_from_path(token_type)
            if entity is not None:
                data[token_type] = entity

        return self.replacer.replace(text, data, clear=True, sanitize=True)

    def extract_entity_from_path(self, entity_type: str) -> Any | None:
        """
        Load the entity of ``entity_type`` referenced by the current path.

        Args:
            entity_type: The entity type to extract.

        Returns:
            The entity, or None if the path has no such parameter or the
            loader raised EntityLoadError or LookupError.
        """
        path = self.path_router.current_path()
        params = self.path_router.parse_route_parameters(path)

        entity_id = params.get(entity_type)
        if entity_id is None or entity_id == "":
            return None

        try:
            entity = self.entity_loader.load_entity(entity_type, entity_id)
        except (EntityLoadError, LookupError) as e:
            logger.debug(f"No context for '{entity_type}' on {path}: {e}")
            return None

        if entity is None:
            logger.debug(f"{entity_type} {entity_id} referenced by {path} was not found")
        return entity
