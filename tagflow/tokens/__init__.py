"""Placeholder resolution for tracking variables and snippets."""

from tagflow.tokens.exceptions import EntityLoadError, TokenError
from tagflow.tokens.replacer import Jinja2TokenReplacer
from tagflow.tokens.resolver import TokenResolver, get_entity_type_from_text, normalize_token_type

__all__ = [
    "EntityLoadError",
    "Jinja2TokenReplacer",
    "TokenError",
    "TokenResolver",
    "get_entity_type_from_text",
    "normalize_token_type",
]
