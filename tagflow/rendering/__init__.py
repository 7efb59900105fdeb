"""Turns a VariableSet into the formatted tracking code."""

from tagflow.rendering.composer import SnippetComposer, format_variables
from tagflow.rendering.overrides import EntityOverride, extract_entity_override, get_field_values
from tagflow.rendering.renderer import VariableRenderer, collapse_value, escape_variable_name

__all__ = [
    "EntityOverride",
    "SnippetComposer",
    "VariableRenderer",
    "collapse_value",
    "escape_variable_name",
    "extract_entity_override",
    "format_variables",
    "get_field_values",
]
