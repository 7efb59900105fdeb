import html
from collections.abc import Mapping
from typing import Any

from tagflow.exceptions import NotConfiguredError
from tagflow.tokens.resolver import TokenResolver
from tagflow.vars.variables import LoadedVariables, VariableSet, VariableValue


def escape_variable_name(name: str) -> str:
    """Escape &, < and > in a variable name, leaving quote characters untouched."""
    return html.escape(name, quote=False)


def collapse_value(value: VariableValue) -> str:
    """Reduce a multi-valued entry to its last candidate."""
    if isinstance(value, str):
        return value
    values = list(value)
    return values[-1] if values else ""


class VariableRenderer:
    """Resolves the placeholders of every variable in a VariableSet."""

    def __init__(self, resolver: TokenResolver, token_overrides: Mapping[str, Any] | None = None):
        """
        Args:
            resolver: Resolves placeholders in variable values.
            token_overrides: Entities keyed by type, forced as token context.
        """
        self.resolver = resolver
        self.token_overrides = token_overrides if token_overrides is not None else {}

    def render_section(self, variables: Mapping[str, VariableValue]) -> dict[str, str]:
        """
        Render one section's variables so they are suitable for display.

        Multi-valued entries use their last value. Names are escaped, values
        are token-resolved. Entries whose value is empty once trimmed are
        removed; "0" is kept since it is valid data.

        Args:
            variables: Variable name -> value.

        Returns:
            Escaped name -> rendered value, in input order.
        """
        rendered = {}
        for name, value in variables.items():
            rendered[escape_variable_name(name)] = self.resolver.resolve(
                collapse_value(value), self.token_overrides
            )

        return {name: value for name, value in rendered.items() if value.strip() != ""}

    def render(self, source: LoadedVariables) -> VariableSet:
        """
        Return a new VariableSet with tokens replaced and names escaped.

        Raises:
            NotConfiguredError: If ``source`` is a NullVariableSet.
        """
        if not isinstance(source, VariableSet):
            raise NotConfiguredError(component="VariableRenderer")

        sections = {
            section: self.render_section(variables) for section, variables in source.get_variables().items()
        }
        return VariableSet.from_variables(source, sections)
