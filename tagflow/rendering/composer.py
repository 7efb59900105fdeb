from collections.abc import Mapping
from typing import Any

from tagflow.constants import Section
from tagflow.rendering.overrides import EntityOverride
from tagflow.tokens.resolver import TokenResolver
from tagflow.vars.variables import VariableSet


def format_variables(variables: Mapping[str, str]) -> str:
    """Format rendered variables as ``name="value";`` lines."""
    return "".join(f'{name}="{value}";\n' for name, value in variables.items())


class SnippetComposer:
    """
    Assembles the final tracking code.

    Output order, from most general to most specific:
    1. Header variables
    2. The main code snippet
    3. Main variables
    4. Footer variables
    5. The viewed entity's custom snippet

    Scripts downstream may rely on variables being defined before the code
    that reads them, so this order must not change.
    """

    def __init__(self, resolver: TokenResolver, token_overrides: Mapping[str, Any] | None = None):
        self.resolver = resolver
        self.token_overrides = token_overrides if token_overrides is not None else {}

    def format_snippet(self, raw_snippet: str) -> str:
        """Resolve the placeholders of a raw snippet and terminate it with a newline."""
        return self.resolver.resolve(raw_snippet, self.token_overrides) + "\n"

    def compose(self, rendered: VariableSet, entity_override: EntityOverride | None = None) -> str:
        """
        Args:
            rendered: Variables already passed through VariableRenderer.render().
            entity_override: Overrides of the viewed entity; defaults when None.

        Returns:
            The formatted variables block.
        """
        entity_override = entity_override or EntityOverride()
        sections = rendered.get_variables()
        include_variables = entity_override.include_section_variables

        formatted = ""

        if include_variables and sections[Section.HEADER]:
            formatted += format_variables(sections[Section.HEADER])

        if entity_override.include_main_snippet:
            formatted += self.format_snippet(rendered.code_snippet)

        if include_variables and sections[Section.VARIABLES]:
            formatted += format_variables(sections[Section.VARIABLES])

        if include_variables and sections[Section.FOOTER]:
            formatted += format_variables(sections[Section.FOOTER])

        if entity_override.custom_snippet:
            formatted += self.format_snippet(entity_override.custom_snippet)

        return formatted
