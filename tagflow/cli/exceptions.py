"""
TagFlow CLI exception hierarchy.

This module defines CLI-specific exceptions and how they are displayed.
"""

import traceback

from rich.console import Console
from rich.markup import escape
from rich.panel import Panel

from tagflow.access.exceptions import MatcherLoadError
from tagflow.exceptions import ResourceError, SettingsError, TagFlowError
from tagflow.j2.exceptions import TemplateError
from tagflow.tokens.exceptions import EntityLoadError
from tagflow.vars.exceptions import VariableError

console = Console(stderr=True)


def describe_origin(error: BaseException) -> list[tuple[str, str]]:
    """
    Pick out the structured details a TagFlow error carries.

    Args:
        error: The exception that caused a CLI failure.

    Returns:
        (label, value) pairs, empty for errors carrying no such details.
    """
    details = []

    if isinstance(error, ResourceError) and error.resource_name:
        label = error.resource_type or "Resource"
        details.append((label, error.resource_name))
    elif isinstance(error, SettingsError) and error.setting:
        details.append(("Setting", error.setting))
    elif isinstance(error, MatcherLoadError):
        details.append(("Matcher", error.matcher_name))
    elif isinstance(error, TemplateError) and error.template:
        details.append(("Template", error.template))
    elif isinstance(error, EntityLoadError):
        details.append(("Entity type", error.entity_type))
    elif isinstance(error, VariableError):
        if error.var_name:
            details.append(("Variable", error.var_name))
        if error.section:
            details.append(("Section", error.section))

    return details


class TagFlowCLIError(TagFlowError):
    """
    Base exception class for CLI-related errors.

    These relate to command-line interface operations.
    """

    def __init__(
        self,
        message: str,
        hint: str | None = None,
        code: int = 1,
        original_exception: Exception | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.hint = hint
        self.code = code
        self.original_exception = original_exception

    def format_rich(self) -> str:
        """Format the error message for rich display."""
        lines = [f"[red bold]Error:[/] {escape(self.message)}"]

        if self.original_exception:
            for label, value in describe_origin(self.original_exception):
                lines.append(f"[cyan]{escape(label)}:[/] {escape(str(value))}")

        if self.hint:
            lines.append(f"[yellow]Hint:[/] {escape(self.hint)}")

        if self.original_exception:
            name = self.original_exception.__class__.__name__
            lines.append("")
            lines.append(f"[dim]Caused by {name}: {escape(str(self.original_exception))}[/]")

            tb = "".join(traceback.format_tb(self.original_exception.__traceback__))
            if tb:
                lines.append(f"[dim]Traceback:[/]\n[dim]{escape(tb)}[/]")

        return "\n".join(lines)

    def show(self) -> None:
        """Display the error message using Rich formatting."""
        console.print(Panel(self.format_rich(), title="[red]TagFlow CLI Error[/]", border_style="red"))


class CLIRenderError(TagFlowCLIError):
    """Raised when the tracking code cannot be rendered via CLI."""


class CLIShowError(TagFlowCLIError):
    """Raised when there are errors displaying information via CLI."""
