import json
from collections.abc import Callable
from typing import Any

import typer
from tabulate import tabulate
from termcolor import colored

from tagflow.access import MATCHER_REGISTRY
from tagflow.cli.constants import (
    BANNER_COLOR,
    CLI_ERROR_EXIT_CODE,
    MASKED_VALUE,
    TABLE_HEADER_COLOR,
    TABLE_KEY_COLOR,
    TABLE_VALUE_COLOR,
)
from tagflow.cli.exceptions import CLIShowError
from tagflow.constants import PROTECTED_KEYWORDS
from tagflow.exceptions import TagFlowError
from tagflow.settings import TagFlowSettings
from tagflow.vars import CONTRIBUTOR_REGISTRY, import_contributors

app = typer.Typer()


@app.command()
def show(
    ctx: typer.Context,
    config: bool = typer.Option(False, "--config", "-c", help="Display current TagFlow settings"),
    matchers: bool = typer.Option(False, "--matchers", "-m", help="Display registered tracking matchers"),
    contributors: bool = typer.Option(
        False, "--contributors", help="Display registered variable contributors"
    ),
    all: bool = typer.Option(False, "--all", "-a", help="Display all information"),
) -> None:
    """
    Displays summary info about TagFlow.
    """
    if not any([config, matchers, contributors, all]):
        raise typer.BadParameter(
            "You must provide at least one option: --config, --matchers, --contributors, or --all."
        )

    try:
        settings_file = (ctx.obj or {}).get("settings") or None
        settings = TagFlowSettings.load(settings_file)

        if all or config:
            show_settings(settings)
        if all or matchers:
            show_matchers(settings)
        if all or contributors:
            show_contributors(settings)

    except TagFlowError as e:
        CLIShowError(
            message=f"TagFlow configuration error: {e}",
            hint="Check your TagFlow settings file.",
            original_exception=e,
        ).show()
        raise typer.Exit(code=CLI_ERROR_EXIT_CODE) from None


def show_settings(settings: TagFlowSettings) -> None:
    """Display the TagFlow settings."""
    show_formatted_table("TAGFLOW SETTINGS", render_settings_table_data, ["Setting", "Value"], settings)


def show_matchers(settings: TagFlowSettings) -> None:
    """Display the registered tracking matchers."""
    show_formatted_table(
        "TRACKING MATCHERS",
        render_matchers_table_data,
        ["Matcher", "Enabled", "Source (python class)"],
        settings,
    )


def show_contributors(settings: TagFlowSettings) -> None:
    """Display the registered variable contributors."""
    show_formatted_table(
        "VARIABLE CONTRIBUTORS",
        render_contributors_table_data,
        ["Contributor", "Source (python class)"],
        settings,
    )


def show_formatted_table(
    banner_text: str,
    table_data_renderer: Callable[[TagFlowSettings], list[list[str]]],
    headers: list[str],
    settings: TagFlowSettings,
) -> None:
    """Display information in a formatted table.

    Args:
        banner_text: The text to display in the banner.
        table_data_renderer: The function to prepare the data for the table.
        headers: The headers for the table.
        settings: The loaded settings.
    """
    table_data = table_data_renderer(settings)

    if not table_data:
        return

    colored_headers = [colored(header, TABLE_HEADER_COLOR, attrs=["bold"]) for header in headers]
    colalign = ["center"] + ["left"] * (len(headers) - 1)
    table = tabulate(table_data, headers=colored_headers, tablefmt="rounded_grid", colalign=colalign)
    display_banner(banner_text, table)
    typer.echo(table)


def render_settings_table_data(settings: TagFlowSettings) -> list[list[str]]:
    """Render the settings as rows, masking protected values."""
    table_data = []
    for key, value in settings.as_dict.items():
        colored_key = colored(key, TABLE_KEY_COLOR, attrs=["bold"])
        table_data.append([colored_key, format_value(key, value)])
    return table_data


def render_matchers_table_data(settings: TagFlowSettings) -> list[list[str]]:
    """Render registered matchers, marking the ones enabled in settings."""
    return [
        [name, "yes" if name in settings.matchers else "no", f"{cls.__module__}.{cls.__name__}"]
        for name, cls in MATCHER_REGISTRY.items()
    ]


def render_contributors_table_data(settings: TagFlowSettings) -> list[list[str]]:
    """Render registered contributors after importing the configured ones."""
    import_contributors(settings.contributors)
    return [[name, f"{cls.__module__}.{cls.__name__}"] for name, cls in CONTRIBUTOR_REGISTRY.items()]


def format_value(key: str, value: Any) -> str:
    """Format a settings value for display in the table."""
    if any(keyword in key.lower() for keyword in PROTECTED_KEYWORDS):
        return colored(MASKED_VALUE, TABLE_VALUE_COLOR)
    if isinstance(value, (dict, list)):
        value_str = json.dumps(value, indent=2)
    else:
        value_str = str(value)
    return colored(value_str, TABLE_VALUE_COLOR)


def display_banner(banner_text: str, table: str) -> None:
    """Display a banner centered above the table."""
    banner = colored(banner_text, BANNER_COLOR, attrs=["bold", "underline"])
    table_width = len(table.split("\n")[0])
    typer.echo("\n\n" + banner.center(table_width + 5))
