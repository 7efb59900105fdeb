import typer
import yaml

from tagflow.cli.constants import CLI_ERROR_EXIT_CODE
from tagflow.cli.exceptions import CLIRenderError
from tagflow.exceptions import TagFlowError
from tagflow.formatter import VariableFormatter
from tagflow.j2 import Jinja2Service
from tagflow.logger import logger
from tagflow.request import StaticRequest
from tagflow.settings import TagFlowSettings
from tagflow.vars import VariablesFactory

app = typer.Typer(help="Render TagFlow tracking code")


def parse_token_context(value: str | None) -> dict[str, str]:
    """
    Parse "type=id" pairs separated by commas.

    Args:
        value: String like "node=12, taxonomy_term=3".

    Returns:
        Entity type -> entity id.

    Raises:
        CLIRenderError: If a pair has no "=" or an empty part.
    """
    if not value:
        return {}

    pairs = {}
    for item in value.split(","):
        if not item.strip():
            continue
        entity_type, sep, entity_id = item.partition("=")
        entity_type, entity_id = entity_type.strip(), entity_id.strip()
        if not sep or not entity_type or not entity_id:
            raise CLIRenderError(
                f"Invalid token context format: {item.strip()}.",
                hint="Expected TYPE=ID pairs, e.g. node=12,user=1.",
            )
        pairs[entity_type] = entity_id
    return pairs


def build_formatter(
    settings: TagFlowSettings, request: StaticRequest, token_context: dict[str, str]
) -> VariableFormatter:
    """Build the formatter for a request, forcing the given entities as token context."""
    variables = VariablesFactory(settings).load()
    formatter = VariableFormatter.for_request(variables, request, settings)

    for entity_type, entity_id in token_context.items():
        entity = request.load_entity(entity_type, entity_id)
        if entity is None:
            raise CLIRenderError(
                f"Entity {entity_type} '{entity_id}' not found in the request description.",
                hint="Add it under 'entities' in the request file.",
            )
        formatter.add_token_context(entity, entity_type)

    return formatter


@app.command()
def render(
    ctx: typer.Context,
    request_file: str = typer.Option(
        ..., "--request", "-r", help="YAML file describing the request to render for."
    ),
    markup: bool = typer.Option(False, "--markup", "-m", help="Print the full HTML fragment."),
    token_context: str | None = typer.Option(
        None, "--token-context", "-t", help="Entities to use for tokens, e.g. 'node=12,user=1'."
    ),
) -> None:
    """
    Renders the tracking code for a request.

    Prints nothing when tracking is not configured or not permitted.
    """
    try:
        settings_file = (ctx.obj or {}).get("settings") or None
        settings = TagFlowSettings.load(settings_file)
        if settings.log_dir:
            logger.set_log_file("render", settings.log_dir, settings.log_level)

        request = StaticRequest.load(request_file)
        formatter = build_formatter(settings, request, parse_token_context(token_context))

        payload = formatter.render_markup()
        if payload is None:
            logger.info(f"No tracking code rendered for {request.path}")
            return

        if markup:
            typer.echo(Jinja2Service().render_payload(payload), nl=False)
        else:
            typer.echo(payload.formatted_variables, nl=False)

    except CLIRenderError as e:
        e.show()
        raise typer.Exit(code=CLI_ERROR_EXIT_CODE) from None

    except TagFlowError as e:
        CLIRenderError(
            message=f"TagFlow error: {e}",
            hint="Check your settings and request files.",
            original_exception=e,
        ).show()
        raise typer.Exit(code=CLI_ERROR_EXIT_CODE) from None

    except yaml.YAMLError as e:
        CLIRenderError(
            message=f"Error parsing YAML file: {e}",
            hint="Check your settings and request files for YAML syntax errors.",
            original_exception=e,
        ).show()
        raise typer.Exit(code=CLI_ERROR_EXIT_CODE) from None
