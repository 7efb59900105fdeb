import typer

from tagflow.cli import render, show

app = typer.Typer(
    help="TagFlow renders per-page analytics tracking code from configured and contributed variables.",
    add_completion=False,
)


def settings_callback(ctx: typer.Context, settings: str | None = None) -> None:
    """
    Priority order (highest to lowest):
    1. --settings CLI argument (caller's explicit intent)
    2. TAGFLOW_SETTINGS environment variable (handled by TagFlowSettings.load)
    3. Default tagflow.yaml (handled by TagFlowSettings.load)
    """
    ctx.obj = {"settings": settings if settings else ""}


@app.callback()
def main(
    ctx: typer.Context,
    settings: str | None = typer.Option(
        None, "--settings", "-s", help="Specify a path to a custom settings file."
    ),
) -> None:
    settings_callback(ctx, settings)


app.command()(render.render)
app.command()(show.show)

if __name__ == "__main__":
    app()
