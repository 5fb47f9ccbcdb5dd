import sys

import typer
from svnx.commands import config, history, logs
from svnx.logging import get_logger, log_application_event, setup_logging

app = typer.Typer(
    help="[bold blue]SVNX[/bold blue] - Subversion revision history export tool",
    rich_markup_mode="rich",
)

# Add command groups
app.add_typer(config.app, name="config")
app.add_typer(logs.app, name="logs")

# Add standalone commands
app.command("log")(history.show_log)
app.command("authors")(history.export_authors)


@app.callback(invoke_without_command=True)
def callback(ctx: typer.Context):
    """
    [bold blue]SVNX[/bold blue] - Subversion revision history export tool

    Streams the revision history of a Subversion repository in batches,
    with changed paths, revision properties and file previews.
    """
    if not ctx.invoked_subcommand:
        print(
            "Welcome to the SVNX CLI! Export Subversion history effortlessly. "
            "To proceed type svnx --help"
        )


def main():
    # Initialize logging early
    setup_logging()
    logger = get_logger("svnx.main")
    log_application_event("SVNX CLI started", details={"arguments": sys.argv[1:]})

    try:
        app()
    except Exception as e:
        logger.error(f"Unhandled exception in main: {str(e)}")
        raise
    finally:
        log_application_event("SVNX CLI finished")


if __name__ == "__main__":
    main()
