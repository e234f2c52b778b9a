"""Main entry point for the taskboard CLI."""

import typer

from taskboard.commands import board, config, version_command

app = typer.Typer(
    name="taskboard",
    help="A personal task board: columns of prioritised tasks you drag between",
    no_args_is_help=True,
)

# Add subcommands
app.add_typer(config.app, name="config", help="Configuration management")

# Add top-level commands
app.command("init")(board.init)
app.command("show")(board.show)
app.command("add")(board.add)
app.command("edit")(board.edit)
app.command("move")(board.move)
app.command("drag")(board.drag)
app.command("delete")(board.delete)
app.command("version")(version_command.version)


def main() -> None:
    """Main entry point."""
    app()


if __name__ == "__main__":
    main()
