from typing import TYPE_CHECKING, Any, Optional

if TYPE_CHECKING:
    from click import Group

    from sqlbind.core.binder import QueryArtifact
    from sqlbind.loader import RouteConfig

__all__ = ("add_inspection_commands", "get_sqlbind_group")

OUTPUT_FORMATS = ("text", "json")


def _artifact_to_dict(artifact: "QueryArtifact") -> "dict[str, Any]":
    return {
        "name": artifact.name,
        "sql": artifact.sql,
        "rewritten_sql": artifact.rewritten_sql,
        "parameters": list(artifact.parameters),
        "placeholder": {"style": artifact.placeholder.style.value, "marker": artifact.placeholder.marker},
    }


def _route_config_to_dict(config: "RouteConfig") -> "dict[str, Any]":
    return {
        "driver": config.driver,
        "placeholder": str(config.binding.placeholder),
        "routes": [
            {
                "method": route.method,
                "pattern": route.pattern,
                "queries": [_artifact_to_dict(query) for query in route.queries],
            }
            for route in config.routes
        ],
    }


def get_sqlbind_group() -> "Group":
    """Get the sqlbind CLI group.

    Raises:
        MissingDependencyError: If the `click` package is not installed.

    Returns:
        The sqlbind CLI group.
    """
    from sqlbind.exceptions import MissingDependencyError

    try:
        import rich_click as click
    except ImportError:
        try:
            import click  # type: ignore[no-redef]
        except ImportError as e:
            raise MissingDependencyError(package="click") from e

    @click.group(name="sqlbind")
    @click.option(
        "--log-level",
        help="Log level of the sqlbind loggers.",
        type=click.Choice(["DEBUG", "INFO", "WARNING", "ERROR"], case_sensitive=False),
        default="WARNING",
        show_default=True,
    )
    @click.pass_context
    def sqlbind_group(ctx: "click.Context", log_level: str) -> None:
        """Inspect how configured SQL is rewritten for a database driver."""
        from sqlbind.utils.logging import configure_logging

        ctx.ensure_object(dict)
        configure_logging(level=log_level, format_style="simple")

    return sqlbind_group


def add_inspection_commands(sqlbind_group: Optional["Group"] = None) -> "Group":  # noqa: C901
    """Add the inspection commands to the sqlbind group.

    Args:
        sqlbind_group: The group to add the commands to.

    Raises:
        MissingDependencyError: If the `click` package is not installed.

    Returns:
        The group with the inspection commands added.
    """
    from sqlbind.exceptions import MissingDependencyError

    try:
        import rich_click as click
    except ImportError:
        try:
            import click  # type: ignore[no-redef]
        except ImportError as e:
            raise MissingDependencyError(package="click") from e
    from rich import get_console
    from rich.markup import escape

    console = get_console()

    if sqlbind_group is None:
        sqlbind_group = get_sqlbind_group()

    strict_option = click.option(
        "--strict/--no-strict",
        default=None,
        help="Fail on unknown drivers instead of using '?' placeholders. Defaults to $SQLBIND_STRICT_DRIVER.",
    )
    format_option = click.option(
        "--format",
        "output_format",
        type=click.Choice(OUTPUT_FORMATS),
        default="text",
        show_default=True,
        help="Output format.",
    )

    def fail(ctx: "click.Context", error: Exception) -> None:
        console.print(f"[red]Error: {escape(str(error))}[/]")
        ctx.exit(1)

    def print_artifact(artifact: "QueryArtifact") -> None:
        from rich.table import Table

        title = f"{artifact.name}: {artifact.placeholder}" if artifact.name else str(artifact.placeholder)
        table = Table(title=escape(title), show_header=False)
        table.add_column("Field", style="cyan")
        table.add_column("Value", overflow="fold")
        table.add_row("SQL", escape(artifact.sql))
        table.add_row("Rewritten", escape(artifact.rewritten_sql))
        table.add_row("Parameters", escape(", ".join(artifact.parameters)) or "-")
        console.print(table)

    @sqlbind_group.command(name="tokens", help="Show the tokens of a SQL statement.")
    @click.argument("sql", type=str)
    def show_tokens(sql: str) -> None:  # pyright: ignore[reportUnusedFunction]
        """Print one row per token."""
        from rich.table import Table

        from sqlbind.core.tokenizer import tokenize

        table = Table(title="Tokens")
        table.add_column("Type", style="cyan")
        table.add_column("Position", justify="right")
        table.add_column("Value", overflow="fold")
        for token in tokenize(sql):
            table.add_row(token.type.value, str(token.position), escape(repr(token.value)))
        console.print(table)

    @sqlbind_group.command(name="bind", help="Rewrite the bind variables of a SQL statement for a driver.")
    @click.argument("sql", type=str)
    @click.option("--driver", "-d", required=True, type=str, help="Database driver, e.g. sqlite3 or postgres.")
    @strict_option
    @format_option
    def bind_statement(  # pyright: ignore[reportUnusedFunction]
        sql: str, driver: str, strict: Optional[bool], output_format: str
    ) -> None:
        """Print the rewritten statement and its parameter names."""
        from sqlbind._serialization import encode_json
        from sqlbind.core.config import BindingConfig
        from sqlbind.exceptions import SQLBindError

        ctx = click.get_current_context()
        try:
            artifact = BindingConfig.for_driver(driver, strict=strict).compile(sql)
        except SQLBindError as e:
            fail(ctx, e)
            return
        if output_format == "json":
            click.echo(encode_json(_artifact_to_dict(artifact)))
            return
        print_artifact(artifact)

    @sqlbind_group.command(name="routes", help="Load a route configuration and show its compiled queries.")
    @click.argument("config", type=click.Path(dir_okay=False))
    @strict_option
    @format_option
    def show_routes(  # pyright: ignore[reportUnusedFunction]
        config: str, strict: Optional[bool], output_format: str
    ) -> None:
        """Print every route of a configuration file."""
        from sqlbind._serialization import encode_json
        from sqlbind.exceptions import SQLBindError
        from sqlbind.loader import load_config

        ctx = click.get_current_context()
        try:
            route_config = load_config(config, strict=strict)
        except SQLBindError as e:
            fail(ctx, e)
            return
        if output_format == "json":
            click.echo(encode_json(_route_config_to_dict(route_config)))
            return
        console.rule(
            f"[yellow]{escape(route_config.driver)}[/] "
            f"using {escape(str(route_config.binding.placeholder))} placeholders",
            align="left",
        )
        for route in route_config.routes:
            console.print(f"[bold]{route.method}[/] {escape(route.pattern)}")
            for artifact in route.queries:
                print_artifact(artifact)

    return sqlbind_group
