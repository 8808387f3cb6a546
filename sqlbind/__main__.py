from sqlbind.cli import add_inspection_commands


def run_cli() -> None:  # pragma: no cover
    """sqlbind CLI."""
    add_inspection_commands()()


if __name__ == "__main__":  # pragma: no cover
    run_cli()
