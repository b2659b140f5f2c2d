"""CLI entry point (`coolify`).

Wires the command dispatcher and the `doctor` sub-app together and maps
usage errors (unknown command, missing argument, bad parameter) to exit
code 1.
"""

from __future__ import annotations

import sys

import typer

from cli import doctor
from cli.commands import EXIT_CONFIG, app

app.add_typer(doctor.app, name="doctor")

# Base class of every usage error, from whichever click build typer runs on.
UsageError: type[Exception] = next(
    cls for cls in typer.BadParameter.__mro__ if cls.__name__ == "UsageError"
)


def main(argv: list[str] | None = None) -> int:
    """Run the CLI and return the process exit code."""

    args = list(sys.argv[1:] if argv is None else argv)
    if not args:
        args = ["--help"]
    try:
        result = app(args=args, prog_name="coolify", standalone_mode=False)
    except UsageError as exc:
        exc.show()
        return EXIT_CONFIG
    except typer.Abort:
        typer.echo("Aborted!", err=True)
        return 1
    return result if isinstance(result, int) else 0


def run() -> None:
    raise SystemExit(main())


if __name__ == "__main__":
    run()
