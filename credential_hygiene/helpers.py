"""Helper functions."""
import logging
from argparse import ArgumentParser, Namespace
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from json import JSONEncoder, dumps
from pathlib import Path
from typing import Any, Sequence

import coloredlogs
from verboselogs import SPAM, VERBOSE, VerboseLogger

VERBOSITY_LEVELS: list[str] = ["INFO", "VERBOSE", "DEBUG", "SPAM"]
_LEVEL_NUMBERS: dict[str, int] = {
    "INFO": logging.INFO,
    "VERBOSE": VERBOSE,
    "DEBUG": logging.DEBUG,
    "SPAM": SPAM,
}


class EnhancedJSONEncoder(JSONEncoder):
    """Enhanced JSON encoder for specific classes."""

    def default(self, o: Any) -> Any:  # type: ignore[override]
        """Handle custom types JSON serialization."""
        if is_dataclass(o) and not isinstance(o, type):
            return asdict(o)
        if isinstance(o, (datetime, date)):
            return o.isoformat()
        if isinstance(o, (set, frozenset)):
            return sorted(o)
        return super().default(o)


def dump_to_file(
    logger: VerboseLogger, filename: str, content: str | Any
) -> None:
    """Save data to local file.

    Parameters
    ----------
    logger : verboselogs.VerboseLogger
        The program's logger.
    filename : str
        The file to write to.
    content : str or Any
        The data to write.

    """
    filepath = Path(filename)

    try:
        if not filepath.parent.exists():
            filepath.parent.mkdir(parents=True)

        if not isinstance(content, str):
            filepath.write_text(
                dumps(
                    content,
                    ensure_ascii=False,
                    cls=EnhancedJSONEncoder,
                    indent=4,
                )
            )
        else:
            filepath.write_text(content)

    except (FileNotFoundError, OSError, PermissionError, ValueError) as err:
        logger.error(f"Failed to write file to '{str(filepath)}': {err}")

    else:
        logger.info(f"Successfully wrote '{str(filepath)}'.")


def parse_options(description: str, argv: Sequence[str] | None = None) -> Namespace:
    """Parse command-line arguments.

    Parameters
    ----------
    description : str
        The program's description.
    argv : sequence of str, optional
        Arguments to parse instead of ``sys.argv``.

    Returns
    -------
    argparse.Namespace
        Parsed command-line arguments as an object.

    """
    parser = ArgumentParser(description=description)

    parser.add_argument(
        "command",
        choices=("audit", "cleanup"),
        help="audit: report weak, duplicate, reused and breached passwords; "
        "cleanup: delete incomplete and duplicate entries",
    )
    parser.add_argument(
        "--dump-json",
        metavar="FILENAME.json",
        type=str,
        default=None,
        help="also write the report to a JSON file",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="cleanup only: report what would be deleted without deleting",
    )
    parser.add_argument(
        "--skip-breach-check",
        action="store_true",
        help="audit only: do not query the breach corpus",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="count",
        default=0,
        help="increase logs output verbosity (default: info, -v: verbose, "
        "-vv: debug, -vvv: spam)",
    )

    args: Namespace = parser.parse_args(argv)

    if args.dry_run and args.command != "cleanup":
        parser.error("--dry-run only applies to cleanup")

    return args


def verbosity_to_level(verbose: int) -> str:
    """Map a ``-v`` count to a log level name."""
    return VERBOSITY_LEVELS[min(max(verbose, 0), len(VERBOSITY_LEVELS) - 1)]


def init_logger(
    name: str,
    verbosity_level: str,
    formatting: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
) -> VerboseLogger:
    """Initialize the program's logger.

    Parameters
    ----------
    name : str
        The logger's name.
    verbosity_level : str
        Log level name, one of ``VERBOSITY_LEVELS``.
    formatting : str, optional
        The log format.

    Returns
    -------
    verboselogs.VerboseLogger
        The logger.

    """
    level = _LEVEL_NUMBERS.get(verbosity_level.upper(), logging.INFO)
    logger = VerboseLogger(name)

    coloredlogs.install(
        logger=logger,
        level=level,
        fmt=formatting,
        isatty=True,
    )

    return logger
