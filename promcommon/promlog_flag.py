"""Command-line flags that configure a logger."""

from __future__ import annotations

import argparse

from promcommon.promlog import AllowedFormat, AllowedLevel, Config

LEVEL_FLAG_NAME = "log.level"
LEVEL_FLAG_HELP = (
    "Only log messages with the given severity or above. One of: [debug, info, warn, error]"
)
FORMAT_FLAG_NAME = "log.format"
FORMAT_FLAG_HELP = "Output format of log messages. One of: [logfmt, json]"


def _level(text: str) -> AllowedLevel:
    level = AllowedLevel()
    try:
        level.set(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None
    return level


def _format(text: str) -> AllowedFormat:
    fmt = AllowedFormat()
    try:
        fmt.set(text)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(str(exc)) from None
    return fmt


def add_flags(parser: argparse.ArgumentParser, config: Config) -> None:
    """Add the log level and format flags to parser."""
    config.level = AllowedLevel()
    parser.add_argument(
        "--" + LEVEL_FLAG_NAME,
        dest="log_level",
        type=_level,
        default="info",
        help=LEVEL_FLAG_HELP,
    )
    config.format = AllowedFormat()
    parser.add_argument(
        "--" + FORMAT_FLAG_NAME,
        dest="log_format",
        type=_format,
        default="logfmt",
        help=FORMAT_FLAG_HELP,
    )


def apply_flags(namespace: argparse.Namespace, config: Config) -> Config:
    """Copy the parsed flag values into config and return it."""
    config.level = namespace.log_level
    config.format = namespace.log_format
    return config