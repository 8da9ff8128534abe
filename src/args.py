"""Argument parsing functionality for packintake."""

import argparse


def _add_common(parser):
    parser.add_argument("--loglevel",
                        dest="LOG_LEVEL",
                        help="Set the logging level",
                        action="store",
                        type=str.upper,
                        choices=['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL'],
                        default='INFO')
    parser.add_argument("--logfile",
                        dest="LOG_FILE",
                        help="Log output file",
                        action="store",
                        type=str)
    parser.add_argument("-c", "--config",
                        dest="CONFIG",
                        help="Path to configuration file (YAML)",
                        action="store",
                        type=str)


def build_parser():
    """Build the top-level parser with its subcommands."""
    parser = argparse.ArgumentParser(
        prog="packintake",
        description=(
            "packintake - Repository intake validation for package submissions"
        ),
        add_help=True,
    )
    sub = parser.add_subparsers(dest="action", metavar="COMMAND")
    sub.required = True

    validate = sub.add_parser("validate",
                              help="Resolve a repository and validate the package it describes")
    validate.add_argument("URL",
                          help="Repository URL as submitted")
    validate.add_argument("-n", "--name",
                          dest="NAME",
                          help="Package name to validate instead of the manifest name",
                          action="store",
                          type=str,
                          default="")
    validate.add_argument("-o", "--output",
                          dest="OUTPUT",
                          help="Path to JSON output file",
                          action="store",
                          type=str)
    _add_common(validate)

    normalize = sub.add_parser("normalize",
                               help="Print the canonical form of a repository URL")
    normalize.add_argument("URL",
                           help="Repository URL as submitted")
    _add_common(normalize)

    sort = sub.add_parser("sort",
                          help="Order version records from a JSON file, most relevant first")
    sort.add_argument("FILE",
                      help="JSON file holding a list of version records")
    _add_common(sort)

    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
