"""Argument parsing functionality for tfmkit."""

import argparse


def _add_common_flags(parser):
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
                        help="Path to configuration file (YAML, YML, or JSON)",
                        action="store",
                        type=str)


def build_parser():
    """Build the top-level parser with one subparser per command."""
    parser = argparse.ArgumentParser(
        prog="tfmkit",
        description=(
            "tfmkit - target framework monikers, NuGet version ranges and .nupkg archives"
        ),
        add_help=True,
    )
    _add_common_flags(parser)
    subparsers = parser.add_subparsers(dest="COMMAND", metavar="COMMAND")
    subparsers.required = True

    framework = subparsers.add_parser("framework",
                                      help="Parse target framework tokens and describe them")
    framework.add_argument("TOKENS",
                           help="Folder names (net45, netstandard2.0) or full names "
                                "(.NETFramework,Version=v4.5)",
                           nargs="+")
    framework.add_argument("--strict",
                           dest="STRICT",
                           help="Fail on tokens that do not resolve to a specific framework",
                           action="store_true")

    profile = subparsers.add_parser("profile",
                                    help="Find the portable profile covering a set of frameworks")
    profile.add_argument("TOKENS",
                         help="Framework folder names, e.g. net45 win8 wp8",
                         nargs="+")

    version_range = subparsers.add_parser("range",
                                          help="Format a version range and test versions against it")
    version_range.add_argument("RANGE",
                               help="Range in NuGet interval notation, e.g. [1.0,2.0)")
    version_range.add_argument("--version",
                               dest="VERSIONS",
                               help="Version to test (can be used multiple times)",
                               action="append",
                               type=str,
                               default=[])
    version_range.add_argument("--format",
                               dest="FORMAT",
                               help="Range format string (N, P, S, D, T, L, U, A); defaults to N",
                               action="store",
                               type=str,
                               default="N")

    inspect = subparsers.add_parser("inspect",
                                    help="Show the manifest and frameworks of a .nupkg file")
    inspect.add_argument("PACKAGE",
                         help="Path to a .nupkg file")

    pack = subparsers.add_parser("pack",
                                 help="Build a .nupkg from a .nuspec and its <files> section")
    pack.add_argument("NUSPEC",
                      help="Path to the .nuspec manifest")
    pack.add_argument("--base-path",
                      dest="BASE_PATH",
                      help="Directory that <file src> entries are relative to "
                           "(default: the nuspec's directory)",
                      action="store",
                      type=str)
    pack.add_argument("-o", "--output",
                      dest="OUTPUT",
                      help="Output file (default: <id>.<version>.nupkg in the current directory)",
                      action="store",
                      type=str)
    pack.add_argument("--deterministic",
                      dest="DETERMINISTIC",
                      help="Produce byte-identical output for identical inputs",
                      action="store_true")
    pack.add_argument("--include-empty-directories",
                      dest="INCLUDE_EMPTY_DIRECTORIES",
                      help="Keep empty directories under known package folders",
                      action="store_true")
    return parser


def parse_args(argv=None):
    """Parses the arguments passed to the program."""
    return build_parser().parse_args(argv)
