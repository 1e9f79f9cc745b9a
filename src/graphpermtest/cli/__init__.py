"""
graphpermtest CLI - Command-line interface for graph-based permutation tests.

Commands:
    graphpermtest run   - Test a sample label against a proximity graph
"""

import argparse
import sys
from typing import List, Optional

from graphpermtest import __version__


def main(args: Optional[List[str]] = None) -> int:
    """Main CLI dispatcher for graphpermtest."""
    parser = argparse.ArgumentParser(
        prog="graphpermtest",
        description="Graph-based permutation tests for sample labels",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Commands:
  run           Test whether a sample label is associated with a proximity graph

Examples:
  graphpermtest run --distance dist.csv --metadata samples.csv --sampletype SeqTech
  graphpermtest run --config graph_test.yaml --nperm 999
        """
    )

    parser.add_argument(
        "--version", "-V",
        action="version",
        version=f"%(prog)s {__version__}"
    )

    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    from graphpermtest.cli import run
    run.register_parser(subparsers)

    argv = list(args) if args is not None else sys.argv[1:]
    parsed_args = parser.parse_args(argv)

    if parsed_args.command is None:
        parser.print_help()
        return 0

    # Raw arguments let config merging tell explicit flags from defaults
    parsed_args.cli_args = argv
    return parsed_args.func(parsed_args)


if __name__ == "__main__":
    sys.exit(main())
