"""
graphpermtest run command - graph-based permutation test on one label.

Usage:
    graphpermtest run --distance dist.csv --metadata samples.csv --sampletype SeqTech
    graphpermtest run --abundance counts.csv --distance-method braycurtis \\
        --metadata samples.csv --sampletype Diet --grouping Subject --type knn --knn 2
"""

import argparse
import json
import logging
import sys
from pathlib import Path

from graphpermtest.cli._validators import _non_negative_float, _positive_int
from graphpermtest.cli.config import ConfigSchema
from graphpermtest.graph.builder import ConnectivityRule

logger = logging.getLogger(__name__)


def register_parser(subparsers: argparse._SubParsersAction) -> None:
    """Register the run subcommand."""
    defaults = ConfigSchema()
    parser = subparsers.add_parser(
        "run",
        help="Test whether a sample label is associated with a proximity graph",
        description=(
            "Build a proximity graph from sample distances, count pure edges "
            "(edges joining samples with the same label) and compare against "
            "a label-permutation null distribution."
        )
    )

    # Input/output
    source = parser.add_mutually_exclusive_group()
    source.add_argument("--distance", "-d", type=Path,
                        help="Square distance matrix CSV (sample ids on both axes)")
    source.add_argument("--abundance", type=Path,
                        help="Samples x features abundance CSV; distances computed with --distance-method")
    parser.add_argument("--distance-method", default=defaults.distance_method,
                        help=f"scipy pdist metric for --abundance (default: {defaults.distance_method})")
    parser.add_argument("--metadata", "-m", type=Path,
                        help="Sample metadata CSV (sample ids in first column)")
    parser.add_argument("--output", "-o", type=Path, default=None,
                        help="Output directory for JSON result and edge list")
    parser.add_argument("--config", type=Path, default=None,
                        help="YAML/JSON config file (CLI flags override it)")

    # Test design
    parser.add_argument("--sampletype", "-s",
                        help="Metadata column with the categorical label to test")
    parser.add_argument("--grouping", "-g", default=None,
                        help="Metadata column defining repeated-measures groups (default: none)")

    # Graph
    parser.add_argument("--type", "-t", dest="connectivity",
                        choices=[r.value for r in ConnectivityRule],
                        default=defaults.graph.type,
                        help=f"Connectivity rule (default: {defaults.graph.type})")
    parser.add_argument("--knn", "-k", type=_positive_int, default=defaults.graph.knn,
                        help=f"Nearest neighbours for knn (default: {defaults.graph.knn})")
    parser.add_argument("--max-dist", type=_non_negative_float, default=defaults.graph.max_dist,
                        help=f"Maximum edge distance for threshold.value (default: {defaults.graph.max_dist})")
    parser.add_argument("--nedges", type=_positive_int, default=defaults.graph.nedges,
                        help="Edge count for threshold.nedges (default: number of samples)")
    parser.add_argument("--drop-isolates", dest="keep_isolates", action="store_false",
                        default=defaults.graph.keep_isolates,
                        help="Remove unconnected samples from the reported graph")

    # Permutation
    parser.add_argument("--nperm", "-n", type=_positive_int, default=defaults.permutation.nperm,
                        help=f"Number of permutations (default: {defaults.permutation.nperm})")
    parser.add_argument("--seed", type=int, default=defaults.permutation.seed,
                        help="Random seed for reproducible permutations")
    parser.add_argument("--n-jobs", type=_positive_int, default=defaults.permutation.n_jobs,
                        help=f"Worker threads for permutations (default: {defaults.permutation.n_jobs})")

    # Reporting
    parser.add_argument("--plots", action="store_true",
                        help="Save network and permutation plots to --output")
    parser.add_argument("--verbose", "-v", action="store_true",
                        help="Debug logging")

    parser.set_defaults(func=run_graph_test)


def _write_outputs(result, output: Path, plots: bool) -> None:
    output.mkdir(parents=True, exist_ok=True)
    with open(output / "graph_test.json", "w") as f:
        json.dump(result.to_dict(), f, indent=2)
    result.edge_frame().to_csv(output / "edges.csv", index=False)
    logger.info(f"Wrote results to {output}")

    if plots:
        import matplotlib
        matplotlib.use("Agg")
        from graphpermtest.viz.plots import plot_permutations, plot_test_network

        for name, figure in (
            ("network.png", plot_test_network(result)),
            ("permutations.png", plot_permutations(result)),
        ):
            figure.save(output / name)
            figure.close()


def run_graph_test(args: argparse.Namespace) -> int:
    """Execute the run command."""
    from graphpermtest.errors import GraphTestError
    from graphpermtest.io.distances import compute_sample_distances
    from graphpermtest.io.loaders import (
        load_abundance_table,
        load_distance_matrix,
        load_sample_metadata,
    )
    from graphpermtest.stats.graph_test import graph_perm_test

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
    )

    # Load and merge config file if provided
    if args.config:
        from graphpermtest.cli.config import load_config, merge_config_with_args, validate_config

        try:
            config = load_config(args.config)
            validate_config(config)
            # Skip the subcommand name
            cli_args = getattr(args, "cli_args", sys.argv[1:])[1:]
            args = merge_config_with_args(config, args, cli_args)
        except FileNotFoundError as e:
            print(f"ERROR: Config file error: {e}", file=sys.stderr)
            return 1
        except GraphTestError as e:
            print(f"ERROR: Config file error: {e}", file=sys.stderr)
            return 2

    # Validate required arguments (after config merge)
    missing = [
        flag for flag, value in (
            ("--distance or --abundance", args.distance or args.abundance),
            ("--metadata", args.metadata),
            ("--sampletype", args.sampletype),
        ) if not value
    ]
    if missing:
        print(f"ERROR: required (via CLI or config file): {', '.join(missing)}", file=sys.stderr)
        return 2

    try:
        if args.distance:
            distance = load_distance_matrix(args.distance)
        else:
            distance = compute_sample_distances(
                load_abundance_table(args.abundance), method=args.distance_method
            )
        metadata = load_sample_metadata(args.metadata)

        result = graph_perm_test(
            distance,
            metadata,
            sampletype=args.sampletype,
            grouping=args.grouping,
            connectivity=args.connectivity,
            max_dist=args.max_dist,
            knn=args.knn,
            nedges=args.nedges,
            keep_isolates=args.keep_isolates,
            nperm=args.nperm,
            rng=args.seed,
            n_jobs=args.n_jobs,
        )
    except FileNotFoundError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    except GraphTestError as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 2

    print(result.summary())

    if args.output:
        _write_outputs(result, args.output, args.plots)
    elif args.plots:
        logger.warning("--plots ignored without --output")

    return 0
