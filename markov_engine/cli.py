"""
Command-line interface for the Markov engine.

Usage:
    markov-engine [--log-level LEVEL] command [options]
    python -m markov_engine.cli command [options]

Commands:
    analyze FILE    Decompose the chain and print the full report.
    check FILE      Report whether the graph is a Markov chain (exit 1 if not).
    mermaid FILE    Export the state graph as a Mermaid flowchart.
    hasse FILE      Export the class Hasse diagram as a Mermaid flowchart.
"""

from __future__ import annotations

import argparse
import json
import logging
import sys
from typing import List, Optional

from .analysis.mermaid import graph_to_mermaid, hasse_to_mermaid, write_mermaid
from .analysis.pipeline import ChainAnalysis, analyze_chain
from .analysis.report import format_report, markov_lines
from .analysis.validation import check_stationary, cross_check_partition
from .core.errors import MarkovEngineError
from .core.parameters import SolverParameters
from .loader import DUPLICATE_POLICIES, load_parameters, parameters_from_mapping, read_graph

logger = logging.getLogger("markov_engine.cli")


def _build_subparsers(parser: argparse.ArgumentParser) -> None:
    """Register all sub-commands on the root parser."""
    sub = parser.add_subparsers(dest="command", required=True)

    def add_graph_arguments(p: argparse.ArgumentParser) -> None:
        p.add_argument("graph", help="Graph description file")
        p.add_argument(
            "--duplicates", choices=DUPLICATE_POLICIES, default="accumulate",
            help="How repeated edges are handled (default: accumulate)"
        )

    # ------------------------------------------------------------- analyze --
    analyze_p = sub.add_parser("analyze", help="Full decomposition report")
    add_graph_arguments(analyze_p)
    analyze_p.add_argument(
        "--config", type=str, default=None, metavar="YAML",
        help="Solver parameter file"
    )
    analyze_p.add_argument(
        "--epsilon", type=float, default=None, metavar="EPS",
        help="Power-iteration stopping threshold (default: 1e-6)"
    )
    analyze_p.add_argument(
        "--max-iterations", type=int, default=None, metavar="N",
        help="Power-iteration cap (default: 10000)"
    )
    analyze_p.add_argument(
        "--verify", action="store_true",
        help="Cross-check classes and distributions independently"
    )
    analyze_p.add_argument(
        "--json", action="store_true",
        help="Output a machine-readable summary"
    )

    # --------------------------------------------------------------- check --
    check_p = sub.add_parser("check", help="Markov validity check")
    add_graph_arguments(check_p)
    check_p.add_argument("--tolerance", type=float, default=0.01)

    # ------------------------------------------------------- mermaid/hasse --
    for name, help_text in (
        ("mermaid", "Export the state graph"),
        ("hasse", "Export the class Hasse diagram"),
    ):
        p = sub.add_parser(name, help=help_text)
        add_graph_arguments(p)
        p.add_argument("-o", "--output", required=True, help="Output .mmd path")


def _parameters(args: argparse.Namespace) -> SolverParameters:
    overrides = {"epsilon": args.epsilon, "max_iterations": args.max_iterations}
    if args.config:
        return load_parameters(args.config, **overrides)
    return parameters_from_mapping({}, **overrides)


def _summary(analysis: ChainAnalysis) -> dict:
    return {
        "n_states": analysis.graph.n_states,
        "is_markov": analysis.is_markov,
        "irreducible": analysis.irreducible,
        "classes": [
            {"name": cls.name, "members": list(cls.members), "kind": kind.name.lower()}
            for cls, kind in zip(analysis.partition, analysis.kinds)
        ],
        "links": analysis.links.pairs(),
        "hasse": analysis.hasse.pairs(),
        "stationary": [
            {
                "class": analysis.partition[s.class_index].name,
                "period": s.period,
                "distribution": s.as_dict(),
                "converged": s.result.converged,
                "iterations": s.result.iterations,
            }
            for s in analysis.solutions
        ],
    }


def _cmd_analyze(args: argparse.Namespace) -> int:
    """Execute the analyze sub-command."""
    graph = read_graph(args.graph, duplicates=args.duplicates)
    analysis = analyze_chain(graph, _parameters(args))

    if args.json:
        print(json.dumps(_summary(analysis), indent=2))
    else:
        print(format_report(analysis), end="")

    if args.verify:
        ok = cross_check_partition(graph, analysis.partition)
        for solution in analysis.solutions:
            ok &= check_stationary(solution.submatrix, solution.result.distribution)
        print(f"Verification: {'passed' if ok else 'FAILED'}")
        if not ok:
            return 2
    return 0


def _cmd_check(args: argparse.Namespace) -> int:
    """Execute the check sub-command."""
    graph = read_graph(args.graph, duplicates=args.duplicates)
    print("\n".join(markov_lines(graph, args.tolerance)))
    return 0 if graph.is_markov(args.tolerance) else 1


def _cmd_mermaid(args: argparse.Namespace) -> int:
    """Execute the mermaid sub-command."""
    graph = read_graph(args.graph, duplicates=args.duplicates)
    path = write_mermaid(graph_to_mermaid(graph), args.output)
    print(f"Mermaid file '{path}' generated successfully.")
    return 0


def _cmd_hasse(args: argparse.Namespace) -> int:
    """Execute the hasse sub-command."""
    graph = read_graph(args.graph, duplicates=args.duplicates)
    analysis = analyze_chain(graph)
    path = write_mermaid(hasse_to_mermaid(analysis.partition, analysis.hasse), args.output)
    print(f"Mermaid file '{path}' generated successfully.")
    return 0


_COMMANDS = {
    "analyze": _cmd_analyze,
    "check": _cmd_check,
    "mermaid": _cmd_mermaid,
    "hasse": _cmd_hasse,
}


def main(argv: Optional[List[str]] = None) -> int:
    """Entry point for the CLI."""
    parser = argparse.ArgumentParser(
        prog="markov-engine",
        description="Markov chain class decomposition and stationary analysis",
    )
    parser.add_argument("--log-level", default="WARNING",
                        choices=["DEBUG", "INFO", "WARNING", "ERROR"])
    _build_subparsers(parser)
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s [%(name)s] %(levelname)s: %(message)s",
        datefmt="%H:%M:%S",
    )

    try:
        return _COMMANDS[args.command](args)
    except (MarkovEngineError, FileNotFoundError, ValueError) as exc:
        logger.error(str(exc))
        print(f"ERROR: {exc}", file=sys.stderr)
        return 1


if __name__ == "__main__":
    sys.exit(main())
