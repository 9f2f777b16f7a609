"""
loader.py — graph text reader and YAML parameter loader.

Graph text format (whitespace separated, 1-based ids):

    <vertex count>
    <from> <to> <probability>
    ...

Repeated (from, to) pairs are kept as separate edges under the default
"accumulate" policy (the transition matrix sums them) or refused under
"reject".

Parameter YAML: a flat mapping of SolverParameters fields, either at the top
level or under a ``solver:`` key.  Unknown keys are ignored with a warning.

Public API:
    parse_graph(text, duplicates)   -> MarkovGraph
    read_graph(path, duplicates)    -> MarkovGraph
    load_parameters(path, **over)   -> SolverParameters
"""

from __future__ import annotations

import logging
import warnings
from pathlib import Path
from typing import Any, Dict, Iterator, Set, Tuple, Union

import yaml

from .core.errors import DuplicateEdgeError, GraphFormatError, InvalidArgumentError
from .core.graph import MarkovGraph
from .core.parameters import SolverParameters

logger = logging.getLogger("markov_engine.loader")

DUPLICATE_POLICIES = ("accumulate", "reject")


# ─────────────────────────────────────────────────────────────────────────── #
# Graph text                                                                   #
# ─────────────────────────────────────────────────────────────────────────── #

def _tokens(text: str) -> Iterator[Tuple[int, str]]:
    for line_no, line in enumerate(text.splitlines(), start=1):
        for token in line.split("#", 1)[0].split():
            yield line_no, token


def parse_graph(text: str, duplicates: str = "accumulate") -> MarkovGraph:
    """Build a MarkovGraph from the textual description."""
    if duplicates not in DUPLICATE_POLICIES:
        raise ValueError(
            f"duplicates must be one of {DUPLICATE_POLICIES}, got {duplicates!r}"
        )
    tokens = list(_tokens(text))
    if not tokens:
        raise GraphFormatError("empty graph description")

    line_no, head = tokens[0]
    try:
        n_states = int(head)
    except ValueError:
        raise GraphFormatError(f"vertex count must be an integer, got {head!r}", line_no)
    try:
        graph = MarkovGraph(n_states)
    except InvalidArgumentError as exc:
        raise GraphFormatError(str(exc), line_no) from exc

    body = tokens[1:]
    if len(body) % 3:
        raise GraphFormatError(
            f"edge list has {len(body)} tokens, expected triples", body[-1][0]
        )

    seen: Set[Tuple[int, int]] = set()
    for i in range(0, len(body), 3):
        line_no = body[i][0]
        raw_source, raw_target, raw_probability = (tok for _, tok in body[i:i + 3])
        try:
            source, target = int(raw_source), int(raw_target)
            probability = float(raw_probability)
        except ValueError:
            raise GraphFormatError(
                f"bad edge '{raw_source} {raw_target} {raw_probability}'", line_no
            )
        if (source, target) in seen:
            if duplicates == "reject":
                raise DuplicateEdgeError(f"duplicate edge {source} -> {target}", line_no)
            logger.debug(f"duplicate edge {source} -> {target} will be accumulated")
        seen.add((source, target))
        try:
            graph.add_edge(source, target, probability)
        except InvalidArgumentError as exc:
            raise GraphFormatError(str(exc), line_no) from exc

    logger.debug(f"parsed graph: {graph!r}")
    return graph


def read_graph(path: Union[str, Path], duplicates: str = "accumulate") -> MarkovGraph:
    """Read a graph description file."""
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Graph file not found: {p.resolve()}")
    logger.info(f"Loading graph: {p}")
    return parse_graph(p.read_text(encoding="utf-8"), duplicates=duplicates)


# ─────────────────────────────────────────────────────────────────────────── #
# Solver parameters                                                            #
# ─────────────────────────────────────────────────────────────────────────── #

def parameters_from_mapping(block: Dict[str, Any], **overrides: Any) -> SolverParameters:
    """Build SolverParameters from a mapping, ignoring unknown keys."""
    valid_fields = set(SolverParameters.__dataclass_fields__.keys())
    kwargs: Dict[str, Any] = {}
    for k, v in (block or {}).items():
        if k in valid_fields:
            kwargs[k] = v
        else:
            warnings.warn(f"Unknown SolverParameters field ignored: {k}")
    kwargs.update({k: v for k, v in overrides.items() if v is not None})
    return SolverParameters(**kwargs)


def load_parameters(path: Union[str, Path], **overrides: Any) -> SolverParameters:
    """Load SolverParameters from a YAML file.

    Keyword overrides that are not None win over the file's values.
    """
    p = Path(path)
    if not p.exists():
        raise FileNotFoundError(f"Config not found: {p.resolve()}")

    with open(p, "r") as f:
        raw = yaml.safe_load(f) or {}

    if not isinstance(raw, dict):
        raise ValueError(f"Config {p} must contain a mapping, got {type(raw).__name__}")
    block = raw.get("solver", raw)
    if not isinstance(block, dict):
        raise ValueError("'solver' section must be a mapping")
    return parameters_from_mapping(block, **overrides)
