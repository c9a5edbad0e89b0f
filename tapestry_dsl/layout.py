"""Initial canvas placement for elements created by a script.

New elements are dropped next to an already positioned neighbour (with a
random offset) or, failing that, onto a diagonal grid. The batch is scanned
several times so that positions can ripple along short chains of new
elements; only the last scan uses the grid fallback.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional

import numpy as np

from .logging_utils import apply_debug_logging
from .model import Element, Graph

logger = logging.getLogger(__name__)


@dataclass
class LayoutOptions:
    random_seed: Optional[int] = None
    jitter: float = 150.0
    grid_origin: float = 200.0
    grid_step: float = 50.0
    passes: int = 2


def _find_anchor(element: Element, graph: Graph, by_id: Dict[str, Element]) -> Optional[Element]:
    for rel in graph.relationships:
        if rel.source == element.id:
            peer_id = rel.target
        elif rel.target == element.id:
            peer_id = rel.source
        else:
            continue
        peer = by_id.get(peer_id)
        if peer is not None and peer is not element and peer.has_position:
            return peer
    return None


def _pin(element: Element, x: float, y: float) -> None:
    element.x = float(x)
    element.y = float(y)
    element.fx = element.x
    element.fy = element.y


def _place_pass(
    graph: Graph,
    pending: List[Element],
    rng: np.random.Generator,
    options: LayoutOptions,
    placed_on_grid: int,
    *,
    use_fallback: bool,
) -> int:
    """Place what can be placed in one scan; return the updated grid counter."""

    by_id = graph.element_by_id()
    for element in pending:
        if element.has_position:
            continue
        anchor = _find_anchor(element, graph, by_id)
        if anchor is not None:
            dx, dy = rng.uniform(-options.jitter, options.jitter, size=2)
            _pin(element, anchor.x + dx, anchor.y + dy)
        elif use_fallback:
            offset = options.grid_origin + options.grid_step * placed_on_grid
            _pin(element, offset, offset)
            placed_on_grid += 1
    return placed_on_grid


def place_new_elements(
    graph: Graph,
    new_names: Iterable[str],
    options: Optional[LayoutOptions] = None,
) -> Graph:
    """Give coordinates to the named elements that have none yet.

    The graph is updated in place and returned.
    """

    options = options or LayoutOptions()
    names = set(new_names)
    pending = [e for e in graph.elements if e.name in names and not e.has_position]
    if not pending:
        return graph

    rng = np.random.default_rng(options.random_seed)
    passes = max(1, options.passes)
    placed_on_grid = 0
    for attempt in range(passes):
        placed_on_grid = _place_pass(
            graph,
            pending,
            rng,
            options,
            placed_on_grid,
            use_fallback=attempt == passes - 1,
        )
    logger.debug(
        'Placed %d new element(s), %d on the fallback grid',
        len(pending),
        placed_on_grid,
    )
    return graph


apply_debug_logging(globals(), logger=logger)
