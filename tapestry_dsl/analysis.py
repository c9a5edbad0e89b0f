"""Structural analysis of an element graph.

Degrees and connectivity ignore ``Relationship.direction``: every
relationship counts once as out-degree of its source and once as in-degree
of its target, and contributes one undirected edge to the adjacency used for
articulation points.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional, Sequence, Set

from .config import get_dsl_config
from .logging_utils import apply_debug_logging
from .model import Element, Relationship

logger = logging.getLogger(__name__)

CATEGORY_TAGS: Dict[str, str] = {
    'isolated': 'Isolated',
    'source': 'Source',
    'sink': 'Sink',
    'leaf': 'Leaf',
    'hub': 'Hub',
    'articulation': 'Articulation',
}


@dataclass
class AnalysisResult:
    node_count: int = 0
    rel_count: int = 0
    avg_degree: float = 0.0
    isolated: List[str] = field(default_factory=list)
    leaf: List[str] = field(default_factory=list)
    hub: List[str] = field(default_factory=list)
    source: List[str] = field(default_factory=list)
    sink: List[str] = field(default_factory=list)
    articulation: List[str] = field(default_factory=list)

    def category(self, name: str) -> List[str]:
        if name not in CATEGORY_TAGS:
            raise ValueError(f'unknown analysis category {name!r}')
        return list(getattr(self, name))

    def to_dict(self) -> Dict[str, object]:
        data: Dict[str, object] = {
            'nodeCount': self.node_count,
            'relCount': self.rel_count,
            'avgDegree': self.avg_degree,
        }
        for name in CATEGORY_TAGS:
            data[name] = list(getattr(self, name))
        return data


def _articulation_points(order: Sequence[str], adjacency: Dict[str, List[str]]) -> Set[str]:
    # Iterative Hopcroft-Tarjan; frames are (node, parent, neighbour iterator).
    disc: Dict[str, int] = {}
    low: Dict[str, int] = {}
    points: Set[str] = set()
    time = 0

    for root in order:
        if root in disc:
            continue
        disc[root] = low[root] = time
        time += 1
        root_children = 0
        stack = [(root, None, iter(adjacency[root]))]
        while stack:
            u, parent, neighbours = stack[-1]
            descended = False
            for v in neighbours:
                if v == parent:
                    continue
                if v in disc:
                    low[u] = min(low[u], disc[v])
                    continue
                disc[v] = low[v] = time
                time += 1
                if u == root:
                    root_children += 1
                stack.append((v, u, iter(adjacency[v])))
                descended = True
                break
            if descended:
                continue
            stack.pop()
            if parent is not None:
                low[parent] = min(low[parent], low[u])
                if parent != root and low[u] >= disc[parent]:
                    points.add(parent)
        if root_children > 1:
            points.add(root)
    return points


def analyze(
    elements: Sequence[Element],
    relationships: Sequence[Relationship],
    *,
    hub_threshold: Optional[int] = None,
) -> AnalysisResult:
    if hub_threshold is None:
        hub_threshold = get_dsl_config().hub_threshold

    node_count = len(elements)
    rel_count = len(relationships)
    result = AnalysisResult(
        node_count=node_count,
        rel_count=rel_count,
        avg_degree=(rel_count / node_count) if node_count else 0.0,
    )
    if not node_count:
        return result

    order = [e.id for e in elements]
    in_degree: Dict[str, int] = {eid: 0 for eid in order}
    out_degree: Dict[str, int] = {eid: 0 for eid in order}
    adjacency: Dict[str, List[str]] = {eid: [] for eid in order}

    for rel in relationships:
        if rel.source in out_degree:
            out_degree[rel.source] += 1
        if rel.target in in_degree:
            in_degree[rel.target] += 1
        if rel.source in adjacency and rel.target in adjacency:
            adjacency[rel.source].append(rel.target)
            adjacency[rel.target].append(rel.source)

    seen: Set[str] = set()
    for eid in order:
        if eid in seen:
            continue
        seen.add(eid)
        ind = in_degree[eid]
        outd = out_degree[eid]
        total = ind + outd
        if total == 0:
            result.isolated.append(eid)
        elif total == 1:
            result.leaf.append(eid)
        elif total >= hub_threshold:
            result.hub.append(eid)
        if ind == 0 and outd > 0:
            result.source.append(eid)
        if ind > 0 and outd == 0:
            result.sink.append(eid)

    points = _articulation_points(list(dict.fromkeys(order)), adjacency)
    result.articulation = [eid for eid in dict.fromkeys(order) if eid in points]
    logger.debug(
        'Analyzed %d element(s): %d isolated, %d hub(s), %d articulation point(s)',
        node_count,
        len(result.isolated),
        len(result.hub),
        len(result.articulation),
    )
    return result


apply_debug_logging(globals(), logger=logger)
