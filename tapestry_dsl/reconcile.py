"""Fold a parsed script into a graph under the ``replace`` or ``merge`` policy.

Names are matched case-insensitively through a lower-cased index that is
built once and extended as elements are created, so reconciliation stays
linear in the number of elements. New elements keep the casing of their
first mention; matched elements keep their stored casing.
"""

from __future__ import annotations

import copy
import logging
import uuid
from dataclasses import dataclass, field
from typing import Dict, List, Literal, Optional, Set, Tuple

from .ast import ParsedRelationship, ParseResult
from .logging_utils import apply_debug_logging
from .model import Direction, Element, Graph, Relationship
from .tags import merge_tags, utc_now

logger = logging.getLogger(__name__)

Mode = Literal['replace', 'merge']
RelationshipKey = Tuple[str, str, str, Direction]


@dataclass
class ReconcileResult:
    graph: Graph
    created_names: List[str] = field(default_factory=list)
    dropped: List[ParsedRelationship] = field(default_factory=list)


def new_id() -> str:
    return str(uuid.uuid4())


def _new_element(name: str, tags: List[str], now: str) -> Element:
    return Element(id=new_id(), name=name, tags=list(tags), created_at=now, updated_at=now)


def _new_relationship(source: str, target: str, rel: ParsedRelationship) -> Relationship:
    return Relationship(
        id=new_id(),
        source=source,
        target=target,
        label=rel.label,
        direction=rel.direction,
    )


def _resolve(rel: ParsedRelationship, index: Dict[str, Element]) -> Optional[Tuple[str, str]]:
    source = index.get(rel.source_name.lower())
    target = index.get(rel.target_name.lower())
    if source is None or target is None:
        return None
    return source.id, target.id


def _replace(parsed: ParseResult, current: Graph, now: str) -> ReconcileResult:
    previous = current.name_index()
    index: Dict[str, Element] = {}
    result = ReconcileResult(Graph())

    for name, tags in parsed.elements.items():
        key = name.lower()
        emitted = index.get(key)
        if emitted is not None:
            emitted.tags = merge_tags(emitted.tags, tags)
            continue
        existing = previous.get(key)
        if existing is not None:
            element = copy.deepcopy(existing)
            element.tags = list(tags)
            element.updated_at = now
        else:
            element = _new_element(name, tags, now)
            result.created_names.append(name)
        index[key] = element
        result.graph.elements.append(element)

    for rel in parsed.relationships:
        ids = _resolve(rel, index)
        if ids is None:
            result.dropped.append(rel)
            continue
        result.graph.relationships.append(_new_relationship(ids[0], ids[1], rel))
    return result


def _merge(parsed: ParseResult, current: Graph, now: str) -> ReconcileResult:
    graph = current.copy()
    index = graph.name_index()
    result = ReconcileResult(graph)

    for name, tags in parsed.elements.items():
        key = name.lower()
        existing = index.get(key)
        if existing is None:
            element = _new_element(name, tags, now)
            graph.elements.append(element)
            index[key] = element
            result.created_names.append(name)
            continue
        known = {tag.lower() for tag in existing.tags}
        added = merge_tags([], [tag for tag in tags if tag.lower() not in known])
        if added:
            existing.tags = existing.tags + added
            existing.updated_at = now

    seen: Set[RelationshipKey] = {rel.key for rel in graph.relationships}
    for rel in parsed.relationships:
        ids = _resolve(rel, index)
        if ids is None:
            result.dropped.append(rel)
            continue
        key = (ids[0], ids[1], rel.label, rel.direction)
        if key in seen:
            continue
        seen.add(key)
        graph.relationships.append(_new_relationship(ids[0], ids[1], rel))
    return result


def reconcile(parsed: ParseResult, current: Optional[Graph] = None, mode: Mode = 'merge') -> ReconcileResult:
    """Build the graph that results from applying ``parsed`` to ``current``.

    ``current`` is never modified. In ``replace`` mode the parse becomes the
    whole graph (matched elements keep their identity); in ``merge`` mode it
    is folded in additively.
    """

    if mode not in ('replace', 'merge'):
        raise ValueError(f'unknown reconcile mode {mode!r}')
    current = current or Graph()
    now = utc_now()
    result = _replace(parsed, current, now) if mode == 'replace' else _merge(parsed, current, now)
    if result.dropped:
        logger.info('Dropped %d relationship(s) with unresolved endpoints', len(result.dropped))
    logger.debug(
        'Reconciled (%s): %d element(s), %d relationship(s), %d created',
        mode,
        len(result.graph.elements),
        len(result.graph.relationships),
        len(result.created_names),
    )
    return result


apply_debug_logging(globals(), logger=logger)
