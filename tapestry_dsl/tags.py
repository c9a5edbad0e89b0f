from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import TYPE_CHECKING, Iterable, List, Literal

from .model import Graph

if TYPE_CHECKING:  # pragma: no cover - typing only
    from .analysis import AnalysisResult

logger = logging.getLogger(__name__)

TagMode = Literal['add', 'remove']


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()


def normalize_tag(tag: str) -> str:
    return tag.strip()


def merge_tags(existing: Iterable[str], new: Iterable[str]) -> List[str]:
    """Ordered union of two tag lists; tags differing only in case count once."""

    merged: List[str] = []
    seen = set()
    for tag in list(existing) + list(new):
        key = tag.lower()
        if not tag or key in seen:
            continue
        seen.add(key)
        merged.append(tag)
    return merged


def bulk_tag(graph: Graph, element_ids: Iterable[str], tag: str, mode: TagMode = 'add') -> int:
    """Add or remove ``tag`` on the given elements; return how many changed."""

    if mode not in ('add', 'remove'):
        raise ValueError(f'unknown bulk tag mode {mode!r}')
    tag = normalize_tag(tag)
    if not tag:
        return 0

    wanted = set(element_ids)
    key = tag.lower()
    changed = 0
    now = utc_now()
    for element in graph.elements:
        if element.id not in wanted:
            continue
        present = any(t.lower() == key for t in element.tags)
        if mode == 'add' and not present:
            element.tags = element.tags + [tag]
        elif mode == 'remove' and present:
            element.tags = [t for t in element.tags if t.lower() != key]
        else:
            continue
        element.updated_at = now
        changed += 1
    logger.info('Bulk %s of tag %r changed %d element(s)', mode, tag, changed)
    return changed


def tag_category(graph: Graph, analysis: "AnalysisResult", category: str, mode: TagMode = 'add') -> int:
    from .analysis import CATEGORY_TAGS

    if category not in CATEGORY_TAGS:
        raise ValueError(f'unknown analysis category {category!r}')
    return bulk_tag(graph, analysis.category(category), CATEGORY_TAGS[category], mode)
