"""Script compiler façade: parse, reconcile and place in one call."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from .ast import ParsedRelationship, ParseWarning
from .config import DslConfig
from .layout import LayoutOptions, place_new_elements
from .model import Graph
from .parser import parse_script
from .reconcile import Mode, reconcile

logger = logging.getLogger(__name__)


@dataclass
class CompileResult:
    graph: Graph
    warnings: List[ParseWarning] = field(default_factory=list)
    created_names: List[str] = field(default_factory=list)
    dropped: List[ParsedRelationship] = field(default_factory=list)


def apply_script(
    text: str,
    graph: Optional[Graph] = None,
    mode: Mode = 'merge',
    layout: Optional[LayoutOptions] = None,
    config: Optional[DslConfig] = None,
) -> CompileResult:
    """Apply a script to ``graph`` and return the graph the host should adopt.

    ``graph`` itself is left untouched.
    """

    parsed = parse_script(text, config)
    reconciled = reconcile(parsed, graph, mode)
    place_new_elements(reconciled.graph, reconciled.created_names, layout)
    logger.info(
        'Applied script (%s): %d element(s) created, %d warning(s)',
        mode,
        len(reconciled.created_names),
        len(parsed.warnings),
    )
    return CompileResult(
        graph=reconciled.graph,
        warnings=parsed.warnings,
        created_names=reconciled.created_names,
        dropped=reconciled.dropped,
    )
