import re
from typing import Dict, List, Tuple

from .model import Direction, Element, Graph

_AMBIGUOUS_NAME_RE = re.compile(r'[():;>]')
_AMBIGUOUS_TAG_RE = re.compile(r'[():;,]')
_UNPRINTABLE_TAG_RE = re.compile(r'"|>|-\[')

_CONNECTORS = {
    Direction.TO: '-[{label}]->',
    Direction.FROM: '<-[{label}]-',
    Direction.NONE: '-[{label}]-',
    Direction.BOTH: '<-[{label}]->',
}


def _needs_quotes(name: str) -> bool:
    if _AMBIGUOUS_NAME_RE.search(name):
        return True
    if name != name.strip():
        return True
    if name.startswith(('"', '#')) or name.endswith(('"', '+', '-')):
        return True
    return False


def tag_str(tag: str) -> str:
    if _UNPRINTABLE_TAG_RE.search(tag):
        raise ValueError(f'tag {tag!r} cannot be written in the shorthand')
    if _AMBIGUOUS_TAG_RE.search(tag):
        return f'"{tag}"'
    return tag


def format_element(element: Element) -> str:
    """Return the DSL token for ``element``: its (possibly quoted) name and tags.

    Raises ``ValueError`` for a tag holding a quote, ``>`` or ``-[``.
    """

    text = f'"{element.name}"' if _needs_quotes(element.name) else element.name
    if element.tags:
        text += ':' + ','.join(tag_str(tag) for tag in element.tags)
    return text


def connector_str(label: str, direction: Direction) -> str:
    return _CONNECTORS[direction].format(label=label)


def print_graph(graph: Graph) -> str:
    by_id = graph.element_by_id()
    handled = set()
    groups: Dict[Tuple[str, str, Direction], List[Element]] = {}

    for rel in graph.relationships:
        source = by_id.get(rel.source)
        target = by_id.get(rel.target)
        if source is None or target is None:
            continue
        groups.setdefault((source.id, rel.label, rel.direction), []).append(target)
        handled.add(source.id)
        handled.add(target.id)

    lines = []
    for (source_id, label, direction), targets in groups.items():
        source_text = format_element(by_id[source_id])
        target_text = '; '.join(format_element(t) for t in targets)
        lines.append(f'{source_text} {connector_str(label, direction)} {target_text}')

    for element in graph.elements:
        if element.id not in handled:
            lines.append(format_element(element))

    return '\n'.join(lines) + '\n' if lines else ''
