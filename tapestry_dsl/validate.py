from typing import Set

from .model import Graph


class ValidationError(Exception):
    pass


def validate_graph(graph: Graph) -> None:
    element_ids: Set[str] = set()
    for element in graph.elements:
        if element.id in element_ids:
            raise ValidationError(f'[element {element.id}] duplicate element id')
        element_ids.add(element.id)

    rel_ids: Set[str] = set()
    for rel in graph.relationships:
        if rel.id in rel_ids:
            raise ValidationError(f'[relationship {rel.id}] duplicate relationship id')
        rel_ids.add(rel.id)
        for end, ref in (('source', rel.source), ('target', rel.target)):
            if ref not in element_ids:
                raise ValidationError(
                    f'[relationship {rel.id}] {end} {ref!r} is not an element of the graph'
                )
