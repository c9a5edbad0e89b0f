from collections import Counter

import pytest

from tapestry_dsl import parse_script, print_graph, reconcile
from tapestry_dsl.model import Direction, Element, Graph, Relationship
from tapestry_dsl.printer import format_element


def test_groups_targets_by_source_label_and_direction():
    graph = Graph(
        [Element('a', 'Risk', ['Harmful']), Element('b', 'Delay'), Element('c', 'Cost')],
        [
            Relationship('r1', 'a', 'b', 'causes', Direction.TO),
            Relationship('r2', 'a', 'c', 'causes', Direction.TO),
        ],
    )
    assert print_graph(graph) == 'Risk:Harmful -[causes]-> Delay; Cost\n'


@pytest.mark.parametrize(
    'direction, connector',
    [
        (Direction.TO, '-[l]->'),
        (Direction.FROM, '<-[l]-'),
        (Direction.NONE, '-[l]-'),
        (Direction.BOTH, '<-[l]->'),
    ],
)
def test_connectors(direction, connector):
    graph = Graph([Element('a', 'A'), Element('b', 'B')], [Relationship('r', 'a', 'b', 'l', direction)])
    assert print_graph(graph) == f'A {connector} B\n'


def test_unconnected_elements_print_alone():
    graph = Graph([Element('a', 'A', ['x', 'y']), Element('b', 'B')], [])
    assert print_graph(graph) == 'A:x,y\nB\n'


def test_empty_graph_prints_nothing():
    assert print_graph(Graph()) == ''


@pytest.mark.parametrize(
    'name, expected',
    [
        ('Plain name', 'Plain name'),
        ('Ratio: A', '"Ratio: A"'),
        ('f(x)', '"f(x)"'),
        ('Follow-', '"Follow-"'),
        ('C++', '"C++"'),
        ('# not a comment', '"# not a comment"'),
        ('a;b', '"a;b"'),
    ],
)
def test_format_element_quotes_ambiguous_names(name, expected):
    assert format_element(Element('id', name)) == expected


def _signature(graph):
    names = {e.id: e.name for e in graph.elements}
    elements = Counter((e.name, tuple(sorted(e.tags))) for e in graph.elements)
    rels = Counter(
        (names[r.source], names[r.target], r.label, r.direction) for r in graph.relationships
    )
    return elements, rels


def test_round_trip_through_replace():
    graph = Graph(
        [
            Element('a', 'Risk', ['Harmful', 'core']),
            Element('b', 'Ratio: A (v2)'),
            Element('c', 'Follow-', ['Useful']),
            Element('d', 'Lonely', ['x']),
            Element('e', 'a;b'),
        ],
        [
            Relationship('r1', 'a', 'b', 'causes', Direction.TO),
            Relationship('r2', 'a', 'c', 'causes', Direction.TO),
            Relationship('r3', 'c', 'a', 'limits', Direction.FROM),
            Relationship('r4', 'b', 'e', '', Direction.NONE),
            Relationship('r5', 'e', 'e', 'self', Direction.BOTH),
        ],
    )
    text = print_graph(graph)
    rebuilt = reconcile(parse_script(text), graph, 'replace').graph

    assert _signature(rebuilt) == _signature(graph)
    assert {e.id for e in rebuilt.elements} == {e.id for e in graph.elements}


@pytest.mark.parametrize(
    'tags, expected',
    [
        (['phase (1)'], 'Plan:"phase (1)"'),
        (['a,b', 'core'], 'Plan:"a,b",core'),
        (['x:y'], 'Plan:"x:y"'),
    ],
)
def test_format_element_quotes_ambiguous_tags(tags, expected):
    assert format_element(Element('id', 'Plan', tags)) == expected


@pytest.mark.parametrize('tag', ['say "hi"', 'a > b', 'x -[y'])
def test_unprintable_tag_raises(tag):
    with pytest.raises(ValueError):
        print_graph(Graph([Element('a', 'Plan', [tag])]))


def test_round_trip_keeps_tags_with_separators():
    graph = Graph(
        [
            Element('a', 'Plan', ['phase (1)', 'a,b']),
            Element('b', 'f(x)', ['x:y', 'semi;colon']),
            Element('c', 'Lonely', ['(draft)']),
        ],
        [Relationship('r1', 'a', 'b', 'feeds', Direction.TO)],
    )
    text = print_graph(graph)
    rebuilt = reconcile(parse_script(text), graph, 'replace').graph

    assert _signature(rebuilt) == _signature(graph)
    assert [e.tags for e in rebuilt.elements] == [e.tags for e in graph.elements]
