import pytest

from tapestry_dsl import analyze, bulk_tag, merge_tags, tag_category
from tapestry_dsl.model import Element, Graph


def make_graph():
    return Graph(
        [
            Element('a', 'A', ['Hub'], updated_at='t0'),
            Element('b', 'B', [], updated_at='t0'),
            Element('c', 'C', ['keep'], updated_at='t0'),
        ],
        [],
    )


def test_merge_tags_is_case_insensitive_and_ordered():
    assert merge_tags(['One', 'two'], ['ONE', 'three', '', 'Two']) == ['One', 'two', 'three']


def test_bulk_add_skips_elements_that_already_have_tag():
    graph = make_graph()
    changed = bulk_tag(graph, ['a', 'b'], 'hub', 'add')

    assert changed == 1
    assert graph.elements[0].tags == ['Hub']
    assert graph.elements[0].updated_at == 't0'
    assert graph.elements[1].tags == ['hub']
    assert graph.elements[1].updated_at != 't0'
    assert graph.elements[2].tags == ['keep']


def test_bulk_remove_matches_case_insensitively():
    graph = make_graph()
    changed = bulk_tag(graph, ['a', 'c'], 'HUB', 'remove')

    assert changed == 1
    assert graph.elements[0].tags == []
    assert graph.elements[2].tags == ['keep']


def test_bulk_tag_rejects_unknown_mode():
    with pytest.raises(ValueError):
        bulk_tag(make_graph(), ['a'], 'x', 'toggle')


def test_blank_tag_changes_nothing():
    assert bulk_tag(make_graph(), ['a', 'b'], '   ') == 0


def test_tag_category_applies_category_tag():
    graph = make_graph()
    analysis = analyze(graph.elements, graph.relationships)

    assert tag_category(graph, analysis, 'isolated') == 3
    assert all('Isolated' in e.tags for e in graph.elements)

    assert tag_category(graph, analysis, 'isolated', 'remove') == 3
    assert all('Isolated' not in e.tags for e in graph.elements)


def test_tag_category_rejects_unknown_category():
    graph = make_graph()
    with pytest.raises(ValueError):
        tag_category(graph, analyze(graph.elements, []), 'bridge')
