import logging

import pytest

from tapestry_dsl import DslConfig, get_dsl_config, parse_element_token, parse_script, set_dsl_config
from tapestry_dsl.model import Direction


def rel_tuples(result):
    return [(r.source_name, r.target_name, r.label, r.direction) for r in result.relationships]


def test_fan_out_with_sentiment_suffixes():
    result = parse_script('Risk- -[causes]-> Delay; Cost+')

    assert result.elements == {'Risk': ['Harmful'], 'Delay': [], 'Cost': ['Useful']}
    assert rel_tuples(result) == [
        ('Risk', 'Delay', 'causes', Direction.TO),
        ('Risk', 'Cost', 'causes', Direction.TO),
    ]
    assert result.warnings == []


@pytest.mark.parametrize(
    'shorthand, explicit',
    [('A > B', 'A -[Produces]-> B'), ('A /> B', 'A -[Counteracts]-> B')],
)
def test_shorthand_parses_like_explicit_arrow(shorthand, explicit):
    a = parse_script(shorthand)
    b = parse_script(explicit)
    assert a.elements == b.elements
    assert rel_tuples(a) == rel_tuples(b)


def test_lines_without_separators_are_element_declarations():
    text = 'Alpha\n# comment\n\nBeta:core\nGamma (v2)\n'
    result = parse_script(text)
    assert list(result.elements) == ['Alpha', 'Beta', 'Gamma (v2)']
    assert result.elements['Beta'] == ['core']
    assert result.relationships == []


def test_chain_continues_through_single_targets():
    result = parse_script('A -[x]-> B <-[y]- C -[z]- D')
    assert rel_tuples(result) == [
        ('A', 'B', 'x', Direction.TO),
        ('B', 'C', 'y', Direction.FROM),
        ('C', 'D', 'z', Direction.NONE),
    ]


def test_chain_stops_after_fan_out(caplog):
    with caplog.at_level(logging.WARNING, logger='tapestry_dsl.parser'):
        result = parse_script('A -[x]-> B; C -[y]-> D')
    assert rel_tuples(result) == [('A', 'B', 'x', Direction.TO), ('A', 'C', 'x', Direction.TO)]
    assert 'D' not in result.elements
    assert len(result.warnings) == 1
    assert 'several targets' in caplog.text


def test_tags_accumulate_across_mentions():
    result = parse_script('A:one\nA:Two,one\na:three')
    assert result.elements['A'] == ['one', 'Two']
    assert result.elements['a'] == ['three']


def test_empty_element_is_skipped_with_warning():
    result = parse_script('"" -[x]-> B\nC -[y]-> +; D')
    assert 'B' not in result.elements
    assert rel_tuples(result) == [('C', 'D', 'y', Direction.TO)]
    assert len(result.warnings) == 2
    assert all(w.line in (1, 2) for w in result.warnings)


def test_missing_target_drops_step():
    result = parse_script('A -[x]->')
    assert result.elements == {}
    assert result.relationships == []
    assert result.warnings[0].message == 'relationship has no target'


def test_adjacent_relations_abandon_rest_of_line():
    result = parse_script('A -[x]-> B -[y]-> -[z]-> C')
    assert rel_tuples(result) == [('A', 'B', 'x', Direction.TO)]
    assert 'C' not in result.elements
    assert len(result.warnings) == 1


@pytest.mark.parametrize('text', ['', '   \n\t\n', '# only a comment'])
def test_blank_input_yields_empty_result(text):
    result = parse_script(text)
    assert result.is_empty
    assert result.warnings == []


@pytest.mark.parametrize(
    'raw, expected',
    [
        ('Name', ('Name', [])),
        ('Name:a, b ,', ('Name', ['a', 'b'])),
        ('Name+', ('Name', ['Useful'])),
        ('Name -', ('Name', ['Harmful'])),
        ('Name-:tag', ('Name', ['tag', 'Harmful'])),
        ('"Quoted"', ('Quoted', [])),
        ('Ratio: (approx)', ('Ratio: (approx)', [])),
        ('f(x): t', ('f(x)', ['t'])),
        ('"Ratio: A":t', ('Ratio: A', ['t'])),
        ('"Trailing-"', ('Trailing-', [])),
        ('"Foo":a"b', ('Foo', ['a"b'])),
        ('"Say "hi""+', ('Say "hi"', ['Useful'])),
        ('Plan:"phase (1)",core', ('Plan', ['phase (1)', 'core'])),
        ('"f(x)":"a,b","x:y"', ('f(x)', ['a,b', 'x:y'])),
    ],
)
def test_parse_element_token(raw, expected):
    assert parse_element_token(raw) == expected


@pytest.mark.parametrize('raw', ['', '   ', '""', '+', ':tag', '"'])
def test_parse_element_token_empty(raw):
    assert parse_element_token(raw) is None


def test_config_controls_shorthand_labels_and_sentiment_tags():
    original = get_dsl_config()
    try:
        set_dsl_config(DslConfig(produces_label='Yields', useful_tag='good'))
        result = parse_script('A+ > B')
    finally:
        set_dsl_config(original)

    assert result.elements['A'] == ['good']
    assert rel_tuples(result) == [('A', 'B', 'Yields', Direction.TO)]
    assert parse_script('A > B').relationships[0].label == 'Produces'
