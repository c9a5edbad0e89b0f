from .model import Direction, Element, Relationship, Graph
from .ast import ParsedRelationship, ParseResult, ParseWarning
from .config import DslConfig, get_dsl_config, set_dsl_config
from .parser import parse_script, parse_element_token
from .reconcile import reconcile, ReconcileResult
from .layout import place_new_elements, LayoutOptions
from .compiler import apply_script, CompileResult
from .analysis import analyze, AnalysisResult, CATEGORY_TAGS
from .tags import bulk_tag, tag_category, merge_tags
from .printer import print_graph, format_element
from .validate import validate_graph, ValidationError

__all__ = [
    'Direction',
    'Element',
    'Relationship',
    'Graph',
    'ParsedRelationship',
    'ParseResult',
    'ParseWarning',
    'DslConfig',
    'get_dsl_config',
    'set_dsl_config',
    'parse_script',
    'parse_element_token',
    'reconcile',
    'ReconcileResult',
    'place_new_elements',
    'LayoutOptions',
    'apply_script',
    'CompileResult',
    'analyze',
    'AnalysisResult',
    'CATEGORY_TAGS',
    'bulk_tag',
    'tag_category',
    'merge_tags',
    'print_graph',
    'format_element',
    'validate_graph',
    'ValidationError',
]
