"""Grammar productions of the graph-authoring shorthand.

A script is processed in a fixed order::

    text  -> substitute_shorthand   ('/>' first, then bare '>')
          -> source_lines            (drop blanks and '#' comments)
          -> tokenize_line           (ELEMENT / RELATION tokens)
          -> relation_parts          (label + direction of a RELATION)
          -> split_targets           (';'-separated target list)

Shorthand substitution has to run before tokenisation, and ``/>`` has to be
rewritten before bare ``>``: the ``>`` rule would otherwise turn ``/>`` into
``/ -[Produces]->``.
"""

import re
from typing import List, Optional, Tuple

from .config import DslConfig, get_dsl_config
from .model import Direction

Token = Tuple[str, str, int, int]  # (type, value, line, col)

_COUNTERACTS_RE = re.compile(r'[ \t]*/>[ \t]*')
# '>' that is not the head of '->' and not next to a bracket of '-[...]->'
_PRODUCES_RE = re.compile(r'(?<![-\[])>(?![-\]])')
_SEPARATOR_RE = re.compile(r'<?-\[.*?\]->?')
_RELATION_RE = re.compile(r'<?-\[(.*?)\]->?')


def substitute_shorthand(text: str, config: Optional[DslConfig] = None) -> str:
    config = config or get_dsl_config()
    counteracts = f' -[{config.counteracts_label}]-> '
    produces = f' -[{config.produces_label}]-> '
    text = _COUNTERACTS_RE.sub(lambda _m: counteracts, text)
    return _PRODUCES_RE.sub(lambda _m: produces, text)


def source_lines(text: str, config: Optional[DslConfig] = None) -> List[Tuple[int, str]]:
    config = config or get_dsl_config()
    lines: List[Tuple[int, str]] = []
    for line_no, raw in enumerate(text.split('\n'), start=1):
        stripped = raw.strip()
        if not stripped or stripped.startswith(config.comment_prefix):
            continue
        lines.append((line_no, stripped))
    return lines


def _element_token(line: str, start: int, end: int, line_no: int) -> Optional[Token]:
    chunk = line[start:end]
    value = chunk.strip()
    if not value:
        return None
    col = start + (len(chunk) - len(chunk.lstrip())) + 1
    return ('ELEMENT', value, line_no, col)


def tokenize_line(line: str, line_no: int) -> List[Token]:
    tokens: List[Token] = []
    pos = 0
    for m in _SEPARATOR_RE.finditer(line):
        tok = _element_token(line, pos, m.start(), line_no)
        if tok:
            tokens.append(tok)
        tokens.append(('RELATION', m.group(0), line_no, m.start() + 1))
        pos = m.end()
    tok = _element_token(line, pos, len(line), line_no)
    if tok:
        tokens.append(tok)
    return tokens


def relation_parts(token: str) -> Optional[Tuple[str, Direction]]:
    m = _RELATION_RE.fullmatch(token.strip())
    if not m:
        return None
    raw = m.group(0)
    incoming = raw.startswith('<-')
    outgoing = raw.endswith('->')
    if incoming and outgoing:
        direction = Direction.BOTH
    elif incoming:
        direction = Direction.FROM
    elif outgoing:
        direction = Direction.TO
    else:
        direction = Direction.NONE
    return m.group(1), direction


def split_targets(token: str, separator: str = ';') -> List[str]:
    """Split a target list on ``separator``, ignoring separators inside quotes."""

    parts: List[str] = []
    current: List[str] = []
    in_quotes = False
    for ch in token:
        if ch == '"':
            in_quotes = not in_quotes
        if ch == separator and not in_quotes:
            parts.append(''.join(current))
            current = []
            continue
        current.append(ch)
    parts.append(''.join(current))
    return [part.strip() for part in parts if part.strip()]
