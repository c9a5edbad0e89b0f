import logging
from typing import List, Optional, Tuple

from .ast import ParsedRelationship, ParseResult, ParseWarning
from .config import DslConfig, get_dsl_config
from .lexer import Token, relation_parts, source_lines, split_targets, substitute_shorthand, tokenize_line
from .logging_utils import apply_debug_logging
from .tags import merge_tags, normalize_tag

logger = logging.getLogger(__name__)

ElementSpec = Tuple[str, List[str]]


def _closing_quote(token: str) -> int:
    # The closing quote of a quoted name is followed by tags, a sentiment suffix or nothing.
    close = token.find('"', 1)
    while close > 0:
        rest = token[close + 1:].lstrip()
        if not rest or rest[0] in ':+-':
            return close
        close = token.find('"', close + 1)
    return -1


def _tag_search_start(token: str) -> int:
    if token.startswith('"'):
        close = _closing_quote(token)
        if close > 0:
            return close + 1
    return 0


def _tag_colon(tail: str) -> int:
    """Index of the colon opening the tag list in ``tail``, or -1.

    Colons and parentheses inside a balanced pair of quotes belong to a quoted tag.
    """

    if tail.count('"') % 2:
        colon = tail.rfind(':')
        paren = tail.rfind('(')
        return colon if colon > paren else -1

    colon = paren = -1
    in_quotes = False
    for index, ch in enumerate(tail):
        if ch == '"':
            in_quotes = not in_quotes
        elif not in_quotes and ch == ':':
            colon = index
        elif not in_quotes and ch == '(':
            paren = index
    return colon if colon > paren else -1


def _unquote(text: str) -> str:
    if len(text) >= 2 and text.startswith('"') and text.endswith('"'):
        return text[1:-1]
    if text == '"':
        return ''
    return text


def parse_element_token(raw: str, config: Optional[DslConfig] = None) -> Optional[ElementSpec]:
    """Parse ``Name:tag1,tag2`` / ``Name+`` / ``"Quoted: name":"a, b"`` into ``(name, tags)``.

    Returns ``None`` when nothing is left of the name.
    """

    config = config or get_dsl_config()
    work = raw.strip()
    if not work:
        return None

    tags: List[str] = []
    start = _tag_search_start(work)
    tail = work[start:]
    colon = _tag_colon(tail)
    if colon > -1:
        tag_text = tail[colon + 1:]
        tags = [normalize_tag(_unquote(t)) for t in split_targets(tag_text, ',')]
        tags = [t for t in tags if t]
        work = work[:start + colon].strip()

    if work.endswith('+'):
        work = work[:-1].strip()
        tags.append(config.useful_tag)
    elif work.endswith('-'):
        work = work[:-1].strip()
        tags.append(config.harmful_tag)

    name = _unquote(work)
    if not name:
        return None
    return name, merge_tags([], tags)


class _LineParser:
    """Walk the ELEMENT/RELATION tokens of one line and emit parse results."""

    def __init__(self, tokens: List[Token], result: ParseResult, config: DslConfig):
        self.toks = tokens
        self.i = 0
        self.result = result
        self.config = config

    def warn(self, line: int, message: str, text: str = '') -> None:
        warning = ParseWarning(line, message, text)
        logger.warning('%s', warning)
        self.result.warnings.append(warning)

    def next_token(self) -> Optional[Token]:
        tok = self.toks[self.i] if self.i < len(self.toks) else None
        if tok is not None:
            self.i += 1
        return tok

    def record(self, spec: ElementSpec) -> None:
        name, tags = spec
        existing = self.result.elements.get(name)
        self.result.elements[name] = merge_tags(existing or [], tags)

    def element(self, tok: Token) -> Optional[ElementSpec]:
        spec = parse_element_token(tok[1], self.config)
        if spec is None:
            self.warn(tok[2], 'skipped element with empty name', tok[1])
        return spec

    def parse(self) -> None:
        first = self.next_token()
        if first is None:
            return
        if first[0] != 'ELEMENT':
            self.warn(first[2], 'line must start with an element', first[1])
            return

        if len(self.toks) == 1:
            spec = self.element(first)
            if spec:
                self.record(spec)
            return

        source_text: Optional[str] = first[1]
        while self.i < len(self.toks):
            rel_tok = self.next_token()
            if rel_tok[0] != 'RELATION':
                self.warn(rel_tok[2], 'expected a relationship, abandoning rest of line', rel_tok[1])
                return
            parts = relation_parts(rel_tok[1])
            if parts is None:
                self.warn(rel_tok[2], 'unparseable relationship, abandoning rest of line', rel_tok[1])
                return
            targets_tok = self.next_token()
            if targets_tok is None:
                self.warn(rel_tok[2], 'relationship has no target', rel_tok[1])
                return
            if targets_tok[0] != 'ELEMENT':
                self.warn(targets_tok[2], 'expected target element, abandoning rest of line', targets_tok[1])
                return

            source = parse_element_token(source_text, self.config)
            if source is None:
                self.warn(rel_tok[2], 'relationship source has an empty name, abandoning rest of line', source_text)
                return
            self.record(source)

            label, direction = parts
            target_texts = split_targets(targets_tok[1], self.config.target_separator)
            if not target_texts:
                self.warn(targets_tok[2], 'relationship has no target', targets_tok[1])
                return
            for target_text in target_texts:
                target = parse_element_token(target_text, self.config)
                if target is None:
                    self.warn(targets_tok[2], 'skipped target with empty name', target_text)
                    continue
                self.record(target)
                self.result.relationships.append(
                    ParsedRelationship(source[0], target[0], label, direction, targets_tok[2])
                )

            if len(target_texts) != 1:
                if self.i < len(self.toks):
                    self.warn(
                        targets_tok[2],
                        'cannot continue a chain after several targets, abandoning rest of line',
                        targets_tok[1],
                    )
                return
            source_text = target_texts[0]


def parse_script(text: str, config: Optional[DslConfig] = None) -> ParseResult:
    config = config or get_dsl_config()
    result = ParseResult()
    substituted = substitute_shorthand(text or '', config)
    for line_no, line in source_lines(substituted, config):
        tokens = tokenize_line(line, line_no)
        _LineParser(tokens, result, config).parse()
    logger.debug(
        'Parsed %d element(s), %d relationship(s), %d warning(s)',
        len(result.elements),
        len(result.relationships),
        len(result.warnings),
    )
    return result


apply_debug_logging(globals(), logger=logger)
