from dataclasses import dataclass, field
from typing import Dict, List

from .model import Direction


@dataclass
class ParsedRelationship:
    source_name: str
    target_name: str
    label: str
    direction: Direction
    line: int = 0


@dataclass
class ParseWarning:
    line: int
    message: str
    text: str = ''

    def __str__(self) -> str:  # pragma: no cover - trivial string formatting
        if self.text:
            return f'[line {self.line}] {self.message}: {self.text!r}'
        return f'[line {self.line}] {self.message}'


@dataclass
class ParseResult:
    elements: Dict[str, List[str]] = field(default_factory=dict)
    relationships: List[ParsedRelationship] = field(default_factory=list)
    warnings: List[ParseWarning] = field(default_factory=list)

    @property
    def is_empty(self) -> bool:
        return not self.elements and not self.relationships
