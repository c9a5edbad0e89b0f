from __future__ import annotations

import copy
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional


class Direction(str, Enum):
    TO = 'To'
    FROM = 'From'
    NONE = 'None'
    BOTH = 'Both'

    @classmethod
    def parse(cls, value: Any) -> "Direction":
        if isinstance(value, cls):
            return value
        for member in cls:
            if str(value).lower() == member.value.lower():
                return member
        raise ValueError(f'unknown relationship direction {value!r}')


@dataclass
class Element:
    id: str
    name: str
    tags: List[str] = field(default_factory=list)
    notes: str = ''
    attributes: Dict[str, str] = field(default_factory=dict)
    created_at: str = ''
    updated_at: str = ''
    x: Optional[float] = None
    y: Optional[float] = None
    fx: Optional[float] = None
    fy: Optional[float] = None

    @property
    def has_position(self) -> bool:
        return self.x is not None and self.y is not None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            'id': self.id,
            'name': self.name,
            'tags': list(self.tags),
            'notes': self.notes,
            'attributes': dict(self.attributes),
            'createdAt': self.created_at,
            'updatedAt': self.updated_at,
        }
        for key in ('x', 'y', 'fx', 'fy'):
            value = getattr(self, key)
            if value is not None:
                data[key] = value
        return data

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Element":
        return cls(
            id=str(data['id']),
            name=str(data.get('name', '')),
            tags=list(data.get('tags') or []),
            notes=data.get('notes') or '',
            attributes=dict(data.get('attributes') or {}),
            created_at=data.get('createdAt', ''),
            updated_at=data.get('updatedAt', ''),
            x=data.get('x'),
            y=data.get('y'),
            fx=data.get('fx'),
            fy=data.get('fy'),
        )


@dataclass
class Relationship:
    id: str
    source: str
    target: str
    label: str = ''
    direction: Direction = Direction.TO
    tags: List[str] = field(default_factory=list)
    attributes: Dict[str, str] = field(default_factory=dict)

    @property
    def key(self):
        """Identity used to detect duplicate relationships when merging."""

        return (self.source, self.target, self.label, self.direction)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'source': self.source,
            'target': self.target,
            'label': self.label,
            'direction': self.direction.value,
            'tags': list(self.tags),
            'attributes': dict(self.attributes),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Relationship":
        return cls(
            id=str(data['id']),
            source=str(data['source']),
            target=str(data['target']),
            label=data.get('label') or '',
            direction=Direction.parse(data.get('direction', Direction.TO)),
            tags=list(data.get('tags') or []),
            attributes=dict(data.get('attributes') or {}),
        )


@dataclass
class Graph:
    elements: List[Element] = field(default_factory=list)
    relationships: List[Relationship] = field(default_factory=list)

    def element_by_id(self) -> Dict[str, Element]:
        return {element.id: element for element in self.elements}

    def name_index(self) -> Dict[str, Element]:
        """Map lower-cased names to elements; the first element with a name wins."""

        index: Dict[str, Element] = {}
        for element in self.elements:
            index.setdefault(element.name.lower(), element)
        return index

    def copy(self) -> "Graph":
        return copy.deepcopy(self)

    def to_dict(self) -> Dict[str, Any]:
        return {
            'elements': [element.to_dict() for element in self.elements],
            'relationships': [rel.to_dict() for rel in self.relationships],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "Graph":
        return cls(
            elements=[Element.from_dict(item) for item in data.get('elements', [])],
            relationships=[Relationship.from_dict(item) for item in data.get('relationships', [])],
        )
