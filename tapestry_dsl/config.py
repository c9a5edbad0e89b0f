"""Configuration helpers for the DSL compiler and analyzer."""

from __future__ import annotations

import copy
from dataclasses import dataclass


@dataclass
class DslConfig:
    counteracts_label: str = 'Counteracts'
    produces_label: str = 'Produces'
    useful_tag: str = 'Useful'
    harmful_tag: str = 'Harmful'
    comment_prefix: str = '#'
    target_separator: str = ';'
    hub_threshold: int = 5


_DSL_CONFIG = DslConfig()


def get_dsl_config() -> DslConfig:
    return copy.deepcopy(_DSL_CONFIG)


def set_dsl_config(config: DslConfig) -> None:
    global _DSL_CONFIG
    _DSL_CONFIG = copy.deepcopy(config)
