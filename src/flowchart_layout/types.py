"""Shared type definitions for flowchart-layout.

Enums used across the IR, the layout phases, and the renderers.
"""

from __future__ import annotations

from enum import Enum, IntEnum, auto


class ErrorStatus(IntEnum):
    SUCCESS = 0
    MIXED = 1
    ERROR = 2


class ConnectorDirection(IntEnum):
    IN = 0
    OUT = 1

    def reversed(self) -> ConnectorDirection:
        return ConnectorDirection.OUT if self == ConnectorDirection.IN else ConnectorDirection.IN


class LayerAlgorithm(Enum):
    FIRST_OCCURRING_PATH = auto()
    LONGEST_PATH = auto()

    @classmethod
    def default(cls) -> LayerAlgorithm:
        return cls.LONGEST_PATH


class PassDirection(Enum):
    DOWN = auto()
    UP = auto()
