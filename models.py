#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, FrozenSet, List, Optional


class Action(Enum):
    BUILD = "build"
    RUN = "run"
    UPDATE_SETTINGS = "update-settings"
    CLEANUP = "cleanup"


@dataclass(frozen=True)
class Config:
    action: Optional[Action]
    settings_path: Path
    image: str
    games_dir: Optional[Path] = None


@dataclass(frozen=True)
class CpuInfo:
    flags: FrozenSet[str] = frozenset()
    brand: str = ""


@dataclass(frozen=True)
class EngineDescriptor:
    name: str
    source: Path
    element: Any  # xml.dom.minidom.Element (fragment root)
    text: str = ""  # fragment root element as written in the file


@dataclass
class MergeResult:
    added: List[str] = field(default_factory=list)
    skipped: List[str] = field(default_factory=list)
    invalid: List[Path] = field(default_factory=list)
    normalized: bool = False

    @property
    def changed(self) -> bool:
        return bool(self.added) or self.normalized
