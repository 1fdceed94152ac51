#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
cpu_features.py

/proc/cpuinfo から YaneuraOu の TARGET_CPU（ビルド種別）を選ぶ。
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, Union

from constants import FALLBACK_VARIANT, VECTOR_VARIANTS, VENDOR_VARIANTS
from models import CpuInfo


def parse_cpu_info(text: str) -> CpuInfo:
    """Take `flags` and `model name` from the first processor block that has them."""
    flags = None
    brand = None
    for line in text.splitlines():
        if ":" not in line:
            continue
        key, value = line.split(":", 1)
        key = key.strip()
        if key == "flags" and flags is None:
            flags = frozenset(value.split())
        elif key == "model name" and brand is None:
            brand = value.strip()
        if flags is not None and brand is not None:
            break
    return CpuInfo(flags=flags or frozenset(), brand=brand or "")


def read_cpu_info(path: Union[str, Path] = "/proc/cpuinfo") -> CpuInfo:
    try:
        text = Path(path).read_text(encoding="utf-8", errors="replace")
    except OSError:
        # 取得できなければ拡張命令なし扱い
        return CpuInfo()
    return parse_cpu_info(text)


def select_target_cpu(flags: Iterable[str], brand: str = "") -> str:
    flags = set(flags)
    for needle, variant in VENDOR_VARIANTS:
        if needle in brand:
            return variant
    for flag, variant in VECTOR_VARIANTS:
        if flag in flags:
            return variant
    return FALLBACK_VARIANT


def detect_target_cpu(path: Union[str, Path] = "/proc/cpuinfo") -> str:
    info = read_cpu_info(path)
    return select_target_cpu(info.flags, info.brand)
