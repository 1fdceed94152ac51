#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
paths.py

同梱リソース（Dockerfile / settings.xml / engines/）とユーザー設定ファイルのパス解決。
"""

from __future__ import annotations

import os
import shutil
from pathlib import Path
from typing import Mapping, Optional


def _base_dir() -> Path:
    # このモジュール（paths.py）のあるディレクトリを基準にする
    return Path(__file__).resolve().parent


def build_context_dir() -> Path:
    return _base_dir()


def settings_template_path() -> Path:
    return _base_dir() / "settings.xml"


def engines_dir() -> Path:
    return _base_dir() / "engines"


def config_dir(env: Optional[Mapping[str, str]] = None) -> Path:
    """$XDG_CONFIG_HOME/shogigui, falling back to ~/.config/shogigui."""
    env = os.environ if env is None else env
    xdg = env.get("XDG_CONFIG_HOME", "").strip()
    root = Path(xdg) if xdg else Path.home() / ".config"
    return root / "shogigui"


def default_settings_path(env: Optional[Mapping[str, str]] = None) -> Path:
    return config_dir(env) / "settings.xml"


def ensure_settings_file(path: Path, template: Optional[Path] = None) -> bool:
    """
    Copy the bundled template to `path` if it does not exist yet.
    Returns True when the file was created.
    """
    if path.exists():
        return False
    src = template if template is not None else settings_template_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copyfile(src, path)
    return True
