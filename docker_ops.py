#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
docker_ops.py

Image lifecycle on top of the docker CLI:
- build:   Dockerfile をビルド（TARGET_CPU は自動判定）し、固有タグ + latest を付ける
- run:     X11 / settings.xml / 棋譜フォルダをマウントして ShogiGUI を起動
- cleanup: ビルドステージの中間イメージ（LABEL app=shogigui, stage=build）を削除
"""

from __future__ import annotations

import datetime
import os
from pathlib import Path
from typing import List, Optional, Sequence, Tuple

from constants import (
    BUILD_STAGE_LABELS,
    CONTAINER_GAMES_DIR,
    CONTAINER_SETTINGS_PATH,
    REQUIRED_PROGRAMS,
    SHOGIGUI_VERSION,
    X11_SOCKET_DIR,
    YANEURAOU_VERSION,
)
from cpu_features import detect_target_cpu
from helpers import fatal, log_info, log_ok, log_warn, missing_programs, run_checked, run_command
from models import Config
from paths import build_context_dir, ensure_settings_file
from settings_merge import list_engine_fragments, merge_engine_fragments


# ----------------- preconditions -----------------

def check_preconditions(required: Sequence[str] = REQUIRED_PROGRAMS) -> None:
    if os.geteuid() == 0:
        fatal("do not run this as root; add your user to the docker group instead")

    missing = missing_programs(required)
    if missing:
        fatal(f"required program(s) not found in PATH: {', '.join(missing)}")

    if run_command(["docker", "info"], quiet=True).returncode != 0:
        fatal("cannot talk to the docker daemon (is it running, and are you in the docker group?)")


# ----------------- image reference -----------------

def split_image_ref(image: str) -> Tuple[str, str]:
    """'name:tag' -> (name, tag). A ':' inside the registry host part is not a tag."""
    name, sep, tag = image.rpartition(":")
    if not sep or "/" in tag:
        return image, "latest"
    return name, tag


def image_exists(image: str) -> bool:
    return run_command(["docker", "image", "inspect", image], quiet=True).returncode == 0


# ----------------- build -----------------

def unique_tag(target_cpu: str, now: Optional[datetime.datetime] = None) -> str:
    now = now or datetime.datetime.now()
    return f"{SHOGIGUI_VERSION}-{YANEURAOU_VERSION}-{target_cpu}-{now.strftime('%Y%m%d%H%M%S')}"


def build_command(config: Config, target_cpu: str, tag: str, nproc: int) -> List[str]:
    name, _ = split_image_ref(config.image)
    build_args = {
        "SHOGIGUI_VERSION": SHOGIGUI_VERSION,
        "YANEURAOU_VERSION": YANEURAOU_VERSION,
        "YANEURAOU_TARGET_CPU": target_cpu,
        "NPROC": str(nproc),
    }
    cmd = ["docker", "build"]
    for k, v in build_args.items():
        cmd += ["--build-arg", f"{k}={v}"]
    cmd += ["--tag", f"{name}:{tag}", "--tag", f"{name}:latest"]
    cmd.append(str(build_context_dir()))
    return cmd


def build_image(config: Config) -> str:
    target_cpu = detect_target_cpu()
    log_info(f"YaneuraOu TARGET_CPU = {target_cpu}")
    tag = unique_tag(target_cpu)
    run_checked(build_command(config, target_cpu, tag, os.cpu_count() or 1))
    name, _ = split_image_ref(config.image)
    log_ok(f"built {name}:{tag} (also tagged {name}:latest)")
    return f"{name}:{tag}"


# ----------------- run -----------------

def docker_run_command(config: Config, display: str, uid: int, gid: int) -> List[str]:
    cmd = [
        "docker", "run", "--rm",
        "--net", "host",
        "--user", f"{uid}:{gid}",
        "--env", f"DISPLAY={display}",
        "--volume", f"{X11_SOCKET_DIR}:{X11_SOCKET_DIR}:ro",
        "--volume", f"{config.settings_path.resolve()}:{CONTAINER_SETTINGS_PATH}:rw",
    ]
    if config.games_dir is not None:
        cmd += ["--volume", f"{config.games_dir.resolve()}:{CONTAINER_GAMES_DIR}:rw"]
    cmd.append(config.image)
    return cmd


def run_container(config: Config, fragments_dir: Optional[Path] = None) -> None:
    if not image_exists(config.image):
        fatal(f"image {config.image} not found; build it first with --build")

    if config.games_dir is not None and not config.games_dir.is_dir():
        fatal(f"games directory does not exist: {config.games_dir}")

    if ensure_settings_file(config.settings_path):
        log_info(f"created {config.settings_path} from template")
        merge_engine_fragments(config.settings_path, list_engine_fragments(fragments_dir))

    display = os.environ.get("DISPLAY", "")
    if not display:
        log_warn("DISPLAY is not set; the GUI will not be able to open a window")

    run_checked(docker_run_command(config, display, os.getuid(), os.getgid()))


# ----------------- cleanup -----------------

def cleanup_command() -> List[str]:
    cmd = ["docker", "image", "prune", "--force"]
    for k, v in BUILD_STAGE_LABELS.items():
        cmd += ["--filter", f"label={k}={v}"]
    return cmd


def cleanup_images() -> None:
    run_checked(cleanup_command())
    log_ok("removed intermediate build images")
