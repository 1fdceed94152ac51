#!/usr/bin/env python3
# -*- coding: utf-8 -*-

# ----------------- image -----------------

IMAGE_NAME = "shogigui"
DEFAULT_IMAGE = f"{IMAGE_NAME}:latest"

SHOGIGUI_VERSION = "0.0.7.17"
YANEURAOU_VERSION = "4.89"

# Dockerfile の LABEL と一致させること（cleanup のフィルタ）
BUILD_STAGE_LABELS = {"app": "shogigui", "stage": "build"}

# ----------------- container paths -----------------

CONTAINER_SETTINGS_PATH = "/shogi/shogigui/settings.xml"
CONTAINER_GAMES_DIR = "/games"
X11_SOCKET_DIR = "/tmp/.X11-unix"

# ----------------- host -----------------

REQUIRED_PROGRAMS = ("docker",)

# ----------------- settings.xml -----------------

ENGINE_LIST_TAG = "EngineList"
ENGINE_NAME_TAG = "Name"
INDENT_UNIT = "  "

# ----------------- YaneuraOu TARGET_CPU -----------------

VENDOR_VARIANTS = [
    # (brand substring, TARGET_CPU)
    ("AMD Ryzen", "ZEN1"),
]

# widest first
VECTOR_VARIANTS = [
    ("avx512f", "AVX512"),
    ("avx2", "AVX2"),
    ("sse4_2", "SSE42"),
    ("sse4_1", "SSE41"),
    ("sse2", "SSE2"),
]

FALLBACK_VARIANT = "NO_SSE"

TARGET_CPU_VARIANTS = (
    [v for _, v in VENDOR_VARIANTS] + [v for _, v in VECTOR_VARIANTS] + [FALLBACK_VARIANT]
)
