#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
shogigui_docker.py

Build and run ShogiGUI + YaneuraOu in docker, and keep the user's
settings.xml in sync with the bundled engine definitions.

    shogigui-docker --build
    shogigui-docker --run --games-dir ~/kifu
    shogigui-docker --update-settings
    shogigui-docker --cleanup
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import List, Mapping, NoReturn, Optional

from constants import DEFAULT_IMAGE
from docker_ops import build_image, check_preconditions, cleanup_images, run_container
from help_texts import HELP_MAIN
from helpers import log_err, print_text
from models import Action, Config
from paths import default_settings_path
from settings_merge import update_settings


class _Parser(argparse.ArgumentParser):
    """Usage errors: message, then the help text, exit status 1."""

    def error(self, message: str) -> NoReturn:
        log_err(message)
        print_text(HELP_MAIN)
        raise SystemExit(1)


def build_parser() -> argparse.ArgumentParser:
    parser = _Parser(prog="shogigui-docker", add_help=False, allow_abbrev=False)
    parser.add_argument("-h", "--help", action="store_true")

    actions = parser.add_mutually_exclusive_group()
    actions.add_argument("-b", "--build", dest="action", action="store_const", const=Action.BUILD)
    actions.add_argument("-r", "--run", dest="action", action="store_const", const=Action.RUN)
    actions.add_argument(
        "-u", "--update-settings", dest="action", action="store_const", const=Action.UPDATE_SETTINGS
    )
    actions.add_argument("-c", "--cleanup", dest="action", action="store_const", const=Action.CLEANUP)

    parser.add_argument("-g", "--games-dir", metavar="DIR")
    parser.add_argument("-s", "--settings", metavar="FILE")
    parser.add_argument("-i", "--image", metavar="NAME:TAG", default=DEFAULT_IMAGE)
    return parser


def config_from_args(ns: argparse.Namespace, env: Optional[Mapping[str, str]] = None) -> Config:
    settings = Path(ns.settings).expanduser() if ns.settings else default_settings_path(env)
    games = Path(ns.games_dir).expanduser() if ns.games_dir else None
    return Config(action=ns.action, settings_path=settings, image=ns.image, games_dir=games)


def dispatch(config: Config) -> None:
    if config.action == Action.BUILD:
        build_image(config)
    elif config.action == Action.RUN:
        run_container(config)
    elif config.action == Action.UPDATE_SETTINGS:
        update_settings(config)
    elif config.action == Action.CLEANUP:
        cleanup_images()


def main(argv: Optional[List[str]] = None) -> int:
    ns = build_parser().parse_args(argv)
    if ns.help:
        print_text(HELP_MAIN)
        return 0

    config = config_from_args(ns)
    if config.action is None:
        print_text(HELP_MAIN)
        return 0

    check_preconditions()

    try:
        dispatch(config)
    except (OSError, ValueError) as e:
        log_err(str(e))
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
