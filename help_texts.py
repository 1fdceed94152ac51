#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

# ----------------- Help -----------------

HELP_MAIN = """\
usage: shogigui-docker [-h] (-b | -r | -u | -c) [-g DIR] [-s FILE] [-i NAME:TAG]

ShogiGUI + YaneuraOu (orqha) in a docker container.

actions (pick one):
  -b, --build             build the image (YaneuraOu TARGET_CPU is detected
                          from /proc/cpuinfo), tagged <version> and latest
  -r, --run               run ShogiGUI from the image (X11, host network)
  -u, --update-settings   add the bundled engines to the settings file
                          (engines already listed by name are left alone)
  -c, --cleanup           remove intermediate build-stage images
  -h, --help              show this help and exit

options:
  -g, --games-dir DIR     mount DIR at /games in the container (--run)
  -s, --settings FILE     settings file
                          (default: $XDG_CONFIG_HOME/shogigui/settings.xml)
  -i, --image NAME:TAG    image to build/run (default: shogigui:latest)

The settings file is created from the bundled template on first use.
Must not be run as root; your user needs access to the docker daemon.
"""
