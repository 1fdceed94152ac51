#!/usr/bin/env python3
# -*- coding: utf-8 -*-
from __future__ import annotations

import shlex
import shutil
import subprocess
from typing import List, NoReturn, Sequence

from rich.console import Console
from rich.text import Text

_out = Console(highlight=False)
_err = Console(stderr=True, highlight=False)


# ----------------- log helpers -----------------

def _log(console: Console, tag: str, style: str, msg: str) -> None:
    console.print(Text.assemble((f"[{tag}] ", style), msg), soft_wrap=True)


def log_info(msg: str) -> None:
    _log(_out, "INFO", "bold cyan", msg)


def log_ok(msg: str) -> None:
    _log(_out, "OK", "bold green", msg)


def log_warn(msg: str) -> None:
    _log(_err, "WARN", "bold yellow", msg)


def log_err(msg: str) -> None:
    _log(_err, "ERR", "bold red", msg)


def log_cmd(cmd: Sequence[str]) -> None:
    _out.print(Text(f"$ {shlex.join(cmd)}", style="dim"), soft_wrap=True)


def print_text(text: str) -> None:
    # help text etc. (no markup interpretation)
    _out.print(Text(text), end="", soft_wrap=True)


def fatal(msg: str) -> NoReturn:
    """Report a terminal failure and exit with status 1."""
    log_err(msg)
    raise SystemExit(1)


# ----------------- external commands -----------------

def missing_programs(names: Sequence[str]) -> List[str]:
    return [n for n in names if shutil.which(n) is None]


def run_command(cmd: Sequence[str], quiet: bool = False) -> subprocess.CompletedProcess:
    """
    Run an external command to completion.
    quiet=True: output is discarded and the command line is not echoed (status checks).
    """
    if quiet:
        return subprocess.run(
            list(cmd), check=False, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL
        )
    log_cmd(cmd)
    return subprocess.run(list(cmd), check=False)


def run_checked(cmd: Sequence[str]) -> None:
    """Run a command; a nonzero exit status is fatal."""
    proc = run_command(cmd)
    if proc.returncode != 0:
        fatal(f"command failed (exit {proc.returncode}): {shlex.join(cmd)}")
