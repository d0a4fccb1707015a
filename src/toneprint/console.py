# Timestamped debug output shared by the pipelines and the CLI.

import datetime
import sys

PREFIX = "[toneprint]"
LEVEL_TAGS = {
    "warn": "(!) ",
    "error": "[ERR] ",
}

debug = True


def configure(settings):
    """Follow the TONEPRINT_DEBUG switch carried by Settings."""
    global debug
    debug = bool(settings.debug)


def Print(msg: str, level="info", stream=None):
    if not debug:
        return

    out = stream or (sys.stderr if level == "error" else sys.stdout)
    ts = datetime.datetime.now().strftime("%H:%M:%S")
    msg = msg.replace("→", "->")
    print(f"{ts} {PREFIX} {LEVEL_TAGS.get(level, '')}{msg}", file=out, flush=True)


def progress_bar(prefix, index, total, bar_length=25):
    if not debug or total <= 0:
        return
    index = min(max(index, 0), total)
    filled = index * bar_length // total
    bar = "#" * filled + "-" * (bar_length - filled)
    print(f"\r{PREFIX} {prefix[:22]:22} [{bar}] {index}/{total}", end="", flush=True)
    if index == total:
        print()
