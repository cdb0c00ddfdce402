#!/usr/bin/env python3
"""Run Alembic migrations up to head (or down to a given revision)."""

from __future__ import annotations

import argparse
from pathlib import Path

from alembic.config import Config

from alembic import command

PROJECT_ROOT = Path(__file__).resolve().parent.parent


def alembic_config() -> Config:
    cfg = Config(str(PROJECT_ROOT / "alembic.ini"))
    cfg.set_main_option("script_location", str(PROJECT_ROOT / "alembic"))
    return cfg


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description=__doc__)
    parser.add_argument("revision", nargs="?", default="head")
    parser.add_argument("--downgrade", action="store_true")
    args = parser.parse_args(argv)
    if args.downgrade:
        command.downgrade(alembic_config(), args.revision)
    else:
        command.upgrade(alembic_config(), args.revision)


if __name__ == "__main__":
    main()
