# src/kit_extractor/__main__.py
from __future__ import annotations

import sys


def main() -> int:
    """
    Module entrypoint:
      - python -m kit_extractor            -> CLI help
      - python -m kit_extractor <command>  -> CLI command
    """
    from kit_extractor.cli import main as cli_main

    # Let the CLI parse sys.argv itself.
    return int(cli_main(sys.argv[1:]))


if __name__ == "__main__":
    raise SystemExit(main())
