#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import sys

from ui.cli import main as cli_main


def main() -> int:
    # no arguments opens the dashboard, like `daily ui`
    return cli_main(sys.argv[1:])


if __name__ == "__main__":
    raise SystemExit(main())
