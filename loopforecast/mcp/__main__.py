"""Serve a catalog module's forecaster over MCP stdio.

The module named on the command line must provide ``define_catalog()`` and
``define_host()``; the server forecasts against the host totals they return.
"""

from __future__ import annotations

import contextlib
import sys

_USAGE = """\
Usage: python -m loopforecast.mcp <catalog_module>

<catalog_module> is a dotted module path exposing define_catalog() and
define_host(), e.g. examples.idleloops_catalog"""


def main(argv: list[str] | None = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if len(args) != 1:
        print(_USAGE, file=sys.stderr)
        sys.exit(1)

    from loopforecast.cli import load_forecast

    # stdout carries the protocol; anything the catalog prints goes to stderr
    with contextlib.redirect_stdout(sys.stderr):
        catalog, host = load_forecast(args[0])

    from loopforecast.mcp.server import create_server

    create_server(catalog, host).run(transport="stdio")


if __name__ == "__main__":
    main()
