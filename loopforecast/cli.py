from __future__ import annotations

import argparse
import importlib
import json
import logging
import sys
from types import ModuleType

from loopforecast.catalog import ActionCatalog
from loopforecast.formatting import format_text_report
from loopforecast.host import HostContext
from loopforecast.simulation import simulate


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="loopforecast",
        description="loopforecast: action list cost forecasting CLI",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log forecast details to stderr"
    )
    sub = parser.add_subparsers(dest="command")

    pred = sub.add_parser("predict", help="Forecast an action list")
    pred.add_argument(
        "catalog_module",
        help="Python module with define_catalog() and define_host()",
    )
    pred.add_argument(
        "--action",
        dest="actions",
        action="append",
        default=[],
        metavar="NAME=COUNT",
        help="Action list entry; repeat for each entry, in order",
    )
    pred.add_argument(
        "--list",
        dest="list_file",
        default=None,
        help='JSON file holding [{"name": ..., "loops": ...}, ...]',
    )
    pred.add_argument("--export-csv", default=None, help="CSV export path prefix")
    pred.add_argument("--export-json", default=None, help="JSON export path")
    pred.add_argument("--plot", default=None, help="Plot output path (PNG)")

    sub.add_parser("actions", help="List the actions of a catalog").add_argument(
        "catalog_module", help="Python module with define_catalog()"
    )

    return parser


def _import(module_path: str, *required: str) -> ModuleType:
    mod = importlib.import_module(module_path)
    for name in required:
        if not hasattr(mod, name):
            print(f"Error: module {module_path!r} has no {name}() function")
            sys.exit(1)
    return mod


def load_catalog(module_path: str) -> ActionCatalog:
    """Import module and call define_catalog()."""
    return _import(module_path, "define_catalog").define_catalog()


def load_forecast(module_path: str) -> tuple[ActionCatalog, HostContext]:
    """Import module and call define_catalog() and define_host()."""
    mod = _import(module_path, "define_catalog", "define_host")
    return mod.define_catalog(), mod.define_host()


def parse_action(text: str) -> tuple[str, int]:
    """Parse ``NAME=COUNT`` (count defaults to 1)."""
    name, sep, count = text.rpartition("=")
    if not sep:
        return text.strip(), 1
    try:
        return name.strip(), int(count)
    except ValueError:
        raise argparse.ArgumentTypeError(f"Invalid repeat count in {text!r}")


def read_action_list(path: str) -> list[dict]:
    with open(path) as f:
        data = json.load(f)
    if not isinstance(data, list):
        raise ValueError(f"{path}: expected a JSON list of actions")
    return data


def main(argv: list[str] | None = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    if args.command is None:
        parser.print_help()
        sys.exit(0)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )

    if args.command == "actions":
        catalog = load_catalog(args.catalog_module)
        for name in catalog.names():
            rule = catalog.get(name)
            kind = "loop" if rule.has_loop else "instant"
            print(f"{name} ({kind})")
        return

    if args.command == "predict":
        catalog, host = load_forecast(args.catalog_module)

        actions: list = []
        if args.list_file:
            actions.extend(read_action_list(args.list_file))
        try:
            actions.extend(parse_action(a) for a in args.actions)
        except argparse.ArgumentTypeError as e:
            parser.error(str(e))

        report = simulate(actions, catalog, host)
        print(format_text_report(report, catalog.config.name))

        if args.export_csv:
            from loopforecast.export import export_csv
            export_csv(report, args.export_csv)
            print(f"\nCSV exported to {args.export_csv}_*.csv")

        if args.export_json:
            from loopforecast.export import export_json
            export_json(report, args.export_json)
            print(f"\nJSON exported to {args.export_json}")

        if args.plot:
            from loopforecast.visualization import plot_forecast
            plot_forecast(report, args.plot, catalog.config.name)
            print(f"\nPlot saved to {args.plot}")
