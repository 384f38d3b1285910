"""CLI for unientropy — score passwords, classify characters, manage saved settings."""

import argparse
import json
import logging
import sys

from rich import print
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table

from .common_passwords import load_wordlist
from .config import load_config, save_config
from .evaluator import Estimator
from .ranges import CatalogError


def _verdict(result) -> str:
    if result["acceptable"]:
        if result["ideal"]:
            return "[bold green]Password is ideal.[/bold green]"
        return "[yellow]Password is acceptable but not ideal.[/yellow]"
    return "[red]Password is not acceptable.[/red]"


def _estimator(args) -> Estimator:
    settings = load_config(args.config)
    if args.min_acceptable is not None:
        settings.configure("min_acceptable", args.min_acceptable)
    if args.min_ideal is not None:
        settings.configure("min_ideal", args.min_ideal)
    if args.allow:
        settings.configure("allowed_sets", args.allow)
    estimator = Estimator(settings=settings)
    for path in args.wordlist or []:
        estimator.dictionary.add(load_wordlist(path))
    return estimator


def cmd_score(args):
    result = _estimator(args).estimate(args.password)
    header = f"Entropy: {result['entropy']:.1f} / {result['max_entropy_scale']}"
    body = (
        f"Unique tokens    : {result['length']}\n"
        f"Character sets   : {', '.join(result['sets']) or '-'}\n"
        f"Allowed sets only: {'yes' if result['legal'] else 'no'}"
    )
    print(Panel(body, title=header))
    print(_verdict(result))
    if not result["legal"]:
        print("[red]Password uses characters outside the allowed sets.[/red]")


def cmd_classify(args):
    rows = Estimator().describe(args.text)
    table = Table(show_header=True, header_style="bold cyan")
    table.add_column("Char")
    table.add_column("Code point")
    table.add_column("Set")
    table.add_column("Weight / open range")
    for row in rows:
        if row["known"]:
            detail = f"{row['weight']:.3f}"
        else:
            detail = "-".join(row["open"])
        table.add_row(repr(row["char"]), row["code_point"], row["set"], detail)
    print(table)


def _parse_value(raw: str):
    """JSON when it parses (numbers, lists), otherwise the plain string."""
    try:
        return json.loads(raw)
    except ValueError:
        return raw


def cmd_config_show(args):
    settings = load_config(args.file)
    table = Table(show_header=True, header_style="bold magenta")
    table.add_column("Option")
    table.add_column("Value")
    for key, value in settings.options().items():
        table.add_row(key, json.dumps(value, ensure_ascii=False))
    print(table)


def cmd_config_set(args):
    settings = load_config(args.file)
    try:
        settings.configure(args.key, _parse_value(args.value))
    except ValueError as e:
        print(f"[red]Invalid value for {args.key}: {e}[/red]")
        return 2
    path = save_config(settings, args.file)
    print(f"[green]Saved settings to:[/green] {path}")


def cmd_config_reset(args):
    settings = load_config(args.file)
    settings.configure(args.key)
    path = save_config(settings, args.file)
    print(f"[green]Reset {args.key} in:[/green] {path}")


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="unientropy")
    parser.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    sub = parser.add_subparsers(dest="cmd", required=True)

    sc = sub.add_parser("score", help="Estimate the entropy of a password")
    sc.add_argument("password", type=str, help="Password to evaluate (wrap in quotes)")
    sc.add_argument("--config", "-c", type=str, help="Settings file")
    sc.add_argument("--min-acceptable", type=float, help="Minimum acceptable entropy")
    sc.add_argument("--min-ideal", type=float, help="Minimum ideal entropy")
    sc.add_argument("--allow", nargs="+", metavar="SET", help="Allowed character sets or aliases")
    sc.add_argument("--wordlist", action="append", metavar="FILE",
                    help="Extra common passwords, one per line (repeatable)")
    sc.set_defaults(func=cmd_score)

    cl = sub.add_parser("classify", help="Show the character set of each code point")
    cl.add_argument("text", type=str)
    cl.set_defaults(func=cmd_classify)

    cf = sub.add_parser("config", help="Saved settings")
    csub = cf.add_subparsers(dest="ccmd", required=True)

    cf_show = csub.add_parser("show", help="Print current settings")
    cf_show.add_argument("--file", "-f", type=str, help="Path to settings file")
    cf_show.set_defaults(func=cmd_config_show)

    cf_set = csub.add_parser("set", help="Set one option")
    cf_set.add_argument("--file", "-f", type=str, help="Path to settings file")
    cf_set.add_argument("key", type=str)
    cf_set.add_argument("value", type=str, help="JSON value, e.g. 80 or '[\"western\"]'")
    cf_set.set_defaults(func=cmd_config_set)

    cf_reset = csub.add_parser("reset", help="Reset one option to its default")
    cf_reset.add_argument("--file", "-f", type=str, help="Path to settings file")
    cf_reset.add_argument("key", type=str)
    cf_reset.set_defaults(func=cmd_config_reset)

    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(message)s", handlers=[RichHandler()])
    try:
        return args.func(args) or 0
    except CatalogError as e:
        print(f"[red]Character class catalog is broken: {e}[/red]")
        return 1


if __name__ == "__main__":
    sys.exit(main())
