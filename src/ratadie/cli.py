from __future__ import annotations

import argparse
import importlib
import inspect
import logging
import re
import sys


_DATE_RE = re.compile(r"^[+-]?\d{4,}-\d{2}-\d{2}$")


def _run_module_main(modpath: str, argv: list[str]) -> int:
    """
    Import module and run its main().

    Supports:
      - main(argv: list[str] | None = None) -> int|None
      - main() -> int|None
    """
    mod = importlib.import_module(modpath)
    if not hasattr(mod, "main"):
        raise SystemExit(f"Module {modpath} has no main()")
    fn = getattr(mod, "main")

    sig = inspect.signature(fn)
    if len(sig.parameters) == 0:
        rv = fn()
    else:
        rv = fn(argv)
    return int(rv or 0)


def _configure_logging(verbose: int, quiet: bool) -> None:
    if quiet:
        level = logging.ERROR
    elif verbose >= 2:
        level = logging.DEBUG
    elif verbose == 1:
        level = logging.INFO
    else:
        level = logging.WARNING
    logging.basicConfig(level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s")


def cmd_list(argv: list[str]) -> int:
    import ratadie

    p = argparse.ArgumentParser(prog="ratadie list", description="List registered algorithms")
    p.parse_args(argv)

    for name in ratadie.list_algorithms():
        algo = ratadie.get_algorithm(name)
        b = algo.bounds
        print(f"{name:<28} {algo.year_type.name:>7} {algo.rata_die_type.name:>7}  epoch {str(algo.epoch):<12}"
              f"  rata die [{b.rata_die_min}, {b.rata_die_max}]")
    return 0


def cmd_info(argv: list[str]) -> int:
    import ratadie

    p = argparse.ArgumentParser(prog="ratadie info", description="Show configuration and bounds of an algorithm")
    p.add_argument("name")
    args = p.parse_args(argv)

    info = ratadie.algorithm_info(args.name)
    print(f"{args.name}")
    print(f"  family        = {info['id']['family']} (version {info['id']['version']})")
    print(f"  year type     = {info['year_type']}")
    print(f"  rata die type = {info['rata_die_type']}")
    print(f"  epoch         = {info['epoch']}")
    print()
    for key, value in info["bounds"].items():
        print(f"  {key:<18} = {value}")
    if "constants" in info:
        print()
        for key, value in info["constants"].items():
            print(f"  {key:<18} = {value}")
    return 0


def cmd_to_date(argv: list[str]) -> int:
    import ratadie

    p = argparse.ArgumentParser(prog="ratadie to-date", description="Day count -> date")
    p.add_argument("n", type=int)
    p.add_argument("--algorithm", default="gregorian")
    args = p.parse_args(argv)

    print(ratadie.to_date(args.n, algorithm=args.algorithm))
    return 0


def cmd_to_rata_die(argv: list[str]) -> int:
    import ratadie

    p = argparse.ArgumentParser(prog="ratadie to-rata-die", description="Date -> day count")
    p.add_argument("date", help="[-]YYYY-MM-DD")
    p.add_argument("--algorithm", default="gregorian")

    # A negative year looks like an option to argparse.
    dates = [a for a in argv if _DATE_RE.match(a)]
    if dates:
        argv = [a for a in argv if a is not dates[0]] + ["--", dates[0]]
    args = p.parse_args(argv)

    print(ratadie.to_rata_die(ratadie.parse_date(args.date), algorithm=args.algorithm))
    return 0


def cmd_validate(argv: list[str]) -> int:
    import ratadie

    p = argparse.ArgumentParser(prog="ratadie validate", description="Run the boundary and round-trip checks")
    p.add_argument("names", nargs="+", metavar="NAME")
    p.add_argument("--window", type=int, default=None, help="Only sweep W values next to the epoch and each bound")
    p.add_argument("--chunk-size", type=int, default=1 << 22)
    p.add_argument("--fail-fast", action="store_true")
    args = p.parse_args(argv)

    status = 0
    for name in args.names:
        report = ratadie.validate(name, window=args.window, chunk_size=args.chunk_size, fail_fast=args.fail_fast)
        print(report.summary())
        if not report.ok:
            status = 1
    return status


def main(argv: list[str] | None = None) -> int:
    if argv is None:
        argv = sys.argv[1:]

    p = argparse.ArgumentParser(prog="ratadie", description="Day count <-> Gregorian date conversion toolkit.")
    p.add_argument("-v", "--verbose", action="count", default=0, help="More logging (repeatable)")
    p.add_argument("-q", "--quiet", action="store_true", help="Only log errors")
    sub = p.add_subparsers(dest="cmd", required=True)

    sub.add_parser("list", help="List registered algorithms")
    sub.add_parser("info", help="Show configuration and bounds of an algorithm")
    sub.add_parser("to-date", help="Day count -> date")
    sub.add_parser("to-rata-die", help="Date -> day count")
    sub.add_parser("validate", help="Run the boundary and round-trip checks")

    # design tools
    sub.add_parser("constants", help="Derive fast division constants.")

    args, rest = p.parse_known_args(argv)
    _configure_logging(args.verbose, args.quiet)

    if args.cmd == "list":
        return cmd_list(rest)

    if args.cmd == "info":
        return cmd_info(rest)

    if args.cmd == "to-date":
        return cmd_to_date(rest)

    if args.cmd == "to-rata-die":
        return cmd_to_rata_die(rest)

    if args.cmd == "validate":
        return cmd_validate(rest)

    if args.cmd == "constants":
        return _run_module_main("ratadie.design.fast_division", rest)

    raise RuntimeError("unreachable")


if __name__ == "__main__":
    raise SystemExit(main())
