from __future__ import annotations

import argparse
import logging
from typing import Optional

import colorama

from .models import PortRange, ScanConfig, ScanMode
from .output import DEFAULT_LOG_PATH, ResultSink
from .scanner import ScanAborted, scan

DEFAULT_START_PORT = 1
DEFAULT_END_PORT = 1023
DEFAULT_THREADS = 50
DEFAULT_TIMEOUT_MS = 200

MIN_THREADS = 1
MAX_THREADS = 5000
MIN_TIMEOUT_MS = 1


def setup_logging(verbose: bool = False):
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.INFO,
        format="%(asctime)s - %(levelname)s - %(message)s",
        handlers=[logging.StreamHandler()],
    )


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="connscan",
        description="Multithreaded TCP connect scanner with optional banner grabbing",
        usage="%(prog)s <ipv4> [start_port end_port] [num_threads] [--fast|--full] [--timeout ms] [--output path] [-v]",
    )
    p.add_argument("target", help="Target IPv4 address")
    p.add_argument(
        "numbers",
        nargs="*",
        type=int,
        metavar="N",
        help=f"start_port end_port [num_threads] (default: {DEFAULT_START_PORT} {DEFAULT_END_PORT} {DEFAULT_THREADS})",
    )
    mode = p.add_mutually_exclusive_group()
    mode.add_argument("--fast", dest="mode", action="store_const", const=ScanMode.FAST, help="Connect only, no banner grab")
    mode.add_argument("--full", dest="mode", action="store_const", const=ScanMode.FULL, help="Connect and grab banner (default)")
    p.add_argument("--timeout", type=int, default=DEFAULT_TIMEOUT_MS, help=f"Connect/recv timeout in ms (default: {DEFAULT_TIMEOUT_MS})")
    p.add_argument("--output", default=DEFAULT_LOG_PATH, help=f"Results file, truncated on start (default: {DEFAULT_LOG_PATH})")
    p.add_argument("-v", "--verbose", action="store_true", help="Debug logging")
    p.set_defaults(mode=ScanMode.FULL)
    return p


def clamp(value: int, lo: int, hi: Optional[int] = None) -> int:
    value = max(lo, value)
    if hi is not None:
        value = min(hi, value)
    return value


def parse_args(argv=None) -> argparse.Namespace:
    parser = build_parser()
    # flags may appear between the positional numbers
    args = parser.parse_intermixed_args(argv)

    start, end, threads = DEFAULT_START_PORT, DEFAULT_END_PORT, DEFAULT_THREADS
    if len(args.numbers) == 2:
        start, end = args.numbers
    elif len(args.numbers) == 3:
        start, end, threads = args.numbers
    elif args.numbers:
        parser.error("expected either no port numbers, 'start end' or 'start end threads'")

    args.start = start
    args.end = end
    args.threads = clamp(threads, MIN_THREADS, MAX_THREADS)
    args.timeout = clamp(args.timeout, MIN_TIMEOUT_MS)
    return args


def main(argv=None) -> int:
    args = parse_args(argv)
    setup_logging(args.verbose)
    colorama.just_fix_windows_console()

    try:
        config = ScanConfig(target=args.target.strip(), mode=args.mode, timeout_ms=args.timeout)
        port_range = PortRange(args.start, args.end)
    except ValueError as e:
        raise SystemExit(str(e))

    print(
        f"Scanning {config.target} (ports {port_range.start}-{port_range.end}) with {args.threads} threads, "
        f"mode={config.mode.value}, timeout={config.timeout_ms} ms..."
    )

    try:
        sink = ResultSink(args.output).open()
    except OSError as e:
        raise SystemExit(f"Could not open output file {args.output}: {e}")

    try:
        summary = scan(config, port_range, args.threads, sink)
    except ScanAborted as e:
        logging.error("Scan aborted: %s", e)
        return 1
    except KeyboardInterrupt:
        print("\nInterrupted.")
        return 130
    finally:
        sink.close()

    print("Scan complete.")
    print(f"Found {summary.open_ports} open ports")
    print(f"Total scan time: {summary.elapsed_s:.2f} seconds")
    print(f"Ports per second: {summary.ports_per_second:.2f}")
    print(f"Saved results to {args.output}")
    return 0
