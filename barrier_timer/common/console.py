"""ANSI colour codes and console output helpers for the CLI."""

from __future__ import annotations

import sys


class C:
    """ANSI colour codes (no-op if not a tty)."""

    _tty = sys.stdout.isatty()
    RED = "\033[0;31m" if _tty else ""
    GREEN = "\033[0;32m" if _tty else ""
    CYAN = "\033[0;36m" if _tty else ""
    YELLOW = "\033[1;33m" if _tty else ""
    BOLD = "\033[1m" if _tty else ""
    NC = "\033[0m" if _tty else ""


def info(msg: str) -> None:
    print(f"{C.CYAN}[INFO]{C.NC}  {msg}")


def ok(msg: str) -> None:
    print(f"{C.GREEN}[ OK ]{C.NC} {msg}")


def warn(msg: str) -> None:
    print(f"{C.YELLOW}[WARN]{C.NC} {msg}")


def fail(msg: str) -> None:
    print(f"{C.RED}[FAIL]{C.NC} {msg}")
    sys.exit(1)


def banner(title: str, width: int = 62) -> None:
    print()
    print(f"{C.BOLD}{'=' * width}{C.NC}")
    print(f"{C.BOLD}  {title}{C.NC}")
    print(f"{C.BOLD}{'=' * width}{C.NC}")
    print()


def fmt_ns(ns: float) -> str:
    """Render a nanosecond span in the most readable unit."""
    if abs(ns) >= 1_000_000_000:
        return f"{ns / 1_000_000_000:,.3f} s"
    if abs(ns) >= 1_000_000:
        return f"{ns / 1_000_000:,.3f} ms"
    if abs(ns) >= 1_000:
        return f"{ns / 1_000:,.1f} µs"
    return f"{ns:,.0f} ns"
