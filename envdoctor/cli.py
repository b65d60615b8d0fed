"""
EnvDoctor CLI — Diagnose the development environment.

Run from the project root:
    envdoctor                      # Run every check
    envdoctor --skip-validation    # Skip tests/lint/typecheck (fast)
    envdoctor --timeout 60         # Per-command timeout for validation checks
    envdoctor --root ../other-app  # Check another project directory
    envdoctor --no-color -v        # Plain output, debug logging on stderr

Exit code is 0 when every required check passes, 1 otherwise.
"""

import argparse
import logging
import os
import sys
from typing import Optional

from envdoctor import __version__
from envdoctor.checks import DEFAULT_TIMEOUT, default_checks
from envdoctor.console import Console
from envdoctor.runner import finalize, run_checks

LOG_LEVEL_ENV = "ENVDOCTOR_LOG_LEVEL"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Send envdoctor's log records to stderr, keeping stdout for the report.

    Priority of log level: --verbose > $ENVDOCTOR_LOG_LEVEL > WARNING.
    """
    logger = logging.getLogger("envdoctor")
    if verbose:
        level = logging.DEBUG
    else:
        raw = os.environ.get(LOG_LEVEL_ENV, "").strip().upper()
        level = logging.getLevelName(raw) if raw else logging.WARNING
        if not isinstance(level, int):
            level = logging.WARNING
    logger.setLevel(level)

    # Idempotent: one handler, however many times main() runs in-process
    if not any(getattr(h, "_envdoctor", False) for h in logger.handlers):
        handler = logging.StreamHandler(sys.stderr)
        handler.setFormatter(logging.Formatter("%(levelname)s %(name)s: %(message)s"))
        handler._envdoctor = True
        logger.addHandler(handler)
    logger.propagate = False
    return logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="envdoctor",
        description="Diagnose development environment issues",
    )
    parser.add_argument("--root", default=".",
                        help="Project directory to check (default: current directory)")
    parser.add_argument("--timeout", type=float, default=DEFAULT_TIMEOUT,
                        help=f"Seconds before a validation command is killed (default: {DEFAULT_TIMEOUT:g})")
    parser.add_argument("--skip-validation", action="store_true",
                        help="Skip the tests, lint and typecheck commands")
    parser.add_argument("--no-color", action="store_true", help="Disable coloured output")
    parser.add_argument("-v", "--verbose", action="store_true", help="Debug logging on stderr")
    parser.add_argument("--version", action="version", version=f"%(prog)s {__version__}")
    return parser


def main(argv: Optional[list[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if args.timeout <= 0:
        parser.error("--timeout must be positive")

    logger = setup_logging(args.verbose)
    console = Console(color=False if args.no_color else None)

    checks = default_checks(
        root=args.root,
        timeout=args.timeout,
        include_validation=not args.skip_validation,
    )
    logger.debug("Running %d checks in %s", len(checks), os.path.abspath(args.root))

    console.header("EnvDoctor - Environment Check")
    try:
        report = run_checks(checks, console)
    except KeyboardInterrupt:
        console.log("\nInterrupted.")
        return 130
    return finalize(report, console)


if __name__ == "__main__":
    sys.exit(main())
