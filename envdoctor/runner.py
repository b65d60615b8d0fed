"""
EnvDoctor Runner — Core diagnostic engine.

Runs an ordered list of checks one at a time, printing each result as soon
as it is known, and folds the results into a RunReport. The finalizer turns
a report into the closing banner and the process exit code.

Usage:
    from envdoctor.checks import default_checks
    from envdoctor.runner import finalize, run_checks

    report = run_checks(default_checks())
    sys.exit(finalize(report))
"""

import logging
from dataclasses import dataclass, field
from typing import Iterable, Optional

from envdoctor.checks import Check, Result
from envdoctor.console import C, Console

logger = logging.getLogger(__name__)

QUICK_START = [
    ("pnpm dev", "Start development server"),
    ("pnpm test:watch", "Run tests in watch mode"),
    ("pnpm validate", "Run all checks"),
]
RERUN_COMMAND = "envdoctor"


@dataclass(frozen=True)
class RunReport:
    """Results of one run, in the order the checks were declared."""
    results: tuple[tuple[Check, Result], ...] = field(default_factory=tuple)

    @property
    def has_blocking_failure(self) -> bool:
        return any(check.required and not result.ok for check, result in self.results)


def evaluate_check(check: Check) -> Result:
    """Run one check; a crash becomes a failed Result instead of propagating."""
    try:
        result = check.evaluate()
    except Exception as e:
        logger.debug("Check %r crashed", check.name, exc_info=True)
        return Result(ok=False, message=str(e) or type(e).__name__)
    if not isinstance(result, Result):
        return Result(ok=False, message=f"check returned {type(result).__name__}, not a Result")
    return result


def run_checks(checks: Iterable[Check], console: Optional[Console] = None) -> RunReport:
    """Run checks strictly in order, printing each result immediately.

    Args:
        checks: Checks in report order.
        console: Where to print. Defaults to stdout.

    Returns:
        RunReport with one (Check, Result) pair per check.
    """
    console = console or Console()
    results = []
    section = None

    for check in checks:
        if section is not None and check.section != section:
            console.divider()
        section = check.section

        result = evaluate_check(check)
        logger.debug("%s -> ok=%s required=%s", check.name, result.ok, check.required)
        console.result(check.name, result.ok, result.message, result.fix)
        results.append((check, result))

    return RunReport(results=tuple(results))


def finalize(report: RunReport, console: Optional[Console] = None) -> int:
    """Print the closing banner and return the process exit code.

    Returns:
        0 if no required check failed, 1 otherwise. Advisory failures
        never change the exit code.
    """
    console = console or Console()
    console.divider()

    if not report.has_blocking_failure:
        console.log("\n✅ Environment is ready for development!\n", C.GREEN)
        console.log("Quick start:", C.BLUE)
        width = max(len(cmd) for cmd, _ in QUICK_START)
        for cmd, description in QUICK_START:
            console.log(f"  {cmd:<{width}} # {description}", C.DIM)
        console.log()
        return 0

    console.log("\n⚠️  Some issues need to be fixed.\n", C.YELLOW)
    console.log(f"Run the suggested fixes above, then run: {RERUN_COMMAND}\n", C.DIM)
    return 1
