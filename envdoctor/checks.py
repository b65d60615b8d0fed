"""
EnvDoctor Checks — Result/Check types and the built-in check factories.

A check is a named, zero-argument probe of the environment that always
answers with exactly one Result. Checks come in four shapes:
  - "tool": run `<tool> --version`, gate on a minimum major version
  - "optional tool": same, but a failure is advisory only
  - "artifact": a file or directory must exist under the project root
  - "command": a validation command (tests, lint, typecheck) must exit 0
    within a timeout

Tools are declared in a capability table (TOOLS); new ones are added by
appending a ToolSpec, not by writing new control flow.
"""

import logging
from dataclasses import dataclass
from functools import wraps
from pathlib import Path
from typing import Callable, Optional

from packaging.version import InvalidVersion, Version

from envdoctor.probe import Command, command_succeeds, run_command
from envdoctor.version_detector import (
    meets_minimum,
    meets_minimum_version,
    parse_version,
)

logger = logging.getLogger(__name__)

REQUIRED_NODE_VERSION = 20
REQUIRED_PNPM_VERSION = 9

# Seconds a validation command may run before it is killed and marked failing
DEFAULT_TIMEOUT = 120.0


@dataclass(frozen=True)
class Result:
    """The outcome of one check. `fix` is only kept on failures."""
    ok: bool
    message: str
    fix: Optional[str] = None

    def __post_init__(self):
        if self.ok and self.fix is not None:
            object.__setattr__(self, "fix", None)


@dataclass(frozen=True)
class Check:
    """A named unit of verification.

    Attributes:
        name: Label shown in the report
        evaluate: Inspects the environment and returns one Result; must not raise
        required: If True, a failure makes the whole run fail
        section: Display group; the report prints a divider when it changes
    """
    name: str
    evaluate: Callable[[], Result]
    required: bool = True
    section: str = ""


@dataclass(frozen=True)
class ToolSpec:
    """One row of the tool capability table.

    Attributes:
        name: Display name (e.g., "Node.js")
        command: Version command (e.g., "node --version")
        minimum_major: Lowest accepted major version, None for no gate
        required: False for optional toolchains
        install_fix: Remediation when the tool is missing
        upgrade_fix: Remediation when the version is too old
        missing_message: Message when the tool is missing
        strip_prefix: Removed from the reported version (e.g., "rustc ")
        minimum_version: Optional full version floor (e.g., "20.11.0"),
            checked in addition to minimum_major
    """
    name: str
    command: Command
    minimum_major: Optional[int] = None
    required: bool = True
    install_fix: Optional[str] = None
    upgrade_fix: Optional[str] = None
    missing_message: str = "Not installed"
    strip_prefix: str = ""
    minimum_version: Optional[str] = None

    def __post_init__(self):
        if self.minimum_version is not None:
            try:
                Version(self.minimum_version)
            except InvalidVersion:
                raise ValueError(
                    f"{self.name}: invalid minimum_version {self.minimum_version!r}"
                ) from None


def guarded(fn: Callable[[], Result]) -> Callable[[], Result]:
    """Turn any exception raised by a check body into a failed Result."""
    @wraps(fn)
    def evaluate() -> Result:
        try:
            return fn()
        except Exception as e:
            logger.debug("Check body %s raised", getattr(fn, "__name__", fn), exc_info=True)
            return Result(ok=False, message=str(e) or type(e).__name__)
    return evaluate


def evaluate_tool(spec: ToolSpec, version: Optional[str]) -> Result:
    """Decide a tool check from its probed version output (None = unavailable)."""
    if not version:
        return Result(ok=False, message=spec.missing_message, fix=spec.install_fix)

    if spec.minimum_major is not None or spec.minimum_version is not None:
        parsed = parse_version(version)
        need = None
        if spec.minimum_major is not None and not meets_minimum(parsed, spec.minimum_major):
            need = spec.minimum_major
        elif (spec.minimum_version is not None
              and not meets_minimum_version(parsed, spec.minimum_version)):
            need = spec.minimum_version
        if need is not None:
            return Result(
                ok=False,
                message=f"{version} (need {need}+)",
                fix=spec.upgrade_fix,
            )

    shown = version.replace(spec.strip_prefix, "", 1) if spec.strip_prefix else version
    return Result(ok=True, message=shown)


def tool_check(
    spec: ToolSpec,
    section: str = "tools",
    probe: Optional[Callable[[Command], Optional[str]]] = None,
) -> Check:
    """Build a version check from a capability table row.

    `probe` defaults to running the command (see envdoctor.probe.run_command).
    """
    def evaluate() -> Result:
        version = (probe or run_command)(spec.command)
        return evaluate_tool(spec, version)
    evaluate.__name__ = f"tool_{spec.name}"
    return Check(name=spec.name, evaluate=guarded(evaluate),
                 required=spec.required, section=section)


def artifact_check(
    name: str,
    path: str,
    root: str | Path = ".",
    missing_message: str = "Not found",
    fix: Optional[str] = None,
    found_message: str = "Found",
    section: str = "project",
) -> Check:
    """Build a required check that passes when `root/path` exists."""
    def evaluate() -> Result:
        if not (Path(root) / path).exists():
            return Result(ok=False, message=missing_message, fix=fix)
        return Result(ok=True, message=found_message)
    evaluate.__name__ = f"artifact_{name}"
    return Check(name=name, evaluate=guarded(evaluate), required=True, section=section)


def command_check(
    name: str,
    command: Command,
    ok_message: str,
    fail_message: str,
    fix: Optional[str] = None,
    timeout: float = DEFAULT_TIMEOUT,
    root: str | Path = ".",
    required: bool = True,
    section: str = "validation",
) -> Check:
    """Build a check that passes when `command` exits 0 within `timeout` seconds.

    A timeout counts as a failure, the same as a non-zero exit.
    """
    if timeout is None or timeout <= 0:
        raise ValueError(f"{name}: a positive timeout is required, got {timeout!r}")

    def evaluate() -> Result:
        if command_succeeds(command, timeout=timeout, cwd=str(root)):
            return Result(ok=True, message=ok_message)
        return Result(ok=False, message=fail_message, fix=fix)
    evaluate.__name__ = f"command_{name}"
    return Check(name=name, evaluate=guarded(evaluate), required=required, section=section)


# =============================================================================
# TOOL CAPABILITY TABLE
# =============================================================================
TOOLS: list[ToolSpec] = [
    ToolSpec(
        name="Node.js",
        command="node --version",
        minimum_major=REQUIRED_NODE_VERSION,
        install_fix="Install Node.js from https://nodejs.org",
        upgrade_fix="Update Node.js",
    ),
    ToolSpec(
        name="pnpm",
        command="pnpm --version",
        minimum_major=REQUIRED_PNPM_VERSION,
        install_fix="npm install -g pnpm",
        upgrade_fix="npm install -g pnpm@latest",
    ),
    ToolSpec(
        name="Rust",
        command="rustc --version",
        required=False,
        missing_message="Not installed (optional, for WASM)",
        install_fix='curl --proto "=https" --tlsv1.2 -sSf https://sh.rustup.rs | sh',
        strip_prefix="rustc ",
    ),
    ToolSpec(
        name="wasm-pack",
        command="wasm-pack --version",
        required=False,
        missing_message="Not installed (optional, for WASM)",
        install_fix="cargo install wasm-pack",
        strip_prefix="wasm-pack ",
    ),
]


def register_tool(spec: ToolSpec) -> None:
    """Register a new tool in the capability table.

    TOOLS is module-global: a registered tool stays in every later
    default_checks() call in the same process.
    """
    TOOLS.append(spec)


def default_checks(
    root: str | Path = ".",
    timeout: float = DEFAULT_TIMEOUT,
    include_validation: bool = True,
) -> list[Check]:
    """The project's check set, in report order.

    Args:
        root: Project directory the artifact and validation checks run in.
        timeout: Per-command timeout for the validation checks.
        include_validation: If False, skip the (slow) tests/lint/typecheck checks.
    """
    checks = [tool_check(spec) for spec in TOOLS]

    checks += [
        artifact_check("package.json", "package.json", root=root,
                       fix="Run from project root directory"),
        artifact_check("node_modules", "node_modules", root=root,
                       missing_message="Not installed", fix="pnpm install",
                       found_message="Installed"),
        artifact_check("tsconfig.json", "tsconfig.json", root=root),
        artifact_check("vite.config.ts", "vite.config.ts", root=root),
    ]

    if include_validation:
        # Advisory: failures here never change the exit code
        checks += [
            command_check("Tests", "pnpm test", "Passing", "Failing",
                          fix="pnpm test to see details",
                          timeout=timeout, root=root, required=False),
            command_check("Lint", "pnpm lint", "Clean", "Issues found",
                          fix="pnpm lint:fix",
                          timeout=timeout, root=root, required=False),
            command_check("TypeScript", "pnpm typecheck", "No errors", "Type errors",
                          fix="pnpm typecheck to see details",
                          timeout=timeout, root=root, required=False),
        ]

    return checks
