import logging

import pytest

from envdoctor import checks, cli

VERSIONS = {
    "node --version": "v20.11.1",
    "pnpm --version": "9.12.4",
}


@pytest.fixture
def project(tmp_path):
    for name in ("package.json", "tsconfig.json", "vite.config.ts"):
        (tmp_path / name).write_text("{}")
    (tmp_path / "node_modules").mkdir()
    return tmp_path


@pytest.fixture
def fake_tools(monkeypatch):
    monkeypatch.setattr(checks, "run_command", lambda command: VERSIONS.get(command))


def test_ready_environment_exits_zero(project, fake_tools, capsys):
    code = cli.main(["--root", str(project), "--skip-validation", "--no-color"])
    out = capsys.readouterr().out

    assert code == 0
    assert "✓ Node.js: v20.11.1" in out
    assert "✓ pnpm: 9.12.4" in out
    assert "✗ Rust: Not installed (optional, for WASM)" in out
    assert "✓ node_modules: Installed" in out
    assert "Environment is ready for development!" in out
    assert "\033[" not in out


def test_outside_project_reports_and_exits_one(tmp_path, fake_tools, capsys):
    code = cli.main(["--root", str(tmp_path), "--skip-validation", "--no-color"])
    out = capsys.readouterr().out

    assert code == 1
    assert "✗ package.json: Not found" in out
    assert "  Fix: Run from project root directory" in out
    assert "✗ node_modules: Not installed" in out
    assert "  Fix: pnpm install" in out
    assert "Some issues need to be fixed." in out


def test_old_node_exits_one(project, monkeypatch, capsys):
    monkeypatch.setitem(VERSIONS, "node --version", "v16.20.0")
    monkeypatch.setattr(checks, "run_command", lambda command: VERSIONS.get(command))

    assert cli.main(["--root", str(project), "--skip-validation", "--no-color"]) == 1
    assert "✗ Node.js: v16.20.0 (need 20+)" in capsys.readouterr().out


def test_failing_validation_is_advisory(project, fake_tools, monkeypatch, capsys):
    timeouts = []

    def fake_succeeds(command, timeout, cwd=None):
        timeouts.append(timeout)
        return command != "pnpm lint"

    monkeypatch.setattr(checks, "command_succeeds", fake_succeeds)
    code = cli.main(["--root", str(project), "--timeout", "5", "--no-color"])
    out = capsys.readouterr().out

    assert code == 0
    assert "✓ Tests: Passing" in out
    assert "✗ Lint: Issues found" in out
    assert "  Fix: pnpm lint:fix" in out
    assert "✓ TypeScript: No errors" in out
    assert timeouts == [5.0, 5.0, 5.0]


@pytest.mark.parametrize("timeout", ["0", "-3"])
def test_rejects_non_positive_timeout(timeout):
    with pytest.raises(SystemExit) as exc:
        cli.main(["--timeout", timeout])
    assert exc.value.code == 2


def test_setup_logging_levels(monkeypatch):
    assert cli.setup_logging(verbose=True).level == logging.DEBUG

    monkeypatch.setenv(cli.LOG_LEVEL_ENV, "info")
    logger = cli.setup_logging()
    assert logger.level == logging.INFO

    monkeypatch.setenv(cli.LOG_LEVEL_ENV, "bogus")
    assert cli.setup_logging().level == logging.WARNING

    handlers = [h for h in logger.handlers if getattr(h, "_envdoctor", False)]
    assert len(handlers) == 1
