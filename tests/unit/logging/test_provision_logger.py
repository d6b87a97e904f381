"""Unit tests for ProvisionLogger and its scoped loggers."""

import io
import json
import logging

import pytest

from cocinero_core.logging import LibraryLogHandler, LogConfig, ProvisionLogger
from cocinero_core.types import LogFormat, LogLevel


def make_logger(**kwargs) -> tuple[ProvisionLogger, io.StringIO]:
    output = io.StringIO()
    return ProvisionLogger(LogConfig(output=output, **kwargs)), output


class TestProvisionLogger:
    def test_level_filtering(self):
        logger, output = make_logger(level=LogLevel.WARN)

        logger._log(LogLevel.INFO, "run", "hidden")
        logger._log(LogLevel.ERROR, "run", "shown")

        assert "hidden" not in output.getvalue()
        assert "shown" in output.getvalue()

    def test_component_switch(self):
        logger, output = make_logger(components={"action": False})

        logger._log(LogLevel.INFO, "action", "quiet")
        logger._log(LogLevel.INFO, "hook", "loud")

        assert "quiet" not in output.getvalue()
        assert "loud" in output.getvalue()

    def test_json_format(self):
        logger, output = make_logger(format=LogFormat.JSON)

        logger.run("run-1").started(3)

        entry = json.loads(output.getvalue())
        assert entry["level"] == "INFO"
        assert entry["component"] == "run"
        assert entry["run_id"] == "run-1"
        assert entry["event"] == "run_started"
        assert entry["action_count"] == 3
        assert entry["timestamp"].endswith("Z")

    def test_colored_format_has_component_tag(self):
        logger, output = make_logger()

        logger.run("run-1").completed(1500, 4)

        text = output.getvalue()
        assert "[RUN]" in text
        assert "Provisioning completed (4 actions, 1.50s)" in text

    def test_context_truncated(self):
        logger, output = make_logger(truncate_at=20)

        logger._log(LogLevel.INFO, "run", "msg", {"key": "x" * 100})

        assert "..." in output.getvalue()

    def test_context_hidden(self):
        logger, output = make_logger(show_context=False)

        logger._log(LogLevel.INFO, "run", "msg", {"secret_key": "v"})

        assert "secret_key" not in output.getvalue()


class TestScopedLoggers:
    def test_action_logger_prefix(self):
        logger, output = make_logger(level=LogLevel.DEBUG)

        action = logger.run("run-1").action(1, 5)
        action.started("shell: make", step_index=0, kind="shell_command")
        action.completed(10)

        text = output.getvalue()
        assert "[2/5] shell: make" in text
        assert "[2/5] done" in text

    def test_output_only_at_debug(self):
        logger, output = make_logger(level=LogLevel.INFO)

        logger.run("run-1").action(0, 1).output("hello", "")

        assert output.getvalue() == ""

    def test_output_disabled(self):
        logger, output = make_logger(level=LogLevel.DEBUG, show_output=False)

        logger.run("run-1").action(0, 1).output("hello", "err")

        assert output.getvalue() == ""

    def test_cancelled(self):
        logger, output = make_logger()

        logger.run("run-1").cancelled(completed=2, remaining=3)

        assert "Provisioning cancelled (2 applied, 3 not started)" in output.getvalue()

    def test_hook_events(self):
        logger, output = make_logger()
        hooks = logger.run("run-1").hooks()

        hooks.reloading("nginx.service")
        hooks.skipped("run failed")
        hooks.completed()

        text = output.getvalue()
        assert "Enabling and reloading nginx.service" in text
        assert "Post-provision hooks skipped: run failed" in text
        assert "[HOOK]" in text


class TestLibraryLogs:
    @pytest.fixture(autouse=True)
    def restore_package_logger(self):
        package = logging.getLogger("cocinero_core")
        yield
        for handler in list(package.handlers):
            if isinstance(handler, LibraryLogHandler):
                package.removeHandler(handler)
        package.setLevel(logging.NOTSET)

    def test_records_forwarded_with_component(self):
        logger, output = make_logger(format=LogFormat.JSON)
        logger.capture_library_logs()

        logging.getLogger("cocinero_core.plan.executors").warning("File %s has no disclaimer", "motd")

        entry = json.loads(output.getvalue())
        assert entry["level"] == "WARN"
        assert entry["component"] == "plan"
        assert entry["message"] == "File motd has no disclaimer"

    def test_level_applies(self):
        logger, output = make_logger(level=LogLevel.ERROR)
        logger.capture_library_logs()

        logging.getLogger("cocinero_core.recipe.cookbook").warning("skipped")

        assert output.getvalue() == ""

    def test_component_switch_applies(self):
        logger, output = make_logger(components={"plan": False})
        logger.capture_library_logs()

        logging.getLogger("cocinero_core.plan.executors").warning("quiet")

        assert "quiet" not in output.getvalue()

    def test_second_capture_replaces_first(self):
        first, first_output = make_logger()
        second, second_output = make_logger()
        first.capture_library_logs()
        second.capture_library_logs()

        logging.getLogger("cocinero_core.config.loader").warning("once")

        handlers = [
            h for h in logging.getLogger("cocinero_core").handlers if isinstance(h, LibraryLogHandler)
        ]
        assert [h.target for h in handlers] == [second]
        assert first_output.getvalue() == ""
        assert "once" in second_output.getvalue()
