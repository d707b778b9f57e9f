"""
Tests for the diagnostic logger and its registration.
"""

from plugin_ci.core.bootstrap import bootstrap
from plugin_ci.core.container import get_container
from plugin_ci.core.interfaces.logger import ILogger
from plugin_ci.core.settings import load_settings
from plugin_ci.services.logging import LOG_FILENAME, NullLogger, PluginCILogger, get_logger


class TestPluginCILogger:
    """Tests for PluginCILogger output."""

    def test_file_records_carry_job_name(self, tmp_path):
        logger = PluginCILogger(level="info", log_dir=tmp_path / "logs", job="build_linux")
        logger.info("Merged %d files", 3)
        logger.debug("not written")

        text = (tmp_path / "logs" / LOG_FILENAME).read_text()
        assert "[INFO] build_linux: Merged 3 files" in text
        assert "not written" not in text

    def test_console_output(self, tmp_path, capsys):
        logger = PluginCILogger(level="warning", console_enabled=True, file_enabled=False)
        logger.warning("Skipped %s", "coverage.json")

        assert "local: Skipped coverage.json" in capsys.readouterr().err
        assert logger.log_file is None

    def test_unwritable_log_dir_disables_file(self, tmp_path):
        blocker = tmp_path / "blocked"
        blocker.write_text("")

        logger = PluginCILogger(log_dir=blocker / "logs")

        assert logger.log_file is None
        logger.error("still usable")


class TestLoggerResolution:
    """Tests for get_logger and bootstrap wiring."""

    def test_null_logger_before_bootstrap(self):
        assert isinstance(get_logger(), NullLogger)

    def test_bootstrap_registers_configured_logger(self, tmp_path, monkeypatch):
        monkeypatch.setenv("CIRCLE_JOB", "package")
        settings = load_settings(start_dir=str(tmp_path), logging={"file": True, "level": "info"})

        bootstrap(settings=settings, start_dir=tmp_path)
        logger = get_container().resolve(ILogger)
        logger.info("hello")

        assert isinstance(logger, PluginCILogger)
        assert logger is get_logger()
        log_file = tmp_path / "ci" / "logs" / LOG_FILENAME
        assert "package: hello" in log_file.read_text()
