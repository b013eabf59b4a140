"""
Tests for configuration loading and application setup
"""

import logging
import textwrap
from pathlib import Path

import pytest

from fstoolkit.config import ConfigError, ConfigManager, load_config
from fstoolkit.console import ConsoleHandler
from fstoolkit.main import create_server, main, parse_page, setup_logging
from fstoolkit.models import Config, LoggingConfig, PageRoute
from fstoolkit.server import WebServer


@pytest.fixture()
def restore_logging():
    """Keep root logger changes made by setup_logging local to a test."""
    root_logger = logging.getLogger()
    package_logger = logging.getLogger("fstoolkit")
    handlers = list(root_logger.handlers)
    level = root_logger.level
    package_handlers = list(package_logger.handlers)
    package_level = package_logger.level
    yield root_logger
    for handler in root_logger.handlers:
        if handler not in handlers:
            handler.close()
    root_logger.handlers[:] = handlers
    root_logger.setLevel(level)
    package_logger.handlers[:] = package_handlers
    package_logger.setLevel(package_level)


def write_config(tmp_path, text):
    config_path = tmp_path / "fstoolkit.yaml"
    config_path.write_text(textwrap.dedent(text), encoding="utf-8")
    return config_path


class TestLoadConfig:
    """Test YAML parsing"""

    def test_full_config(self, tmp_path):
        """All sections are parsed"""
        config_path = write_config(tmp_path, """
            server:
              addr: "127.0.0.1"
              port: 8080
            pages:
              - url: "/"
                file: "site/index.html"
              - url: "/api/config"
                file: "/srv/config.json"
            contentTypes:
              ".txt": "text/plain"
            logging:
              level: "DEBUG"
              file: "logs/fstoolkit.log"
              json: true
              max_size_mb: 5
              backup_count: 2
            """)

        config = load_config(str(config_path))

        assert config.server.addr == "127.0.0.1"
        assert config.server.port == 8080
        assert config.pages[0] == PageRoute("/", config_path.parent.resolve() / "site" / "index.html")
        assert config.pages[1].file_path == Path("/srv/config.json")
        assert config.contentTypes == {".txt": "text/plain"}
        assert config.logging == LoggingConfig(
            json=True, file="logs/fstoolkit.log", level="DEBUG", max_size_mb=5, backup_count=2
        )

    def test_defaults(self, tmp_path):
        """Missing sections fall back to defaults"""
        config = load_config(str(write_config(tmp_path, "server: {}\n")))

        assert config.server.addr == "0.0.0.0"
        assert config.server.port == 80
        assert config.pages == []
        assert config.logging.level == "INFO"

    def test_empty_file(self, tmp_path):
        """An empty file is an empty configuration"""
        assert load_config(str(write_config(tmp_path, ""))) == Config()

    def test_missing_file(self, tmp_path, caplog):
        """A missing file logs a warning and returns defaults"""
        caplog.set_level(logging.WARNING, logger="fstoolkit.config")

        config = load_config(str(tmp_path / "absent.yaml"))

        assert config == Config()
        assert any("not found" in message for message in caplog.messages)

    def test_malformed_yaml(self, tmp_path):
        """Broken YAML raises ConfigError"""
        with pytest.raises(ConfigError):
            load_config(str(write_config(tmp_path, "server: [unclosed\n")))

    def test_non_mapping_root(self, tmp_path):
        """The document root must be a mapping"""
        with pytest.raises(ConfigError):
            load_config(str(write_config(tmp_path, "- just\n- a list\n")))

    @pytest.mark.parametrize("text", [
        "server:\n  port: not-a-number\n",
        "pages:\n  - url: /\n",
        "pages: [just-a-string]\n",
    ])
    def test_invalid_values(self, tmp_path, text):
        """Wrong value types raise ConfigError"""
        with pytest.raises(ConfigError):
            load_config(str(write_config(tmp_path, text)))

    def test_manager_caches(self, tmp_path):
        """get_config loads once"""
        manager = ConfigManager(str(write_config(tmp_path, "server:\n  port: 9000\n")))

        first = manager.get_config()
        assert first.server.port == 9000
        assert manager.get_config() is first


class TestSetup:
    """Test logging setup, server factory and command line"""

    def test_setup_logging_console_only(self, restore_logging):
        setup_logging(LoggingConfig(level="warning"))

        assert restore_logging.level == logging.WARNING
        assert len(restore_logging.handlers) == 1
        assert isinstance(restore_logging.handlers[0], ConsoleHandler)

        # The package default console handler is handed over to the root logger
        package_logger = logging.getLogger("fstoolkit")
        assert not any(isinstance(handler, ConsoleHandler) for handler in package_logger.handlers)
        assert package_logger.level == logging.NOTSET

    def test_setup_logging_file(self, tmp_path, restore_logging):
        log_file = tmp_path / "logs" / "fstoolkit.log"
        setup_logging(LoggingConfig(file=str(log_file), json=True))

        logging.getLogger("fstoolkit.tests").info("written to file")
        for handler in restore_logging.handlers:
            handler.flush()

        content = log_file.read_text(encoding="utf-8")
        assert '"level":"INFO"' in content
        assert '"msg":"written to file"' in content

    def test_create_server(self, tmp_path):
        config = Config(
            pages=[PageRoute("/", tmp_path / "index.html")],
            contentTypes={".txt": "text/plain"},
        )

        server = create_server(config)

        assert isinstance(server, WebServer)
        assert [route.url for route in server.routes] == ["/"]
        assert server.content_types[".txt"] == "text/plain"

    def test_parse_page(self):
        assert parse_page("/docs = site/docs.html") == PageRoute("/docs", Path("site/docs.html"))

        for value in ("no-separator", "=file.html", "/url="):
            with pytest.raises(ValueError):
                parse_page(value)

    def test_main(self, tmp_path, monkeypatch, restore_logging):
        config_path = write_config(tmp_path, """
            server:
              addr: "127.0.0.1"
              port: 8080
            pages:
              - url: "/"
                file: "index.html"
            """)
        calls = []
        monkeypatch.setattr(WebServer, "listen", lambda self, port, hostname: calls.append((self, port, hostname)))

        main(["-c", str(config_path), "--port", "9090", "--page", "/data=data.json", "--log-level", "DEBUG"])

        server, port, hostname = calls[0]
        assert (port, hostname) == (9090, "127.0.0.1")
        assert [route.url for route in server.routes] == ["/", "/data"]
        assert restore_logging.level == logging.DEBUG

    def test_main_rejects_bad_page(self, tmp_path, monkeypatch):
        monkeypatch.setattr(WebServer, "listen", lambda self, port, hostname: None)

        with pytest.raises(SystemExit):
            main(["-c", str(tmp_path / "absent.yaml"), "--page", "broken"])
