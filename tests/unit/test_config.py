"""
Unit tests for ServerConfig and the command-line interface.
"""

import logging
import os
from pathlib import Path

import pytest

from lwebservr import __version__
from lwebservr.config import ServerConfig
from lwebservr.__main__ import build_parser, format_error, main, port_number
from lwebservr.core.socket_server import ServerStartError


class TestServerConfig:

    def test_defaults(self):
        config = ServerConfig()

        assert config.host == "127.0.0.1"
        assert config.port == 8080
        assert config.read_size == 512
        assert config.document_root is None
        assert config.verbose is False
        assert config.silent is False
        config.validate()

    @pytest.mark.parametrize("port", [-1, 65536, 100000])
    def test_invalid_port(self, port: int):
        with pytest.raises(ValueError, match="port must be a number between 1 and 65535"):
            ServerConfig(port=port).validate()

    @pytest.mark.parametrize("port", [0, 1, 8080, 65535])
    def test_valid_port(self, port: int):
        ServerConfig(port=port).validate()

    def test_invalid_read_size(self):
        with pytest.raises(ValueError):
            ServerConfig(read_size=0).validate()

    def test_invalid_backlog(self):
        with pytest.raises(ValueError):
            ServerConfig(backlog=0).validate()

    def test_invalid_log_level(self):
        with pytest.raises(ValueError, match="log level"):
            ServerConfig(log_level="LOUD").validate()

    def test_missing_document_root(self, tmp_path: Path):
        with pytest.raises(ValueError, match="not a directory"):
            ServerConfig(document_root=str(tmp_path / "nope")).validate()

    def test_document_root_defaults_to_cwd(self, tmp_path: Path, monkeypatch):
        monkeypatch.chdir(tmp_path)
        assert ServerConfig().resolve_document_root() == os.path.abspath(str(tmp_path))

    def test_explicit_document_root(self, tmp_path: Path):
        config = ServerConfig(document_root=str(tmp_path))
        assert config.resolve_document_root() == os.path.abspath(str(tmp_path))

    def test_log_level_number(self):
        assert ServerConfig(log_level="debug").log_level_number == logging.DEBUG
        assert ServerConfig(log_level="WARNING").log_level_number == logging.WARNING

    def test_from_env(self, tmp_path: Path, monkeypatch):
        monkeypatch.setenv("LWEBSERVR_PORT", "3000")
        monkeypatch.setenv("LWEBSERVR_ROOT", str(tmp_path))
        monkeypatch.setenv("LWEBSERVR_VERBOSE", "true")
        monkeypatch.setenv("LWEBSERVR_SILENT", "0")
        monkeypatch.setenv("LWEBSERVR_LOG_LEVEL", "DEBUG")

        config = ServerConfig.from_env()

        assert config.port == 3000
        assert config.document_root == str(tmp_path)
        assert config.verbose is True
        assert config.silent is False
        assert config.log_level == "DEBUG"

    def test_from_env_defaults(self, monkeypatch):
        for name in ("HOST", "PORT", "ROOT", "VERBOSE", "SILENT", "LOG_LEVEL"):
            monkeypatch.delenv(f"LWEBSERVR_{name}", raising=False)

        assert ServerConfig.from_env() == ServerConfig()


class TestCommandLine:

    def test_defaults(self):
        args = build_parser().parse_args([])

        assert args.port == 8080
        assert args.verbose is False
        assert args.silent is False

    def test_short_flags(self):
        args = build_parser().parse_args(["-p", "3000", "-v", "-s"])

        assert args.port == 3000
        assert args.verbose is True
        assert args.silent is True

    def test_long_flags(self):
        args = build_parser().parse_args(["--port", "9000", "--verbose", "--silent"])

        assert args.port == 9000
        assert args.verbose is True
        assert args.silent is True

    @pytest.mark.parametrize("value", ["abc", "-1", "65536", "80.5"])
    def test_bad_port_exits(self, value: str, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--port", value])

        assert exc_info.value.code == 2
        assert "port must be a number between 1 and 65535" in capsys.readouterr().err

    def test_port_number(self):
        assert port_number("8080") == 8080
        assert port_number("0") == 0

    def test_version(self, capsys):
        with pytest.raises(SystemExit) as exc_info:
            build_parser().parse_args(["--version"])

        assert exc_info.value.code == 0
        assert f"lwebservr {__version__}" in capsys.readouterr().out

    def test_format_error_includes_causes(self):
        try:
            try:
                raise PermissionError("Permission denied")
            except PermissionError as e:
                raise ServerStartError("could not bind to 127.0.0.1:80") from e
        except ServerStartError as error:
            text = format_error(error)

        assert text == (
            "error: could not bind to 127.0.0.1:80\n"
            "caused by: Permission denied"
        )

    def test_main_bind_failure_exits_1(self, capsys, tmp_path: Path, monkeypatch):
        import socket

        monkeypatch.chdir(tmp_path)
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as busy:
            busy.bind(("127.0.0.1", 0))
            busy.listen(1)
            port = busy.getsockname()[1]

            assert main(["--port", str(port), "--silent"]) == 1

        err = capsys.readouterr().err
        assert f"error: could not bind to 127.0.0.1:{port}" in err
        assert "caused by:" in err
