"""
Tests for the command-line entry point.
"""

import socket

import pytest

import staticserver.__main__ as cli
from staticserver.server import WebServer


@pytest.fixture(autouse=True)
def quiet_cli(monkeypatch):
    """Keep the CLI from reconfiguring logging or signal handlers during tests."""
    monkeypatch.setattr(cli, "setup_logging", lambda **kwargs: None)
    monkeypatch.setattr(WebServer, "install_signal_handlers", lambda self: None)


class TestParser:
    """Tests for argument parsing."""

    def test_options(self):
        args = cli.build_parser().parse_args([
            "-p", "8080", "-d", "site", "--pool-size", "8",
            "--request-timeout", "2.5", "--no-color",
        ])

        assert args.port == 8080
        assert args.root_folder == "site"
        assert args.pool_size == 8
        assert args.request_timeout == 2.5
        assert args.no_color is True

    def test_defaults_are_left_to_config(self):
        args = cli.build_parser().parse_args([])
        assert args.port is None
        assert args.root_folder is None


class TestMain:
    """Tests for main()."""

    def test_missing_root_exits_with_error(self, tmp_path):
        assert cli.main(["-d", str(tmp_path / "missing"), "--no-color"]) == 1

    def test_bind_failure_exits_with_error(self, static_root):
        with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as occupied:
            occupied.bind(("127.0.0.1", 0))
            occupied.listen(1)
            port = occupied.getsockname()[1]

            code = cli.main([
                "-H", "127.0.0.1", "-p", str(port), "-d", str(static_root), "--pool-size", "1",
            ])

        assert code == 1

    def test_clean_stop_exits_zero(self, static_root, monkeypatch):
        original_listen = WebServer.listen

        def stop_then_listen(self, port=None):
            # A stop requested before the loop starts makes listen() return at once
            self.stop()
            return original_listen(self, port)

        monkeypatch.setattr(WebServer, "listen", stop_then_listen)

        code = cli.main(["-H", "127.0.0.1", "-p", "0", "-d", str(static_root), "--pool-size", "1"])
        assert code == 0
