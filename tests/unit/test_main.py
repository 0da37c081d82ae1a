"""Tests for main entry point."""
import pytest
from unittest.mock import patch, MagicMock
import tempfile

TEST_KEY = "0xac0974bec39a17e36ba4a6b4d238ff944bacb478cbed5efcae784d7bf4f2ff80"

CONFIG = f"""
backend:
  base_url: "http://localhost:3000"
chain:
  full_node: "https://nile.trongrid.io"
  private_key: "{TEST_KEY}"
"""


def write_config() -> str:
    with tempfile.NamedTemporaryFile(mode='w', suffix='.yaml', delete=False) as f:
        f.write(CONFIG)
        return f.name


def test_parse_args_default():
    from keeper.__main__ import parse_args

    args = parse_args([])

    assert args.config == "config/default.yaml"
    assert args.log_level == "INFO"
    assert args.env_file is None
    assert args.once is False


def test_parse_args_short_flags():
    from keeper.__main__ import parse_args

    args = parse_args(["-c", "test.yaml", "-l", "WARNING"])

    assert args.config == "test.yaml"
    assert args.log_level == "WARNING"


def test_parse_args_rejects_unknown_level():
    from keeper.__main__ import parse_args

    with pytest.raises(SystemExit):
        parse_args(["--log-level", "VERBOSE"])


def test_setup_logging():
    from keeper.__main__ import setup_logging
    import logging

    for level in ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]:
        setup_logging(level)

    root_logger = logging.getLogger()
    assert len(root_logger.handlers) > 0
    assert logging.getLogger("tronpy").level == logging.WARNING
    assert logging.getLogger("httpx").level == logging.WARNING


def test_log_uncaught_exception(caplog):
    from keeper.__main__ import log_uncaught_exception

    try:
        raise RuntimeError("escaped")
    except RuntimeError as e:
        log_uncaught_exception(type(e), e, e.__traceback__)

    assert "Uncaught exception" in caplog.text


def test_main_handles_keyboard_interrupt():
    from keeper.__main__ import main

    with patch('keeper.__main__.Orchestrator') as MockOrch, patch('keeper.__main__.signal.signal'):
        mock_orch = MagicMock()
        MockOrch.return_value = mock_orch
        mock_orch.start.side_effect = KeyboardInterrupt

        result = main(["--config", write_config()])

        MockOrch.assert_called_once()
        assert result == 0
        mock_orch.stop.assert_called_once()


def test_main_clean_stop_returns_zero():
    from keeper.__main__ import main

    with patch('keeper.__main__.Orchestrator') as MockOrch, patch('keeper.__main__.signal.signal'):
        result = main(["--config", write_config()])

        MockOrch.return_value.start.assert_called_once_with(once=False)
        assert result == 0


def test_main_returns_error_on_config_error():
    from keeper.__main__ import main

    result = main(["--config", "/nonexistent/config.yaml"])

    assert result == 1


def test_main_returns_error_on_exception():
    from keeper.__main__ import main

    with patch('keeper.__main__.Orchestrator') as MockOrch:
        MockOrch.side_effect = RuntimeError("Test error")

        result = main(["--config", write_config()])

        assert result == 1


def test_parse_args_once_and_env_file():
    from keeper.__main__ import parse_args

    args = parse_args(["--once", "-e", "keeper.env"])

    assert args.once is True
    assert args.env_file == "keeper.env"


def test_main_once_runs_single_cycle():
    from keeper.__main__ import main

    with patch('keeper.__main__.Orchestrator') as MockOrch, patch('keeper.__main__.signal.signal'):
        result = main(["--config", write_config(), "--once"])

        MockOrch.return_value.start.assert_called_once_with(once=True)
        assert result == 0


def test_main_passes_env_file_to_config():
    from keeper.__main__ import main

    with patch('keeper.__main__.load_config') as mock_load, \
            patch('keeper.__main__.Orchestrator'), \
            patch('keeper.__main__.signal.signal'):
        main(["--config", "keeper.yaml", "--env-file", "keeper.env"])

        mock_load.assert_called_once_with("keeper.yaml", env_path="keeper.env")


def test_install_signal_handlers_stops_orchestrator():
    import signal
    from keeper.__main__ import install_signal_handlers

    orchestrator = MagicMock()

    with patch('keeper.__main__.signal.signal') as mock_signal:
        install_signal_handlers(orchestrator)

    registered = {call.args[0]: call.args[1] for call in mock_signal.call_args_list}
    assert set(registered) == {signal.SIGINT, signal.SIGTERM}

    registered[signal.SIGTERM](signal.SIGTERM, None)
    orchestrator.stop.assert_called_once()
