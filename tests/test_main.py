"""
Tests for the ambient pieces: configuration, logging setup and the command line demo.
"""
import logging

import pytest

from topoedit.analysis.components import compute_connected_components
from topoedit.config import get_int_setting
from topoedit.logging_config import setup_logging
from topoedit.main import build_random_network, main


@pytest.fixture
def reset_package_logger():
    yield
    logger = logging.getLogger("topoedit")
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
    logger.setLevel(logging.NOTSET)


class TestConfig:
    def test_default_when_unset(self, monkeypatch):
        monkeypatch.delenv("TOPOEDIT_TEST_SETTING", raising=False)
        assert get_int_setting("TOPOEDIT_TEST_SETTING", 42) == 42

    def test_override(self, monkeypatch):
        monkeypatch.setenv("TOPOEDIT_TEST_SETTING", "512")
        assert get_int_setting("TOPOEDIT_TEST_SETTING", 42) == 512

    @pytest.mark.parametrize("raw", ["abc", "0", "-3"])
    def test_invalid_values_fall_back(self, monkeypatch, raw):
        monkeypatch.setenv("TOPOEDIT_TEST_SETTING", raw)
        assert get_int_setting("TOPOEDIT_TEST_SETTING", 42) == 42


def test_setup_logging_writes_file(tmp_path, reset_package_logger):
    log_file = tmp_path / "topoedit.log"
    setup_logging(level=logging.DEBUG, log_file=str(log_file))
    setup_logging(level=logging.DEBUG, log_file=str(log_file))

    logger = logging.getLogger("topoedit")
    assert len(logger.handlers) == 2
    assert "Logging initialized." in log_file.read_text(encoding="utf-8")


def test_build_random_network():
    arena = build_random_network(300, radius=40.0, extent=200.0, seed=7)
    assert arena.node_count == 300
    assert arena.edge_count > 0
    assert compute_connected_components(arena).num_components >= 1


def test_build_random_network_is_reproducible():
    first = build_random_network(50, radius=30.0, extent=100.0, seed=3)
    second = build_random_network(50, radius=30.0, extent=100.0, seed=3)
    assert first.edges().tolist() == second.edges().tolist()


def test_main_keep_giant(reset_package_logger, capsys):
    main(["--nodes", "120", "--radius", "25", "--extent", "100", "--seed", "1", "--keep-giant"])
    out = capsys.readouterr().out
    assert "num_components: 1" in out
