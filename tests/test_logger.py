"""Tests for log stream routing."""

import io

import pytest
from loguru import logger

from modbundle.logger import setup_logger


@pytest.fixture
def streams():
    out, err = io.StringIO(), io.StringIO()
    setup_logger(level="INFO", out=out, err=err, enqueue=False, colorize=False)
    yield out, err
    logger.remove()


def test_errors_go_to_stderr_only(streams) -> None:
    out, err = streams

    logger.info("下载 Foo")
    logger.success("Foo 完成")
    logger.error("Bar 失败")

    assert "下载 Foo" in out.getvalue()
    assert "Foo 完成" in out.getvalue()
    assert "Bar 失败" not in out.getvalue()
    assert "Bar 失败" in err.getvalue()
    assert "下载 Foo" not in err.getvalue()


def test_debug_hidden_at_info_level(streams) -> None:
    out, _ = streams
    logger.debug("细节")
    assert out.getvalue() == ""


def test_debug_level_from_environment(monkeypatch) -> None:
    monkeypatch.setenv("MODBUNDLE_DEBUG", "1")
    out, err = io.StringIO(), io.StringIO()
    setup_logger(out=out, err=err, enqueue=False, colorize=False)
    try:
        logger.debug("细节")
        assert "细节" in out.getvalue()
        assert err.getvalue() == ""
    finally:
        logger.remove()
