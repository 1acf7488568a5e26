import logging

from sfconnect.logging_config import SILENT, configure_logging, level_for_trace


def test_configure_logging_levels(caplog):
    configure_logging(None)
    logger = logging.getLogger("sfconnect.test")
    logger.warning("warn")
    assert any("warn" in rec.message for rec in caplog.records)

    caplog.clear()
    configure_logging(logging.INFO)
    logger.info("info-ok")
    assert any("info-ok" in rec.message for rec in caplog.records)

    caplog.clear()
    configure_logging(logging.DEBUG)
    logger.debug("dbg")
    assert any("dbg" in rec.message for rec in caplog.records)


def test_level_for_trace():
    assert level_for_trace(-1) == SILENT
    assert level_for_trace(-5) == SILENT
    assert level_for_trace(0) == logging.WARNING
    assert level_for_trace(1) == logging.DEBUG
    assert level_for_trace(3) == logging.DEBUG


def test_urllib3_connection_quieted():
    configure_logging(logging.DEBUG)

    assert logging.getLogger("urllib3.connection").level >= logging.ERROR
