import logging

from modelinfo.logging_config import setup_logging


def test_setup_logging_replaces_handlers_and_writes_log_file(tmp_path):
    log_file = tmp_path / "run.log"
    setup_logging(logging.DEBUG)
    setup_logging(logging.DEBUG, str(log_file))

    logger = logging.getLogger("modelinfo")
    assert len(logger.handlers) == 2
    logging.getLogger("modelinfo.batch").info("Wrote %s", "a.flver.info.txt")

    setup_logging(logging.WARNING)
    assert len(logger.handlers) == 1
    text = log_file.read_text(encoding="utf-8")
    assert f"Logging to stderr and {log_file}" in text
    assert "INFO    modelinfo.batch: Wrote a.flver.info.txt" in text
