import logging

from blochsim.logging_config import level_from_env, setup_logging


def test_setup_logging_does_not_duplicate_handlers(tmp_path):
    log_file = tmp_path / "blochsim.log"
    setup_logging(logging.DEBUG)
    setup_logging(logging.DEBUG, log_file=str(log_file))
    logger = logging.getLogger("blochsim")
    assert logger.level == logging.DEBUG
    assert len(logger.handlers) == 2

    logging.getLogger("blochsim.model.gates").debug("planned x")
    for handler in logger.handlers:
        handler.flush()
    assert "planned x" in log_file.read_text(encoding="utf-8")

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_level_from_env(monkeypatch):
    monkeypatch.setenv("BLOCHSIM_LOG_LEVEL", "warning")
    assert level_from_env() == logging.WARNING
    monkeypatch.setenv("BLOCHSIM_LOG_LEVEL", "nonsense")
    assert level_from_env(logging.ERROR) == logging.ERROR
    monkeypatch.delenv("BLOCHSIM_LOG_LEVEL")
    assert level_from_env() == logging.INFO


def test_setup_logging_switches_log_file(tmp_path):
    first, second = tmp_path / "first.log", tmp_path / "second.log"
    setup_logging(logging.INFO, log_file=str(first))
    setup_logging(logging.WARNING, log_file=str(second))
    logger = logging.getLogger("blochsim")
    assert all(h.level == logging.WARNING for h in logger.handlers)

    logging.getLogger("blochsim.controller").warning("gate rejected")
    for handler in logger.handlers:
        handler.flush()
    assert "gate rejected" in second.read_text(encoding="utf-8")
    assert "gate rejected" not in first.read_text(encoding="utf-8")

    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)
