import logging
import logging.handlers

from verifier.core.logger import HANDLER_MARKER, LOGGER_NAME, VerifierLogger, reset_logging


def _own_handlers(logger):
    return [h for h in logger.handlers if getattr(h, HANDLER_MARKER, False)]


def test_rotating_file_handler(make_config, tmp_path):
    log_file = tmp_path / "logs" / "stanza-verify.log"
    config = make_config({'logging': {'log_file': str(log_file), 'max_log_size': '1024', 'backup_count': '2'}})

    logger = VerifierLogger(config).get_logger()
    logger.warning("mode 0644 au lieu de 0600")

    handlers = [h for h in logger.handlers if isinstance(h, logging.handlers.RotatingFileHandler)]
    assert len(handlers) == 1
    assert handlers[0].maxBytes == 1024
    assert handlers[0].backupCount == 2
    handlers[0].flush()
    assert "mode 0644 au lieu de 0600" in log_file.read_text(encoding='utf-8')


def test_console_only_when_log_file_empty(config):
    logger = VerifierLogger(config).get_logger()

    assert not any(isinstance(h, logging.handlers.RotatingFileHandler) for h in logger.handlers)
    assert logger.level == logging.INFO


def test_handlers_not_duplicated(config):
    VerifierLogger(config)
    logger = VerifierLogger(config).get_logger()

    assert len(_own_handlers(logger)) == 1


def test_log_level_from_config(make_config):
    config = make_config({'verifier': {'log_level': 'debug'}})

    assert VerifierLogger(config).get_logger().level == logging.DEBUG


def test_foreign_handler_does_not_block_setup(make_config):
    foreign = logging.NullHandler()
    logging.getLogger(LOGGER_NAME).addHandler(foreign)
    try:
        config = make_config({'verifier': {'log_level': 'debug'}})
        logger = VerifierLogger(config).get_logger()

        assert logger.level == logging.DEBUG
        assert len(_own_handlers(logger)) == 1
    finally:
        logging.getLogger(LOGGER_NAME).removeHandler(foreign)


def test_reset_logging_keeps_foreign_handlers(config):
    foreign = logging.NullHandler()
    logger = VerifierLogger(config).get_logger()
    logger.addHandler(foreign)
    try:
        reset_logging()

        assert foreign in logger.handlers
        assert _own_handlers(logger) == []
    finally:
        logger.removeHandler(foreign)
