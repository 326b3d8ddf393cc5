import configparser

import pytest

from verifier.core.config import VerifierConfig
from verifier.core.logger import VerifierLogger, reset_logging


@pytest.fixture(autouse=True)
def reset_logger():
    reset_logging()
    yield
    reset_logging()


@pytest.fixture
def write_config(tmp_path):
    """Écrit un fichier INI (sans fichier de log) et retourne son chemin"""

    def _write(sections=None):
        parser = configparser.ConfigParser(interpolation=None)
        parser['logging'] = {'log_file': ''}
        for section, values in (sections or {}).items():
            parser[section] = values

        path = tmp_path / "config.ini"
        with open(path, 'w', encoding='utf-8') as f:
            parser.write(f)
        return str(path)

    return _write


@pytest.fixture
def make_config(write_config):
    def _make(sections=None):
        return VerifierConfig(write_config(sections))

    return _make


@pytest.fixture
def config(make_config):
    return make_config()


@pytest.fixture
def logger(config):
    return VerifierLogger(config)
