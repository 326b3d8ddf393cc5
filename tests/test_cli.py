import json
import os
import sys
from unittest.mock import MagicMock, patch

import pytest

from verifier.main import EXIT_ERROR, EXIT_FAILED, EXIT_OK, main

from tests.helpers import FakeProbe, build_linux_tree, current_account, linux_host

pytestmark = pytest.mark.skipif(sys.platform == 'win32', reason="permissions POSIX")


@pytest.fixture
def installed(tmp_path, write_config):
    """Installation conforme + fichier de configuration pointant dessus"""
    user, group = current_account()
    build_linux_tree(tmp_path / "opt" / "observiq" / "stanza")
    config_path = write_config({
        'target': {'root': str(tmp_path), 'user': user, 'group': group},
        'verifier': {'platform': 'linux'},
    })

    with patch("verifier.core.runner.HostCollector") as collector, \
            patch("verifier.core.runner.ServiceManager.get_probe", return_value=FakeProbe()):
        collector.return_value.collect.return_value = linux_host(8)
        yield tmp_path, config_path


def test_verify_conforming_installation(installed, capsys):
    _, config_path = installed

    assert main(['--config', config_path]) == EXIT_OK
    out = capsys.readouterr().out
    assert '[FAIL]' not in out
    assert 'stanza.db' in out


def test_verify_reports_failure_and_writes_json(installed, tmp_path, capsys):
    root, config_path = installed
    os.chmod(root / "opt" / "observiq" / "stanza" / "stanza.db", 0o644)
    output = tmp_path / "report.json"

    assert main(['--config', config_path, '--output', str(output)]) == EXIT_FAILED
    assert '[FAIL] mode' in capsys.readouterr().out

    data = json.loads(output.read_text(encoding='utf-8'))
    assert data['summary']['failed'] == 1
    assert data['host']['major_version'] == 8


def test_verify_json_format(installed, capsys):
    _, config_path = installed

    assert main(['--config', config_path, '--format', 'json']) == EXIT_OK
    data = json.loads(capsys.readouterr().out)
    assert data['summary']['success'] is True


def test_list_mode(installed, capsys):
    _, config_path = installed

    assert main(['--config', config_path, '--mode', 'list']) == EXIT_OK
    out = capsys.readouterr().out
    assert 'service stanza' in out
    assert '  mode = 0600' in out


def test_invalid_config_exits_with_error(write_config, capsys):
    config_path = write_config({'verifier': {'log_level': 'LOUD'}})

    assert main(['--config', config_path, '--validate-config']) == EXIT_ERROR
    assert 'Configuration invalide' in capsys.readouterr().err


def test_validate_config(write_config, capsys):
    assert main(['--config', write_config(), '--validate-config']) == EXIT_OK


@patch("verifier.core.runner.HostCollector")
def test_unsupported_platform_exits_with_error(mock_collector: MagicMock, write_config) -> None:
    from verifier.core.exceptions import UnsupportedPlatformError
    mock_collector.return_value.collect.side_effect = UnsupportedPlatformError("Plateforme non supportée: darwin")

    assert main(['--config', write_config()]) == EXIT_ERROR


def test_create_config(tmp_path):
    path = tmp_path / "config.ini"

    assert main(['--create-config', '--config', str(path)]) == EXIT_OK
    assert path.exists()


@patch("verifier.core.sender.requests.post")
def test_send_mode(mock_post: MagicMock, tmp_path, write_config) -> None:
    mock_post.return_value = MagicMock(status_code=201)
    report = tmp_path / "report.json"
    report.write_text(json.dumps({'summary': {'success': True}}), encoding='utf-8')
    config_path = write_config({'report': {'url': 'https://collector.example.com/api', 'max_retries': '0'}})

    assert main(['--config', config_path, '--mode', 'send', '--output', str(report)]) == EXIT_OK
    assert mock_post.call_args.kwargs['json']['report'] == {'summary': {'success': True}}


def test_send_mode_without_report(write_config):
    assert main(['--config', write_config(), '--mode', 'send']) == EXIT_ERROR


def test_send_mode_with_corrupt_report(tmp_path, write_config, capsys):
    report = tmp_path / "report.json"
    report.write_text("{not json", encoding='utf-8')
    config_path = write_config({'report': {'url': 'https://collector.example.com/api'}})

    with patch("verifier.core.sender.requests.post") as mock_post:
        assert main(['--config', config_path, '--mode', 'send', '--output', str(report)]) == EXIT_ERROR
        mock_post.assert_not_called()
    assert 'Rapport illisible' in capsys.readouterr().err


@patch("verifier.core.sender.requests.post")
def test_verify_unwritable_output_still_publishes(mock_post: MagicMock, installed, tmp_path, capsys) -> None:
    mock_post.return_value = MagicMock(status_code=201)
    _, config_path = installed
    with open(config_path, 'a', encoding='utf-8') as f:
        f.write("\n[report]\nenabled = true\nurl = https://collector.example.com/api\nmax_retries = 0\n")
    output = tmp_path / "missing-dir" / "report.json"

    assert main(['--config', config_path, '--output', str(output)]) == EXIT_ERROR
    assert not output.exists()
    assert 'Écriture du rapport' in capsys.readouterr().err
    mock_post.assert_called_once()
