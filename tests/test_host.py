from unittest.mock import MagicMock, patch

import pytest

from verifier.collectors import host as host_module
from verifier.collectors.host import HostCollector, parse_major_version
from verifier.core.exceptions import UnsupportedPlatformError


@pytest.fixture
def release_files(tmp_path, monkeypatch):
    """Redirige /etc/os-release et /etc/redhat-release vers tmp_path"""
    os_release = tmp_path / "os-release"
    redhat_release = tmp_path / "redhat-release"
    monkeypatch.setattr(host_module, 'OS_RELEASE_FILE', str(os_release))
    monkeypatch.setattr(host_module, 'REDHAT_RELEASE_FILE', str(redhat_release))
    return os_release, redhat_release


@pytest.mark.parametrize("release, expected", [
    ("6.10", 6),
    ("7", 7),
    ("20.04", 20),
    ("", None),
    ("rolling", None),
])
def test_parse_major_version(release, expected):
    assert parse_major_version(release) == expected


@patch("verifier.collectors.host.platform.system", return_value="Linux")
def test_linux_from_os_release(mock_system: MagicMock, release_files, config, logger) -> None:
    os_release, _ = release_files
    os_release.write_text('NAME="CentOS Linux"\nID="centos"\nVERSION_ID="8.4"\n')

    host = HostCollector(config, logger).collect()

    assert host.family == 'linux'
    assert host.distribution == 'centos'
    assert host.release == '8.4'
    assert host.major_version == 8


@patch("verifier.collectors.host.platform.system", return_value="Linux")
def test_linux_6_from_redhat_release(mock_system: MagicMock, release_files, config, logger) -> None:
    _, redhat_release = release_files
    redhat_release.write_text("CentOS release 6.10 (Final)\n")

    host = HostCollector(config, logger).collect()

    assert host.distribution == 'centos'
    assert host.release == '6.10'
    assert host.major_version == 6


@patch("verifier.collectors.host.platform.release", return_value="5.15.0-generic")
@patch("verifier.collectors.host.platform.system", return_value="Linux")
def test_linux_falls_back_to_kernel(mock_system: MagicMock, mock_release: MagicMock,
                                    release_files, config, logger) -> None:
    host = HostCollector(config, logger).collect()

    assert host.release == '5.15.0-generic'
    assert host.major_version == 5


@patch("verifier.collectors.host.platform.release", return_value="10")
@patch("verifier.collectors.host.platform.system", return_value="Windows")
def test_windows(mock_system: MagicMock, mock_release: MagicMock, config, logger) -> None:
    host = HostCollector(config, logger).collect()

    assert host.is_windows
    assert host.major_version == 10


@patch("verifier.collectors.host.platform.release", return_value="2019Server")
@patch("verifier.collectors.host.platform.system", return_value="Linux")
def test_forced_platform_overrides_detection(mock_system: MagicMock, mock_release: MagicMock,
                                             make_config, logger) -> None:
    config = make_config({'verifier': {'platform': 'windows'}})

    host = HostCollector(config, logger).collect()

    assert host.family == 'windows'
    assert host.release == '2019Server'


@patch("verifier.collectors.host.platform.system", return_value="Darwin")
def test_unsupported_platform(mock_system: MagicMock, config, logger) -> None:
    with pytest.raises(UnsupportedPlatformError):
        HostCollector(config, logger).collect()
