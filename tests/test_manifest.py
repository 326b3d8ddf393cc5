import os

import pytest

from verifier.manifest.stanza import (
    PathExpectation,
    build_manifest,
    linux_manifest,
    normalize_mode,
    windows_manifest,
)

from tests.helpers import linux_host, windows_host


def _paths(manifest):
    return {expectation.path: expectation for expectation in manifest.paths}


def test_linux_table():
    manifest = linux_manifest()
    paths = _paths(manifest)

    assert manifest.check_permissions is True
    assert paths['/opt/observiq/stanza/stanza.db'] == PathExpectation(
        '/opt/observiq/stanza/stanza.db', 'file', '0600', 'stanza', 'stanza'
    )
    assert paths['/opt/observiq/stanza'].type == 'directory'
    assert paths['/opt/observiq/stanza/plugins'].type == 'directory'
    assert paths['/opt/observiq/stanza/stanza'].mode == '0755'
    assert all(e.owner == 'stanza' and e.group == 'stanza' for e in manifest.paths)

    service = manifest.services[0]
    assert service.name == 'stanza'
    assert (service.installed, service.enabled, service.running) == (True, True, True)
    assert service.skip_major_versions == (6,)


def test_windows_table_is_existence_only():
    manifest = windows_manifest()
    paths = _paths(manifest)

    assert manifest.check_permissions is False
    assert 'C:\\observiq\\stanza\\stanza.exe' in paths
    assert 'C:\\observiq\\stanza\\stanza.db' in paths
    assert all(e.mode is None and e.owner is None and e.group is None for e in manifest.paths)
    assert manifest.services[0].skip_major_versions == ()


def test_build_manifest_uses_target_settings(make_config):
    config = make_config({
        'target': {'install_dir': '/srv/stanza', 'user': 'observiq', 'group': 'adm', 'service_name': 'stanza-agent'},
        'verifier': {'skip_service_major_versions': ''},
    })

    manifest = build_manifest(linux_host(8), config)

    assert '/srv/stanza/config.yaml' in _paths(manifest)
    assert _paths(manifest)['/srv/stanza/config.yaml'].owner == 'observiq'
    assert _paths(manifest)['/srv/stanza/config.yaml'].group == 'adm'
    assert manifest.services[0].name == 'stanza-agent'
    assert manifest.services[0].skip_major_versions == ()


def test_build_manifest_appends_extra_paths(make_config):
    config = make_config({
        'path:/etc/systemd/system/stanza.service': {'type': 'file', 'mode': '644', 'owner': 'root', 'group': 'root'},
    })

    linux = build_manifest(linux_host(8), config)
    windows = build_manifest(windows_host(), config)

    assert linux.paths[-1] == PathExpectation('/etc/systemd/system/stanza.service', 'file', '0644', 'root', 'root')
    assert windows.paths[-1] == PathExpectation('/etc/systemd/system/stanza.service', 'file')


def test_build_manifest_relocates_under_root(make_config, tmp_path):
    config = make_config({'target': {'root': str(tmp_path)}})

    linux = build_manifest(linux_host(8), config)
    windows = build_manifest(windows_host(), config)

    assert os.path.join(str(tmp_path), 'opt', 'observiq', 'stanza', 'stanza.db') in _paths(linux)
    assert os.path.join(str(tmp_path), 'observiq', 'stanza', 'stanza.exe') in _paths(windows)


@pytest.mark.parametrize("mode, expected", [
    ("600", "0600"),
    ("0600", "0600"),
    ("0o640", "0640"),
    (0o755, "0755"),
    ("4755", "4755"),
])
def test_normalize_mode(mode, expected):
    assert normalize_mode(mode) == expected
