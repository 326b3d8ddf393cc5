"""Outils partagés par les tests"""

import os

from verifier.collectors.host import HostInfo
from verifier.manifest.stanza import LINUX_LAYOUT, WINDOWS_LAYOUT
from verifier.services.base_service import BaseServiceProbe


class FakeProbe(BaseServiceProbe):
    """Sonde de service aux états fixés"""

    manager_name = 'fake'

    def __init__(self, service_name='stanza', installed=True, enabled=True, running=True, error=None):
        super().__init__(service_name)
        self.installed = installed
        self.enabled = enabled
        self.running = running
        self.error = error

    def _answer(self, value):
        if self.error:
            raise self.error
        return value

    def is_installed(self):
        return self._answer(self.installed)

    def is_enabled(self):
        return self._answer(self.enabled)

    def is_running(self):
        return self._answer(self.running)


def linux_host(major=8, distribution='centos'):
    return HostInfo('linux', distribution, f"{major}.4", major, 'test-host')


def windows_host():
    return HostInfo('windows', 'windows', '10', 10, 'test-host')


def current_account():
    """(utilisateur, groupe) propriétaires des fichiers créés par le test"""
    import grp
    import pwd
    return pwd.getpwuid(os.getuid()).pw_name, grp.getgrgid(os.getgid()).gr_name


def build_linux_tree(install_dir):
    """
    Crée une installation Linux conforme sous install_dir

    Args:
        install_dir: pathlib.Path du répertoire d'installation
    """
    for name, path_type, mode in LINUX_LAYOUT:
        path = install_dir / name if name else install_dir
        if path_type == 'directory':
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.write_text("")
        os.chmod(path, int(mode, 8))


def build_windows_tree(install_dir):
    """Crée une installation Windows (existence seulement) sous install_dir"""
    for name, path_type in WINDOWS_LAYOUT:
        path = install_dir / name if name else install_dir
        if path_type == 'directory':
            path.mkdir(parents=True, exist_ok=True)
        else:
            path.write_text("")
