"""
Sondes de service Linux

- systemd via systemctl
- SysV init via /etc/init.d et les liens /etc/rc?.d, pour les hôtes sans systemd
"""

import glob
import os
import subprocess
from typing import List

from .base_service import BaseServiceProbe
from ..core.exceptions import ProbeError


COMMAND_TIMEOUT = 30


def run_command(cmd: List[str]) -> subprocess.CompletedProcess:
    """
    Exécute une commande du gestionnaire de services

    Args:
        cmd: Commande et arguments

    Returns:
        subprocess.CompletedProcess: Résultat, quel que soit le code de retour

    Raises:
        ProbeError: si la commande est introuvable ou ne répond pas
    """
    try:
        return subprocess.run(cmd, capture_output=True, text=True, timeout=COMMAND_TIMEOUT)
    except FileNotFoundError as e:
        raise ProbeError(f"Commande introuvable: {cmd[0]}") from e
    except subprocess.TimeoutExpired as e:
        raise ProbeError(f"Timeout pour la commande: {' '.join(cmd)}") from e


class LinuxSystemdService(BaseServiceProbe):
    """
    Sonde systemd

    installed: LoadState=loaded dans `systemctl show`
    enabled: `systemctl is-enabled` retourne 0
    running: `systemctl is-active` affiche "active"
    """

    manager_name = 'systemd'

    def _systemctl(self, *args: str) -> subprocess.CompletedProcess:
        return run_command(['systemctl'] + list(args))

    def is_installed(self) -> bool:
        result = self._systemctl('show', self.service_name, '--property=LoadState')
        if result.returncode != 0:
            raise ProbeError(
                f"systemctl show {self.service_name} a échoué (code: {result.returncode}): "
                f"{result.stderr.strip()}"
            )

        for line in result.stdout.splitlines():
            key, _, value = line.partition('=')
            if key.strip() == 'LoadState':
                return value.strip() == 'loaded'
        return False

    def is_enabled(self) -> bool:
        result = self._systemctl('is-enabled', self.service_name)
        return result.returncode == 0

    def is_running(self) -> bool:
        result = self._systemctl('is-active', self.service_name)
        return result.stdout.strip() == 'active'


class LinuxSysVService(BaseServiceProbe):
    """
    Sonde SysV init

    installed: script /etc/init.d/<nom>
    enabled: lien S??<nom> dans un des niveaux d'exécution multi-utilisateur
    running: `service <nom> status` retourne 0
    """

    manager_name = 'sysvinit'

    INIT_DIR = '/etc/init.d'
    RC_DIRS = ('/etc/rc2.d', '/etc/rc3.d', '/etc/rc4.d', '/etc/rc5.d',
               '/etc/rc.d/rc2.d', '/etc/rc.d/rc3.d', '/etc/rc.d/rc4.d', '/etc/rc.d/rc5.d')

    def is_installed(self) -> bool:
        return os.path.isfile(os.path.join(self.INIT_DIR, self.service_name))

    def is_enabled(self) -> bool:
        for rc_dir in self.RC_DIRS:
            if glob.glob(os.path.join(rc_dir, f"S[0-9][0-9]{self.service_name}")):
                return True
        return False

    def is_running(self) -> bool:
        result = run_command(['service', self.service_name, 'status'])
        return result.returncode == 0
