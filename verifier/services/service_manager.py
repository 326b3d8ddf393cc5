"""
Sélection de la sonde de service adaptée à l'hôte
"""

import shutil

from .base_service import BaseServiceProbe
from .linux_daemon import LinuxSystemdService, LinuxSysVService
from .windows_service import WindowsService
from ..core.exceptions import UnsupportedPlatformError


class ServiceManager:
    """Fabrique de sondes de service multi-plateforme"""

    def __init__(self, logger):
        """
        Args:
            logger: Instance de VerifierLogger
        """
        self.logger = logger.get_logger()

    def get_probe(self, service_name: str, host) -> BaseServiceProbe:
        """
        Retourne la sonde du gestionnaire de services de l'hôte

        Args:
            service_name: Nom du service
            host: HostInfo

        Returns:
            BaseServiceProbe: Sonde systemd, SysV init ou Windows
        """
        if host.is_windows:
            probe = WindowsService(service_name)
        elif host.is_linux:
            if shutil.which('systemctl'):
                probe = LinuxSystemdService(service_name)
            else:
                probe = LinuxSysVService(service_name)
        else:
            raise UnsupportedPlatformError(f"Aucune sonde de service pour {host.family}")

        self.logger.debug(f"Sonde {probe.manager_name} utilisée pour le service '{service_name}'")
        return probe
