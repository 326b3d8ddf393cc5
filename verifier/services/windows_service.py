"""
Sonde de service Windows

Interroge le gestionnaire de contrôle des services (SCM) via psutil.
"""

import psutil

from .base_service import BaseServiceProbe
from ..core.exceptions import ProbeError


class WindowsService(BaseServiceProbe):
    """
    Sonde pour les services Windows

    installed: le service est connu du SCM
    enabled: type de démarrage "automatic"
    running: statut "running"
    """

    manager_name = 'windows_scm'

    def _get_service(self):
        """
        Récupère le service depuis le SCM

        Returns:
            psutil.WindowsService ou None si le service n'existe pas
        """
        try:
            return psutil.win_service_get(self.service_name)
        except psutil.NoSuchProcess:
            return None
        except AttributeError as e:
            # psutil n'expose win_service_get que sous Windows
            raise ProbeError("Gestionnaire de services Windows indisponible sur cet hôte") from e
        except OSError as e:
            raise ProbeError(f"Erreur SCM pour {self.service_name}: {e}") from e

    def is_installed(self) -> bool:
        return self._get_service() is not None

    def is_enabled(self) -> bool:
        service = self._get_service()
        return service is not None and service.start_type() == 'automatic'

    def is_running(self) -> bool:
        service = self._get_service()
        return service is not None and service.status() == 'running'
