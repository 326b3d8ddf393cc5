"""
Classe de base des sondes de service

Une sonde interroge le gestionnaire de services de l'hôte en lecture seule.
Elle ne démarre, n'arrête et n'installe jamais rien.
"""

from abc import ABC, abstractmethod
from typing import Dict, Any


class BaseServiceProbe(ABC):
    """
    Classe de base abstraite pour les sondes de service

    Cette classe définit l'interface commune que chaque gestionnaire de
    services (systemd, SysV init, Windows SCM) doit implémenter.
    Les méthodes lèvent ProbeError lorsque le gestionnaire ne répond pas,
    afin que l'appelant distingue "non" de "impossible à savoir".
    """

    manager_name = 'unknown'

    def __init__(self, service_name: str):
        """
        Args:
            service_name: Nom technique du service
        """
        self.service_name = service_name

    @abstractmethod
    def is_installed(self) -> bool:
        """
        Vérifie si le service est installé

        Returns:
            bool: True si le service est connu du gestionnaire
        """

    @abstractmethod
    def is_enabled(self) -> bool:
        """
        Vérifie si le service démarre avec le système

        Returns:
            bool: True si le service est activé au démarrage
        """

    @abstractmethod
    def is_running(self) -> bool:
        """
        Vérifie si le service est en cours d'exécution

        Returns:
            bool: True si le service tourne
        """

    def get_status(self) -> Dict[str, Any]:
        """
        Retourne l'état complet du service

        Returns:
            dict: installed, enabled, running et gestionnaire utilisé
        """
        return {
            'name': self.service_name,
            'manager': self.manager_name,
            'installed': self.is_installed(),
            'enabled': self.is_enabled(),
            'running': self.is_running()
        }
