"""
Collecteur des informations de l'hôte vérifié

Ce module détermine la famille de plateforme et la version majeure de la
distribution, qui pilotent le choix de la table de vérification et les
contrôles à sauter.
"""

import re
import socket
import platform
from typing import Dict, Any, Optional

import psutil

from ..core.exceptions import UnsupportedPlatformError


SUPPORTED_FAMILIES = ('linux', 'windows')

OS_RELEASE_FILE = '/etc/os-release'
REDHAT_RELEASE_FILE = '/etc/redhat-release'


class HostInfo:
    """
    Informations sur l'hôte vérifié

    Attributes:
        family: 'linux' ou 'windows'
        distribution: Identifiant de distribution (ex: centos, ubuntu, windows)
        release: Version complète telle que rapportée par l'OS
        major_version: Version majeure (None si indéterminée)
    """

    def __init__(self, family: str, distribution: str = '', release: str = '',
                 major_version: Optional[int] = None, hostname: str = '',
                 boot_time: Optional[float] = None):
        self.family = family
        self.distribution = distribution
        self.release = release
        self.major_version = major_version
        self.hostname = hostname
        self.boot_time = boot_time

    @property
    def is_linux(self) -> bool:
        return self.family == 'linux'

    @property
    def is_windows(self) -> bool:
        return self.family == 'windows'

    def to_dict(self) -> Dict[str, Any]:
        return {
            'family': self.family,
            'distribution': self.distribution,
            'release': self.release,
            'major_version': self.major_version,
            'hostname': self.hostname,
            'boot_time': self.boot_time
        }

    def __repr__(self):
        return f"HostInfo({self.family!r}, {self.distribution!r}, {self.release!r})"


def parse_major_version(release: str) -> Optional[int]:
    """
    Extrait la version majeure d'une chaîne de version

    Args:
        release: Version brute (ex: "6.10", "20.04", "10")

    Returns:
        int: Version majeure ou None
    """
    if not release:
        return None
    match = re.match(r'\s*(\d+)', release)
    return int(match.group(1)) if match else None


class HostCollector:
    """
    Collecte les faits de l'hôte nécessaires à la vérification

    La famille peut être imposée par la configuration ([verifier] platform),
    ce qui permet de vérifier une arborescence montée depuis un autre hôte.
    """

    def __init__(self, config, logger):
        """
        Args:
            config: Instance de VerifierConfig
            logger: Instance de VerifierLogger
        """
        self.config = config
        self.logger = logger.get_logger()

    def collect(self) -> HostInfo:
        """
        Détecte l'hôte courant

        Returns:
            HostInfo: Informations de l'hôte

        Raises:
            UnsupportedPlatformError: si la famille n'a pas de table de vérification
        """
        forced = self.config.get_verifier_config()['platform']
        family = forced if forced != 'auto' else platform.system().lower()

        if family not in SUPPORTED_FAMILIES:
            raise UnsupportedPlatformError(f"Plateforme non supportée: {family}")

        if family == 'linux':
            distribution, release = self._collect_linux_release()
        else:
            distribution, release = 'windows', platform.release()

        host = HostInfo(
            family=family,
            distribution=distribution,
            release=release,
            major_version=parse_major_version(release),
            hostname=socket.gethostname(),
            boot_time=self._get_boot_time()
        )

        self.logger.info(
            f"Hôte détecté: {host.family} {host.distribution} {host.release} "
            f"(version majeure: {host.major_version})"
        )
        return host

    def _collect_linux_release(self):
        """
        Détermine la distribution et sa version

        Méthode 1: /etc/os-release (standard)
        Méthode 2: /etc/redhat-release (CentOS/RHEL 6 n'ont pas os-release)
        Méthode 3: version du noyau

        Returns:
            tuple: (distribution, release)
        """
        os_release = self._read_os_release()
        if os_release.get('version_id'):
            return os_release.get('id', 'linux'), os_release['version_id']

        redhat_release = self._read_file(REDHAT_RELEASE_FILE)
        if redhat_release:
            match = re.search(r'release\s+([\d.]+)', redhat_release)
            if match:
                distribution = redhat_release.split()[0].lower()
                return distribution, match.group(1)

        self.logger.warning("Version de distribution indéterminée, utilisation de la version du noyau")
        return os_release.get('id', 'linux'), platform.release()

    def _read_os_release(self) -> Dict[str, str]:
        """
        Parse /etc/os-release

        Returns:
            dict: Clés en minuscules, valeurs sans guillemets
        """
        distro_info = {}
        content = self._read_file(OS_RELEASE_FILE)
        if not content:
            return distro_info

        for line in content.splitlines():
            if '=' in line:
                key, value = line.strip().split('=', 1)
                distro_info[key.lower()] = value.strip('"\'')

        return distro_info

    def _read_file(self, file_path: str) -> Optional[str]:
        """
        Lit un fichier de manière sécurisée

        Args:
            file_path: Chemin vers le fichier

        Returns:
            str: Contenu du fichier ou None
        """
        try:
            with open(file_path, 'r', encoding='utf-8') as f:
                return f.read().strip()
        except FileNotFoundError:
            self.logger.debug(f"Fichier non trouvé: {file_path}")
            return None
        except OSError as e:
            self.logger.warning(f"Erreur lecture fichier {file_path}: {e}")
            return None

    def _get_boot_time(self) -> Optional[float]:
        try:
            return psutil.boot_time()
        except (OSError, RuntimeError) as e:
            self.logger.debug(f"Heure de démarrage indisponible: {e}")
            return None
