"""
Module de configuration du vérificateur d'installation

Ce module gère la configuration du vérificateur, incluant :
- Lecture des fichiers de configuration INI
- Validation des paramètres
- Valeurs par défaut
- Configuration spécifique par plateforme
- Chemins supplémentaires déclarés par l'utilisateur
"""

import os
import re
import sys
import tempfile
import configparser
from typing import Dict, Any, List, Optional

from .exceptions import ConfigurationError


PATH_SECTION_PREFIX = "path:"

VALID_LOG_LEVELS = ['DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL']
VALID_PLATFORMS = ['auto', 'linux', 'windows']
VALID_PATH_TYPES = ['file', 'directory', 'symlink']

INTEGER_OPTIONS = (
    ('verifier', 'max_workers'),
    ('logging', 'max_log_size'),
    ('logging', 'backup_count'),
    ('report', 'timeout'),
    ('report', 'max_retries'),
    ('report', 'retry_delay'),
)

BOOLEAN_OPTIONS = (
    ('verifier', 'parallel'),
    ('report', 'enabled'),
    ('report', 'verify_ssl'),
)

# Mêmes écritures que normalize_mode : 600, 0600, 0o600
_MODE_PATTERN = re.compile(r'^(?:0o|0)?[0-7]{3,4}$', re.IGNORECASE)


class VerifierConfig:
    """
    Gestionnaire de configuration du vérificateur

    Cette classe centralise la configuration : cible vérifiée (répertoire
    d'installation, service, compte propriétaire), comportement du
    vérificateur, logging et publication du rapport.
    """

    def __init__(self, config_file: Optional[str] = None):
        """
        Initialise la configuration

        Args:
            config_file: Chemin vers le fichier de configuration (optionnel)
        """
        self.config = configparser.ConfigParser(interpolation=None)
        self.config_file = config_file or self._get_default_config_path()

        self._set_defaults()
        self._load_config()

    def _get_default_config_path(self) -> str:
        """
        Détermine le chemin par défaut du fichier de configuration selon la plateforme

        Returns:
            str: Chemin vers le fichier de configuration
        """
        if sys.platform == "win32":
            return os.path.join(
                os.environ.get("PROGRAMDATA", "C:\\ProgramData"),
                "StanzaVerify",
                "config.ini"
            )
        return "/etc/stanza-verify/config.ini"

    def _set_defaults(self):
        """
        Définit les valeurs de configuration par défaut

        Ces valeurs sont utilisées si aucun fichier de configuration n'est trouvé
        ou si certaines sections/clés sont manquantes.
        """
        # Cible vérifiée
        self.config.add_section('target')
        self.config.set('target', 'install_dir', '')  # vide = défaut de la plateforme
        self.config.set('target', 'service_name', 'stanza')
        self.config.set('target', 'user', 'stanza')
        self.config.set('target', 'group', 'stanza')
        self.config.set('target', 'root', '')

        # Comportement du vérificateur
        self.config.add_section('verifier')
        self.config.set('verifier', 'platform', 'auto')
        self.config.set('verifier', 'log_level', 'INFO')
        self.config.set('verifier', 'skip_service_major_versions', '6')
        self.config.set('verifier', 'parallel', 'false')
        self.config.set('verifier', 'max_workers', '4')

        # Logging
        self.config.add_section('logging')
        self.config.set('logging', 'log_file', self._get_default_log_path())
        self.config.set('logging', 'max_log_size', '10485760')  # 10MB
        self.config.set('logging', 'backup_count', '5')

        # Publication du rapport
        self.config.add_section('report')
        self.config.set('report', 'enabled', 'false')
        self.config.set('report', 'url', '')
        self.config.set('report', 'auth_token', '')
        self.config.set('report', 'timeout', '30')
        self.config.set('report', 'verify_ssl', 'true')
        self.config.set('report', 'max_retries', '3')
        self.config.set('report', 'retry_delay', '5')

    def _get_default_log_path(self) -> str:
        """
        Détermine le chemin par défaut des logs

        Returns:
            str: Chemin vers le fichier de log
        """
        return os.path.join(tempfile.gettempdir(), "stanza-verify.log")

    def _load_config(self):
        """
        Charge la configuration depuis le fichier

        Si le fichier n'existe pas, utilise les valeurs par défaut. Un fichier
        illisible ou mal formé n'est pas ignoré : l'erreur remonte à l'appelant.
        """
        if not os.path.exists(self.config_file):
            print(f"Fichier de configuration non trouvé: {self.config_file}", file=sys.stderr)
            print("Utilisation des valeurs par défaut", file=sys.stderr)
            return

        try:
            self.config.read(self.config_file, encoding='utf-8')
        except configparser.Error as e:
            raise ConfigurationError(f"Fichier de configuration invalide {self.config_file}: {e}") from e

        print(f"Configuration chargée depuis: {self.config_file}", file=sys.stderr)

    def get(self, section: str, option: str, fallback: Any = None) -> str:
        """
        Récupère une valeur de configuration

        Args:
            section: Nom de la section
            option: Nom de l'option
            fallback: Valeur par défaut si non trouvée

        Returns:
            str: Valeur de configuration
        """
        return self.config.get(section, option, fallback=fallback)

    def getboolean(self, section: str, option: str, fallback: bool = False) -> bool:
        """Récupère une valeur booléenne de configuration"""
        return self.config.getboolean(section, option, fallback=fallback)

    def getint(self, section: str, option: str, fallback: int = 0) -> int:
        """Récupère une valeur entière de configuration"""
        return self.config.getint(section, option, fallback=fallback)

    def set(self, section: str, option: str, value: Any):
        """
        Définit une valeur de configuration

        Args:
            section: Nom de la section
            option: Nom de l'option
            value: Nouvelle valeur
        """
        if not self.config.has_section(section):
            self.config.add_section(section)
        self.config.set(section, option, str(value))

    def save(self):
        """
        Sauvegarde la configuration dans le fichier

        Crée les dossiers parents si nécessaire.
        """
        config_dir = os.path.dirname(self.config_file)
        if config_dir and not os.path.exists(config_dir):
            os.makedirs(config_dir, exist_ok=True)

        with open(self.config_file, 'w', encoding='utf-8') as f:
            self.config.write(f)

        print(f"Configuration sauvegardée dans: {self.config_file}", file=sys.stderr)

    def get_target_config(self) -> Dict[str, Any]:
        """
        Récupère la configuration de la cible vérifiée

        Returns:
            dict: Configuration de la cible
        """
        return {
            'install_dir': self.get('target', 'install_dir', ''),
            'service_name': self.get('target', 'service_name', 'stanza'),
            'user': self.get('target', 'user', 'stanza'),
            'group': self.get('target', 'group', 'stanza'),
            'root': self.get('target', 'root', '')
        }

    def get_verifier_config(self) -> Dict[str, Any]:
        """
        Récupère la configuration du vérificateur

        Returns:
            dict: Configuration du vérificateur
        """
        return {
            'platform': self.get('verifier', 'platform', 'auto').lower(),
            'log_level': self.get('verifier', 'log_level', 'INFO'),
            'skip_service_major_versions': self._parse_int_list(
                self.get('verifier', 'skip_service_major_versions', '')
            ),
            'parallel': self.getboolean('verifier', 'parallel', False),
            'max_workers': self.getint('verifier', 'max_workers', 4)
        }

    def get_report_config(self) -> Dict[str, Any]:
        """
        Récupère la configuration de publication du rapport

        Returns:
            dict: Configuration de publication
        """
        return {
            'enabled': self.getboolean('report', 'enabled', False),
            'url': self.get('report', 'url', ''),
            'auth_token': self.get('report', 'auth_token', ''),
            'timeout': self.getint('report', 'timeout', 30),
            'verify_ssl': self.getboolean('report', 'verify_ssl', True),
            'max_retries': self.getint('report', 'max_retries', 3),
            'retry_delay': self.getint('report', 'retry_delay', 5)
        }

    def get_extra_paths(self) -> List[Dict[str, Any]]:
        """
        Récupère les chemins supplémentaires déclarés par des sections [path:<chemin>]

        Returns:
            list: Une entrée par section, dans l'ordre du fichier
        """
        extra_paths = []

        for section in self.config.sections():
            if not section.startswith(PATH_SECTION_PREFIX):
                continue

            path = section[len(PATH_SECTION_PREFIX):].strip()
            extra_paths.append({
                'path': path,
                'type': self.get(section, 'type', 'file'),
                'mode': self.get(section, 'mode') or None,
                'owner': self.get(section, 'owner') or None,
                'group': self.get(section, 'group') or None
            })

        return extra_paths

    @staticmethod
    def _parse_int_list(value: str) -> List[int]:
        """
        Parse une liste d'entiers séparés par des virgules

        Args:
            value: Chaîne brute (ex: "6, 7")

        Returns:
            list: Entiers trouvés
        """
        if not value:
            return []
        return [int(item) for item in value.replace(' ', '').split(',') if item]

    def validate(self) -> List[str]:
        """
        Valide la configuration courante

        Returns:
            list: Erreurs de configuration (vide si la configuration est valide)
        """
        errors = []

        log_level = self.get('verifier', 'log_level', 'INFO').upper()
        if log_level not in VALID_LOG_LEVELS:
            errors.append(f"Niveau de log invalide: {log_level}")

        platform_name = self.get('verifier', 'platform', 'auto').lower()
        if platform_name not in VALID_PLATFORMS:
            errors.append(f"Plateforme invalide: {platform_name} (doit être: auto, linux, windows)")

        try:
            self._parse_int_list(self.get('verifier', 'skip_service_major_versions', ''))
        except ValueError:
            errors.append("skip_service_major_versions doit être une liste d'entiers")

        for section, option in INTEGER_OPTIONS:
            try:
                value = self.getint(section, option)
            except ValueError:
                errors.append(f"{option} doit être un entier")
                continue
            if option == 'max_workers' and value < 1:
                errors.append("max_workers doit être supérieur à 0")

        if not self.get('target', 'service_name'):
            errors.append("Nom de service vide")

        for extra in self.get_extra_paths():
            if not extra['path']:
                errors.append("Section [path:] sans chemin")
            if extra['type'] not in VALID_PATH_TYPES:
                errors.append(f"Type invalide pour {extra['path']}: {extra['type']}")
            if extra['mode'] and not _MODE_PATTERN.match(extra['mode'].strip()):
                errors.append(f"Mode invalide pour {extra['path']}: {extra['mode']}")

        booleans = {}
        for section, option in BOOLEAN_OPTIONS:
            try:
                booleans[option] = self.getboolean(section, option)
            except ValueError:
                errors.append(f"{option} doit être un booléen (true/false)")

        if booleans.get('enabled'):
            url = self.get('report', 'url', '')
            if not url.startswith(('http://', 'https://')):
                errors.append("URL de publication du rapport invalide")

        return errors


def create_default_config(config_path: str) -> VerifierConfig:
    """
    Crée un fichier de configuration par défaut

    Args:
        config_path: Chemin où créer le fichier de configuration

    Returns:
        VerifierConfig: Instance de configuration créée
    """
    config = VerifierConfig(config_path)
    config.save()
    return config
