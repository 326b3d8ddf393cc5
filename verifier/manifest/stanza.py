"""
Tables de vérification du paquet stanza

Ce module déclare ce qu'une installation correcte de l'agent stanza laisse
sur l'hôte : répertoire d'installation, binaire, fichiers de configuration,
répertoire des plugins, journaux, base d'offsets et service.

Linux: chaque chemin est vérifié en type, mode, propriétaire et groupe.
Windows: seuls l'existence et le type sont vérifiés.
"""

import ntpath
import os
import posixpath
import re
from typing import List, Optional, Sequence, Tuple


LINUX_INSTALL_DIR = '/opt/observiq/stanza'
WINDOWS_INSTALL_DIR = 'C:\\observiq\\stanza'

DEFAULT_SERVICE_NAME = 'stanza'
DEFAULT_ACCOUNT = 'stanza'

# (nom relatif, type, mode) ; '' désigne le répertoire d'installation
LINUX_LAYOUT: Tuple[Tuple[str, str, str], ...] = (
    ('', 'directory', '0755'),
    ('stanza', 'file', '0755'),
    ('config.yaml', 'file', '0640'),
    ('logging.yaml', 'file', '0640'),
    ('plugins', 'directory', '0755'),
    ('log', 'directory', '0750'),
    ('stanza.db', 'file', '0600'),
)

WINDOWS_LAYOUT: Tuple[Tuple[str, str], ...] = (
    ('', 'directory'),
    ('stanza.exe', 'file'),
    ('config.yaml', 'file'),
    ('logging.yaml', 'file'),
    ('plugins', 'directory'),
    ('log', 'directory'),
    ('stanza.db', 'file'),
)


class PathExpectation:
    """
    Attributs attendus pour un chemin installé

    Les attributs laissés à None ne sont pas vérifiés.
    """

    def __init__(self, path: str, type: str = 'file', mode: Optional[str] = None,
                 owner: Optional[str] = None, group: Optional[str] = None):
        self.path = path
        self.type = type
        self.mode = normalize_mode(mode) if mode else None
        self.owner = owner
        self.group = group

    def relocated(self, root: str) -> 'PathExpectation':
        """
        Retourne la même attente pour le chemin placé sous une racine

        La lettre de lecteur est retirée et les séparateurs convertis pour
        l'hôte qui exécute la vérification.

        Args:
            root: Préfixe (point de montage, chroot, image extraite)
        """
        if not root:
            return self
        _, tail = ntpath.splitdrive(self.path)
        parts = [part for part in re.split(r'[\\/]+', tail) if part]
        return PathExpectation(
            os.path.join(root, *parts),
            type=self.type,
            mode=self.mode,
            owner=self.owner,
            group=self.group
        )

    def __eq__(self, other):
        if not isinstance(other, PathExpectation):
            return NotImplemented
        return (self.path, self.type, self.mode, self.owner, self.group) == \
            (other.path, other.type, other.mode, other.owner, other.group)

    def __repr__(self):
        return (f"PathExpectation({self.path!r}, type={self.type!r}, mode={self.mode!r}, "
                f"owner={self.owner!r}, group={self.group!r})")


class ServiceExpectation:
    """
    États attendus d'un service

    skip_major_versions liste les versions majeures de l'OS sur lesquelles
    les contrôles du service ne s'appliquent pas.
    """

    def __init__(self, name: str, installed: bool = True, enabled: bool = True,
                 running: bool = True, skip_major_versions: Sequence[int] = ()):
        self.name = name
        self.installed = installed
        self.enabled = enabled
        self.running = running
        self.skip_major_versions = tuple(skip_major_versions)

    def __repr__(self):
        return (f"ServiceExpectation({self.name!r}, installed={self.installed}, "
                f"enabled={self.enabled}, running={self.running})")


class Manifest:
    """Ensemble des attentes pour une plateforme"""

    def __init__(self, platform: str, paths: List[PathExpectation],
                 services: List[ServiceExpectation], check_permissions: bool):
        self.platform = platform
        self.paths = paths
        self.services = services
        self.check_permissions = check_permissions


def normalize_mode(mode) -> str:
    """
    Normalise un mode en chaîne octale à quatre chiffres

    Args:
        mode: "600", "0600", "0o600" ou entier 0o600

    Returns:
        str: ex "0600"
    """
    if isinstance(mode, int):
        value = mode
    else:
        text = str(mode).strip().lower()
        if text.startswith('0o'):
            text = text[2:]
        value = int(text, 8)
    return format(value & 0o7777, '04o')


def linux_manifest(install_dir: str = LINUX_INSTALL_DIR, user: str = DEFAULT_ACCOUNT,
                   group: str = DEFAULT_ACCOUNT, service_name: str = DEFAULT_SERVICE_NAME,
                   skip_major_versions: Sequence[int] = (6,)) -> Manifest:
    """
    Table de vérification Linux

    Args:
        install_dir: Répertoire d'installation
        user: Propriétaire attendu
        group: Groupe attendu
        service_name: Nom du service
        skip_major_versions: Versions majeures sans contrôle de service
    """
    paths = [
        PathExpectation(
            posixpath.join(install_dir, name) if name else install_dir,
            type=path_type, mode=mode, owner=user, group=group
        )
        for name, path_type, mode in LINUX_LAYOUT
    ]
    services = [ServiceExpectation(service_name, skip_major_versions=skip_major_versions)]
    return Manifest('linux', paths, services, check_permissions=True)


def windows_manifest(install_dir: str = WINDOWS_INSTALL_DIR,
                     service_name: str = DEFAULT_SERVICE_NAME) -> Manifest:
    """
    Table de vérification Windows (existence et type uniquement)

    Args:
        install_dir: Répertoire d'installation
        service_name: Nom du service
    """
    paths = [
        PathExpectation(ntpath.join(install_dir, name) if name else install_dir, type=path_type)
        for name, path_type in WINDOWS_LAYOUT
    ]
    services = [ServiceExpectation(service_name)]
    return Manifest('windows', paths, services, check_permissions=False)


def build_manifest(host, config) -> Manifest:
    """
    Construit la table pour l'hôte courant à partir de la configuration

    Ajoute les chemins des sections [path:<chemin>] puis place tous les
    chemins sous [target] root lorsque celui-ci est défini.

    Args:
        host: HostInfo
        config: VerifierConfig

    Returns:
        Manifest: Table prête à être vérifiée
    """
    target = config.get_target_config()
    verifier_config = config.get_verifier_config()

    if host.is_windows:
        manifest = windows_manifest(
            install_dir=target['install_dir'] or WINDOWS_INSTALL_DIR,
            service_name=target['service_name']
        )
    else:
        manifest = linux_manifest(
            install_dir=target['install_dir'] or LINUX_INSTALL_DIR,
            user=target['user'],
            group=target['group'],
            service_name=target['service_name'],
            skip_major_versions=verifier_config['skip_service_major_versions']
        )

    for extra in config.get_extra_paths():
        if manifest.check_permissions:
            manifest.paths.append(PathExpectation(
                extra['path'], type=extra['type'], mode=extra['mode'],
                owner=extra['owner'], group=extra['group']
            ))
        else:
            manifest.paths.append(PathExpectation(extra['path'], type=extra['type']))

    if target['root']:
        manifest.paths = [expectation.relocated(target['root'])
                          for expectation in manifest.paths]

    return manifest
