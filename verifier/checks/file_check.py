"""
Contrôle des chemins installés

Compare les métadonnées d'un chemin (existence, type, mode, propriétaire,
groupe) aux valeurs attendues.
"""

import os
import stat
from typing import Any, List, Tuple

from .base import BaseCheck
from ..core.results import CheckResult


MISSING_PATH_MESSAGE = "le chemin n'existe pas"


def describe_type(st_mode: int) -> str:
    """
    Traduit le type d'un st_mode obtenu par lstat

    Returns:
        str: file, directory, symlink ou other
    """
    if stat.S_ISLNK(st_mode):
        return 'symlink'
    if stat.S_ISDIR(st_mode):
        return 'directory'
    if stat.S_ISREG(st_mode):
        return 'file'
    return 'other'


def resolve_owner(uid: int) -> str:
    """Nom du compte pour un uid, ou l'uid lui-même s'il est inconnu"""
    import pwd
    try:
        return pwd.getpwuid(uid).pw_name
    except KeyError:
        return str(uid)


def resolve_group(gid: int) -> str:
    """Nom du groupe pour un gid, ou le gid lui-même s'il est inconnu"""
    import grp
    try:
        return grp.getgrgid(gid).gr_name
    except KeyError:
        return str(gid)


class FileCheck(BaseCheck):
    """
    Contrôle d'un chemin déclaré

    Avec check_permissions=False (Windows), seuls l'existence et le type
    sont vérifiés.
    """

    def __init__(self, expectation, logger, check_permissions: bool = True):
        """
        Args:
            expectation: PathExpectation
            logger: Instance de VerifierLogger
            check_permissions: Vérifier mode, propriétaire et groupe
        """
        super().__init__(logger)
        self.expectation = expectation
        self.check_permissions = check_permissions

    @property
    def subject(self) -> str:
        return f"{self.expectation.type} {self.expectation.path}"

    def describe(self) -> List[Tuple[str, Any]]:
        assertions = [('exists', True), ('type', self.expectation.type)]

        if self.check_permissions:
            for attribute in ('mode', 'owner', 'group'):
                expected = getattr(self.expectation, attribute)
                if expected is not None:
                    assertions.append((attribute, expected))

        return assertions

    def _evaluate(self) -> List[CheckResult]:
        try:
            st = os.lstat(self.expectation.path)
        except FileNotFoundError:
            return self._all_failed(MISSING_PATH_MESSAGE)
        except OSError as e:
            return self._all_failed(f"lecture impossible: {e.strerror or e}")

        results = [CheckResult.compare(self.subject, 'exists', True, True)]
        actual_values = {
            'type': lambda: describe_type(st.st_mode),
            'mode': lambda: format(stat.S_IMODE(st.st_mode), '04o'),
            'owner': lambda: resolve_owner(st.st_uid),
            'group': lambda: resolve_group(st.st_gid)
        }

        for assertion, expected in self.describe()[1:]:
            results.append(CheckResult.compare(
                self.subject, assertion, expected, actual_values[assertion]()
            ))

        return results

    def _all_failed(self, message: str) -> List[CheckResult]:
        """
        Un chemin absent ou illisible fait échouer chaque assertion déclarée

        Args:
            message: Raison de l'échec
        """
        return [
            CheckResult.failure(self.subject, assertion, expected, message)
            for assertion, expected in self.describe()
        ]
