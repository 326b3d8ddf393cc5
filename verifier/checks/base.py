"""
Classe de base de tous les contrôles du vérificateur

Ce module définit l'interface commune des contrôles : chaque contrôle
produit une liste de CheckResult, une par assertion déclarée.
"""

import time
from abc import ABC, abstractmethod
from typing import Any, List, Tuple

from ..core.results import CheckResult


class BaseCheck(ABC):
    """
    Classe de base abstraite pour tous les contrôles

    Un contrôle est indépendant et en lecture seule : l'ordre d'exécution
    n'a pas d'influence sur son résultat.
    """

    def __init__(self, logger):
        """
        Args:
            logger: Instance de VerifierLogger
        """
        self.logger = logger.get_logger()
        self.check_start_time = None
        self.last_check_duration = 0.0

    @property
    @abstractmethod
    def subject(self) -> str:
        """Libellé de l'objet vérifié (ex: "file /opt/observiq/stanza/stanza.db")"""

    @abstractmethod
    def describe(self) -> List[Tuple[str, Any]]:
        """
        Liste les assertions prévues sans toucher à l'hôte

        Returns:
            list: Couples (assertion, valeur attendue)
        """

    @abstractmethod
    def _evaluate(self) -> List[CheckResult]:
        """Évalue les assertions sur l'hôte"""

    def run(self) -> List[CheckResult]:
        """
        Exécute le contrôle

        Returns:
            list: Un CheckResult par assertion
        """
        self._start_check()
        results = self._evaluate()
        self._end_check(results)
        return results

    def _start_check(self):
        self.check_start_time = time.time()
        self.logger.debug(f"Début contrôle {self.subject}")

    def _end_check(self, results: List[CheckResult]):
        """
        Termine le contrôle et log les assertions en échec

        Args:
            results: Résultats produits
        """
        if self.check_start_time:
            self.last_check_duration = time.time() - self.check_start_time

        for result in results:
            if result.failed:
                self.logger.warning(f"{self.subject}: {result.assertion} en échec ({result.message})")
            else:
                self.logger.debug(f"{self.subject}: {result.assertion} {result.status.value}")

        self.logger.debug(f"Contrôle {self.subject} terminé en {self.last_check_duration:.3f}s")
