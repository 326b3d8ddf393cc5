"""
Résultats de vérification

Chaque assertion produit un CheckResult ; le runner les assemble dans un
VerificationReport qui sait se sérialiser en JSON et se rendre en texte.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, Any, List, Optional


class CheckStatus(str, Enum):
    """Statut d'une assertion"""

    PASSED = 'passed'
    FAILED = 'failed'
    SKIPPED = 'skipped'


class CheckResult:
    """
    Résultat d'une assertion unique

    Attributes:
        subject: Objet vérifié (ex: "file /opt/observiq/stanza/stanza.db")
        assertion: Propriété vérifiée (exists, mode, owner, running...)
        expected: Valeur attendue
        actual: Valeur constatée (None si non mesurable)
        status: CheckStatus
        message: Détail lisible (raison d'un échec ou d'un saut)
    """

    def __init__(self, subject: str, assertion: str, expected: Any, actual: Any,
                 status: CheckStatus, message: str = ""):
        self.subject = subject
        self.assertion = assertion
        self.expected = expected
        self.actual = actual
        self.status = status
        self.message = message

    @classmethod
    def compare(cls, subject: str, assertion: str, expected: Any, actual: Any) -> 'CheckResult':
        """
        Construit un résultat par comparaison stricte

        Returns:
            CheckResult: passed si actual == expected, failed sinon
        """
        if actual == expected:
            return cls(subject, assertion, expected, actual, CheckStatus.PASSED)
        return cls(
            subject, assertion, expected, actual, CheckStatus.FAILED,
            f"{assertion} attendu {expected!r}, constaté {actual!r}"
        )

    @classmethod
    def failure(cls, subject: str, assertion: str, expected: Any, message: str) -> 'CheckResult':
        """Résultat en échec sans valeur constatée"""
        return cls(subject, assertion, expected, None, CheckStatus.FAILED, message)

    @classmethod
    def skipped(cls, subject: str, assertion: str, expected: Any, message: str) -> 'CheckResult':
        """Résultat sauté (assertion non applicable à cet hôte)"""
        return cls(subject, assertion, expected, None, CheckStatus.SKIPPED, message)

    @property
    def passed(self) -> bool:
        return self.status == CheckStatus.PASSED

    @property
    def failed(self) -> bool:
        return self.status == CheckStatus.FAILED

    def to_dict(self) -> Dict[str, Any]:
        return {
            'subject': self.subject,
            'assertion': self.assertion,
            'expected': self.expected,
            'actual': self.actual,
            'status': self.status.value,
            'message': self.message
        }

    def __repr__(self):
        return f"CheckResult({self.subject!r}, {self.assertion!r}, {self.status.value})"


class VerificationReport:
    """
    Rapport complet d'une exécution de vérification

    Les résultats sont conservés dans l'ordre de déclaration des contrôles.
    """

    def __init__(self, host: Dict[str, Any], results: List[CheckResult],
                 started_at: Optional[datetime] = None, duration: float = 0.0):
        self.host = host
        self.results = results
        self.started_at = started_at or datetime.now()
        self.duration = duration

    def _count(self, status: CheckStatus) -> int:
        return sum(1 for result in self.results if result.status == status)

    @property
    def passed(self) -> int:
        return self._count(CheckStatus.PASSED)

    @property
    def failed(self) -> int:
        return self._count(CheckStatus.FAILED)

    @property
    def skipped(self) -> int:
        return self._count(CheckStatus.SKIPPED)

    @property
    def success(self) -> bool:
        """True si aucune assertion n'a échoué (les sauts sont acceptés)"""
        return self.failed == 0

    def failures(self) -> List[CheckResult]:
        return [result for result in self.results if result.failed]

    def summary(self) -> Dict[str, Any]:
        return {
            'total': len(self.results),
            'passed': self.passed,
            'failed': self.failed,
            'skipped': self.skipped,
            'success': self.success
        }

    def to_dict(self) -> Dict[str, Any]:
        """
        Sérialise le rapport au format JSON

        Returns:
            dict: Rapport sérialisable
        """
        return {
            'started_at': self.started_at.isoformat(),
            'duration_seconds': round(self.duration, 3),
            'host': self.host,
            'summary': self.summary(),
            'results': [result.to_dict() for result in self.results]
        }

    def render_text(self) -> str:
        """
        Rend le rapport en texte, une ligne par assertion

        Returns:
            str: Rapport lisible
        """
        markers = {
            CheckStatus.PASSED: '[PASS]',
            CheckStatus.FAILED: '[FAIL]',
            CheckStatus.SKIPPED: '[SKIP]'
        }

        lines = []
        current_subject = None

        for result in self.results:
            if result.subject != current_subject:
                current_subject = result.subject
                lines.append(current_subject)

            line = f"  {markers[result.status]} {result.assertion}"
            if result.status == CheckStatus.PASSED:
                line += f" = {result.expected}"
            elif result.message:
                line += f": {result.message}"
            lines.append(line)

        lines.append("")
        lines.append(
            f"{self.passed} réussie(s), {self.failed} échouée(s), {self.skipped} sautée(s) "
            f"({len(self.results)} assertions en {self.duration:.2f}s)"
        )
        return "\n".join(lines)
