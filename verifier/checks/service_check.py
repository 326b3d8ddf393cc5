"""
Contrôle de l'état d'un service
"""

from typing import Any, List, Tuple

from .base import BaseCheck
from ..core.exceptions import ProbeError
from ..core.results import CheckResult


class ServiceCheck(BaseCheck):
    """
    Contrôle installed / enabled / running d'un service

    Les trois assertions sont sautées lorsque la version majeure de l'hôte
    figure dans expectation.skip_major_versions.
    """

    def __init__(self, expectation, probe, host, logger):
        """
        Args:
            expectation: ServiceExpectation
            probe: BaseServiceProbe
            host: HostInfo
            logger: Instance de VerifierLogger
        """
        super().__init__(logger)
        self.expectation = expectation
        self.probe = probe
        self.host = host

    @property
    def subject(self) -> str:
        return f"service {self.expectation.name}"

    def describe(self) -> List[Tuple[str, Any]]:
        return [
            ('installed', self.expectation.installed),
            ('enabled', self.expectation.enabled),
            ('running', self.expectation.running)
        ]

    def skip_reason(self) -> str:
        """
        Raison de saut des contrôles du service sur cet hôte

        Returns:
            str: Raison, ou chaîne vide si les contrôles s'appliquent
        """
        major = self.host.major_version
        if major is not None and major in self.expectation.skip_major_versions:
            return (f"contrôles du service non applicables sur "
                    f"{self.host.distribution} {major}")
        return ""

    def _evaluate(self) -> List[CheckResult]:
        reason = self.skip_reason()
        if reason:
            self.logger.info(f"{self.subject}: {reason}")
            return [
                CheckResult.skipped(self.subject, assertion, expected, reason)
                for assertion, expected in self.describe()
            ]

        queries = {
            'installed': self.probe.is_installed,
            'enabled': self.probe.is_enabled,
            'running': self.probe.is_running
        }

        results = []
        for assertion, expected in self.describe():
            try:
                actual = queries[assertion]()
            except ProbeError as e:
                results.append(CheckResult.failure(self.subject, assertion, expected, str(e)))
                continue
            results.append(CheckResult.compare(self.subject, assertion, expected, actual))

        return results
