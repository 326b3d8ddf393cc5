"""
Module d'orchestration de la vérification

Ce module coordonne une exécution complète :
- Détection de l'hôte
- Construction de la table de vérification
- Exécution des contrôles (séquentielle ou parallèle)
- Assemblage du rapport
"""

import time
from concurrent.futures import ThreadPoolExecutor
from datetime import datetime
from typing import List, Optional

from .results import CheckResult, VerificationReport
from ..checks.base import BaseCheck
from ..checks.file_check import FileCheck
from ..checks.service_check import ServiceCheck
from ..collectors.host import HostCollector, HostInfo
from ..manifest.stanza import build_manifest
from ..services.service_manager import ServiceManager


class VerificationRunner:
    """
    Orchestrateur de la vérification d'installation

    Les contrôles sont indépendants et en lecture seule : ils peuvent être
    exécutés en parallèle sans changer le résultat. Le rapport conserve
    toujours l'ordre de déclaration.
    """

    def __init__(self, config, logger, host: Optional[HostInfo] = None):
        """
        Initialise le runner

        Args:
            config: Instance de VerifierConfig
            logger: Instance de VerifierLogger
            host: Hôte déjà détecté (détecté à la demande sinon)
        """
        self.config = config
        self.verifier_logger = logger
        self.logger = logger.get_logger()

        verifier_config = config.get_verifier_config()
        self.parallel = verifier_config['parallel']
        self.max_workers = verifier_config['max_workers']

        self._host = host
        self.service_manager = ServiceManager(logger)

    @property
    def host(self) -> HostInfo:
        if self._host is None:
            self._host = HostCollector(self.config, self.verifier_logger).collect()
        return self._host

    def plan(self) -> List[BaseCheck]:
        """
        Construit la liste des contrôles pour l'hôte courant

        Returns:
            list: Contrôles des chemins puis des services
        """
        manifest = build_manifest(self.host, self.config)
        checks: List[BaseCheck] = []

        for expectation in manifest.paths:
            checks.append(FileCheck(expectation, self.verifier_logger, manifest.check_permissions))

        for expectation in manifest.services:
            probe = self.service_manager.get_probe(expectation.name, self.host)
            checks.append(ServiceCheck(expectation, probe, self.host, self.verifier_logger))

        self.logger.info(
            f"Table {manifest.platform}: {len(manifest.paths)} chemin(s), "
            f"{len(manifest.services)} service(s)"
        )
        return checks

    def run(self) -> VerificationReport:
        """
        Lance la vérification complète

        Returns:
            VerificationReport: Rapport de vérification
        """
        started_at = datetime.now()
        start_time = time.time()
        self.logger.info("=== Début de la vérification d'installation ===")

        checks = self.plan()

        if self.parallel and len(checks) > 1:
            self.logger.info(f"Exécution parallèle ({self.max_workers} workers)")
            with ThreadPoolExecutor(max_workers=self.max_workers) as executor:
                # map() conserve l'ordre des contrôles
                batches = list(executor.map(self._run_check, checks))
        else:
            batches = [self._run_check(check) for check in checks]

        results = [result for batch in batches for result in batch]
        report = VerificationReport(
            host=self.host.to_dict(),
            results=results,
            started_at=started_at,
            duration=time.time() - start_time
        )

        self.logger.info(
            f"Vérification terminée: {report.passed} réussie(s), {report.failed} échouée(s), "
            f"{report.skipped} sautée(s) en {report.duration:.2f}s"
        )
        self.logger.info("=== Fin de la vérification d'installation ===")
        return report

    def _run_check(self, check: BaseCheck) -> List[CheckResult]:
        """
        Exécute un contrôle en isolant ses erreurs

        Une erreur inattendue fait échouer les assertions du contrôle sans
        interrompre les autres.

        Args:
            check: Contrôle à exécuter

        Returns:
            list: Résultats du contrôle
        """
        try:
            return check.run()
        except Exception as e:
            self.logger.exception(f"Erreur inattendue pendant le contrôle {check.subject}")
            return [
                CheckResult.failure(check.subject, assertion, expected, f"erreur inattendue: {e}")
                for assertion, expected in check.describe()
            ]
