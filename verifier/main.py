"""
Point d'entrée principal du vérificateur d'installation stanza

Modes de fonctionnement :
- verify : vérifie l'hôte et affiche le rapport (mode par défaut)
- list : affiche les assertions prévues sans interroger l'hôte
- send : publie un rapport JSON déjà enregistré

Codes de sortie :
- 0 : toutes les assertions ont réussi (les sauts sont acceptés)
- 1 : au moins une assertion a échoué, ou la publication a échoué
- 2 : erreur de configuration, plateforme non supportée ou fichier de rapport
  illisible ou impossible à écrire
"""

import os
import sys
import json
import argparse

from verifier.core.config import VerifierConfig, create_default_config
from verifier.core.exceptions import VerifierError
from verifier.core.logger import VerifierLogger
from verifier.core.runner import VerificationRunner
from verifier.core.sender import ReportSender


EXIT_OK = 0
EXIT_FAILED = 1
EXIT_ERROR = 2


class StanzaInstallVerifier:
    """
    Vérificateur d'installation principal

    Cette classe assemble la configuration, le logging, le runner et la
    publication des rapports.
    """

    def __init__(self, config: VerifierConfig):
        """
        Args:
            config: Configuration déjà validée
        """
        self.config = config
        self.logger = VerifierLogger(self.config)
        self.app_logger = self.logger.get_logger()

        self.runner = VerificationRunner(self.config, self.logger)
        self.sender = ReportSender(self.config, self.logger)

    def verify(self):
        """
        Lance la vérification complète

        Returns:
            VerificationReport: Rapport de vérification
        """
        self.logger.log_config_info(self.config)
        return self.runner.run()

    def list_plan(self):
        """
        Liste les assertions prévues pour cet hôte

        Returns:
            list: Couples (sujet, [(assertion, attendu), ...])
        """
        return [(check.subject, check.describe()) for check in self.runner.plan()]

    def publish(self, report_data):
        """
        Publie un rapport sérialisé

        Args:
            report_data: Rapport au format dict

        Returns:
            tuple: (success, message)
        """
        report_config = self.config.get_report_config()
        return self.sender.send_report_with_retry(
            report_data,
            max_retries=report_config['max_retries'],
            retry_delay=report_config['retry_delay']
        )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog='stanza-verify',
        description="Vérification post-installation de l'agent stanza (chemins et service)"
    )

    parser.add_argument(
        '--config', '-c',
        type=str,
        help='Chemin vers le fichier de configuration'
    )

    parser.add_argument(
        '--mode', '-m',
        choices=['verify', 'list', 'send'],
        default='verify',
        help='Mode de fonctionnement'
    )

    parser.add_argument(
        '--format', '-f',
        choices=['text', 'json'],
        default='text',
        help='Format du rapport affiché'
    )

    parser.add_argument(
        '--output', '-o',
        type=str,
        help='Fichier JSON du rapport (écrit en mode verify, lu en mode send)'
    )

    parser.add_argument(
        '--create-config',
        action='store_true',
        help='Crée un fichier de configuration par défaut'
    )

    parser.add_argument(
        '--validate-config',
        action='store_true',
        help='Valide la configuration actuelle'
    )

    return parser


def main(argv=None) -> int:
    """
    Point d'entrée principal avec gestion des arguments de ligne de commande

    Args:
        argv: Arguments (sys.argv[1:] par défaut)

    Returns:
        int: Code de sortie
    """
    args = _build_parser().parse_args(argv)

    if args.create_config:
        if not args.config:
            print("❌ --config est requis avec --create-config", file=sys.stderr)
            return EXIT_ERROR
        try:
            create_default_config(args.config)
        except (OSError, VerifierError) as e:
            print(f"❌ Erreur création configuration: {e}", file=sys.stderr)
            return EXIT_ERROR
        print(f"✅ Configuration par défaut créée: {args.config}")
        return EXIT_OK

    try:
        config = VerifierConfig(args.config)
    except VerifierError as e:
        print(f"❌ Erreur initialisation: {e}", file=sys.stderr)
        return EXIT_ERROR

    errors = config.validate()
    if errors:
        for error in errors:
            print(f"Erreur de configuration: {error}", file=sys.stderr)
        print("❌ Configuration invalide", file=sys.stderr)
        return EXIT_ERROR

    if args.validate_config:
        print("✅ Configuration valide")
        return EXIT_OK

    verifier = StanzaInstallVerifier(config)

    try:
        if args.mode == 'list':
            return _run_list(verifier, args)
        if args.mode == 'send':
            return _run_send(verifier, args)
        return _run_verify(verifier, args)

    except VerifierError as e:
        verifier.app_logger.error(str(e))
        print(f"❌ Erreur: {e}", file=sys.stderr)
        return EXIT_ERROR
    except KeyboardInterrupt:
        print("\n🛑 Arrêt demandé par l'utilisateur", file=sys.stderr)
        return EXIT_ERROR


def _run_verify(verifier: StanzaInstallVerifier, args) -> int:
    report = verifier.verify()
    report_data = report.to_dict()

    if args.format == 'json':
        print(json.dumps(report_data, indent=2, ensure_ascii=False))
    else:
        print(report.render_text())

    exit_code = EXIT_OK if report.success else EXIT_FAILED

    if args.output:
        try:
            with open(args.output, 'w', encoding='utf-8') as f:
                json.dump(report_data, f, indent=2, ensure_ascii=False)
            verifier.app_logger.info(f"Rapport sauvegardé dans: {args.output}")
        except OSError as e:
            verifier.app_logger.error(f"Impossible d'écrire le rapport {args.output}: {e}")
            print(f"❌ Écriture du rapport: {e}", file=sys.stderr)
            exit_code = EXIT_ERROR

    if verifier.config.get_report_config()['enabled']:
        success, message = verifier.publish(report_data)
        if not success:
            print(f"❌ Publication du rapport: {message}", file=sys.stderr)
            return max(exit_code, EXIT_FAILED)

    return exit_code


def _run_list(verifier: StanzaInstallVerifier, args) -> int:
    plan = verifier.list_plan()

    if args.format == 'json':
        print(json.dumps([
            {'subject': subject, 'assertions': [
                {'assertion': assertion, 'expected': expected} for assertion, expected in assertions
            ]}
            for subject, assertions in plan
        ], indent=2, ensure_ascii=False))
        return EXIT_OK

    for subject, assertions in plan:
        print(subject)
        for assertion, expected in assertions:
            print(f"  {assertion} = {expected}")
    return EXIT_OK


def _run_send(verifier: StanzaInstallVerifier, args) -> int:
    if not args.output or not os.path.exists(args.output):
        print("❌ Aucun rapport à envoyer. Utilisez --output pour spécifier le fichier.", file=sys.stderr)
        return EXIT_ERROR

    if not verifier.config.get_report_config()['url']:
        print("❌ Aucune URL de publication configurée ([report] url)", file=sys.stderr)
        return EXIT_ERROR

    try:
        with open(args.output, 'r', encoding='utf-8') as f:
            report_data = json.load(f)
    except (OSError, ValueError) as e:
        verifier.app_logger.error(f"Rapport illisible {args.output}: {e}")
        print(f"❌ Rapport illisible: {e}", file=sys.stderr)
        return EXIT_ERROR

    success, message = verifier.publish(report_data)
    if success:
        print(f"✅ Envoi réussi: {message}")
        return EXIT_OK

    print(f"❌ Erreur envoi: {message}", file=sys.stderr)
    return EXIT_FAILED


if __name__ == '__main__':
    sys.exit(main())
