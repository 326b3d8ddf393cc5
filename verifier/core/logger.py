"""
Module de logging du vérificateur d'installation

Ce module fournit un système de logging centralisé avec :
- Rotation automatique des logs
- Différents niveaux de log
- Formatage cohérent
- Support multi-plateforme
"""

import os
import sys
import logging
import logging.handlers


LOGGER_NAME = 'StanzaVerify'

# Marque posée sur les handlers ajoutés par VerifierLogger
HANDLER_MARKER = '_stanza_verify'


class VerifierLogger:
    """
    Gestionnaire de logging du vérificateur

    Cette classe configure le logger nommé de l'application, avec un fichier
    en rotation et une sortie console simplifiée.
    """

    def __init__(self, config=None):
        """
        Initialise le système de logging

        Args:
            config: Instance de VerifierConfig pour récupérer les paramètres de log
        """
        self.config = config
        self.logger = logging.getLogger(LOGGER_NAME)

        # Éviter la duplication si déjà configuré (les handlers tiers sont ignorés)
        if not self._own_handlers():
            self._setup_logging()

    def _setup_logging(self):
        """
        Configure le logger avec les handlers appropriés

        Configure :
        - Le niveau de log basé sur la configuration
        - La rotation du fichier de log (désactivée si log_file est vide)
        - La sortie console
        """
        if self.config:
            log_level_str = self.config.get('verifier', 'log_level', 'INFO')
            log_file = self.config.get('logging', 'log_file', '')
            max_size = self.config.getint('logging', 'max_log_size', 10485760)  # 10MB
            backup_count = self.config.getint('logging', 'backup_count', 5)
        else:
            log_level_str = 'INFO'
            log_file = ''
            max_size = 10485760
            backup_count = 5

        log_level = getattr(logging, log_level_str.upper(), logging.INFO)
        self.logger.setLevel(log_level)
        self.logger.propagate = False

        formatter = logging.Formatter(
            fmt='%(asctime)s - %(name)s - %(levelname)s - [%(filename)s:%(lineno)d] - %(message)s',
            datefmt='%Y-%m-%d %H:%M:%S'
        )

        if log_file:
            try:
                log_dir = os.path.dirname(log_file)
                if log_dir and not os.path.exists(log_dir):
                    os.makedirs(log_dir, exist_ok=True)

                file_handler = logging.handlers.RotatingFileHandler(
                    filename=log_file,
                    maxBytes=max_size,
                    backupCount=backup_count,
                    encoding='utf-8'
                )
                file_handler.setLevel(log_level)
                file_handler.setFormatter(formatter)
                self._add_handler(file_handler)

            except OSError as e:
                # Un fichier de log inaccessible ne doit pas empêcher la vérification
                print(f"Erreur lors de la configuration du logging fichier: {e}", file=sys.stderr)

        # Console sur stderr : stdout est réservé au rapport
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(logging.Formatter(fmt='%(levelname)s - %(message)s'))
        self._add_handler(console_handler)

        self.logger.debug("Système de logging initialisé")
        if self.config:
            self.logger.debug(f"Niveau de log: {log_level_str}")
            self.logger.debug(f"Fichier de log: {log_file or 'désactivé'}")

    def _own_handlers(self):
        return [h for h in self.logger.handlers if getattr(h, HANDLER_MARKER, False)]

    def _add_handler(self, handler: logging.Handler):
        setattr(handler, HANDLER_MARKER, True)
        self.logger.addHandler(handler)

    def get_logger(self) -> logging.Logger:
        """
        Retourne l'instance du logger

        Returns:
            logging.Logger: Instance du logger configuré
        """
        return self.logger

    def log_config_info(self, config):
        """
        Log les informations de configuration (sans les données sensibles)

        Args:
            config: Instance de VerifierConfig
        """
        self.logger.info("=== Configuration du vérificateur ===")

        for key, value in config.get_target_config().items():
            self.logger.info(f"Target.{key}: {value}")

        for key, value in config.get_verifier_config().items():
            self.logger.info(f"Verifier.{key}: {value}")

        for key, value in config.get_report_config().items():
            if key == 'auth_token':
                token_preview = value[:8] + "..." if len(value) > 8 else "Non configuré"
                self.logger.info(f"Report.{key}: {token_preview}")
            else:
                self.logger.info(f"Report.{key}: {value}")

        self.logger.info("=== Fin configuration ===")


def reset_logging():
    """Retire et ferme les handlers posés par VerifierLogger, pour reconfigurer le logger"""
    logger = logging.getLogger(LOGGER_NAME)
    for handler in list(logger.handlers):
        if getattr(handler, HANDLER_MARKER, False):
            logger.removeHandler(handler)
            handler.close()
