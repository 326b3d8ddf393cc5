"""
Module de publication des rapports de vérification

Ce module gère :
- L'envoi du rapport JSON vers un point de collecte HTTP
- L'authentification par jeton
- La gestion des erreurs réseau
- Les nouvelles tentatives
"""

import json
import time
from datetime import datetime
from typing import Dict, Any, Tuple

import requests

from .. import __version__


SUCCESS_STATUS_CODES = (200, 201, 202)


class ReportSender:
    """
    Publication des rapports de vérification

    Les erreurs réseau ne sont jamais levées vers l'appelant : chaque envoi
    retourne un couple (succès, message).
    """

    def __init__(self, config, logger):
        """
        Initialise le sender avec la configuration

        Args:
            config: Instance de VerifierConfig
            logger: Instance de VerifierLogger
        """
        self.config = config
        self.logger = logger.get_logger()

        report_config = config.get_report_config()
        self.url = report_config['url']
        self.auth_token = report_config['auth_token']
        self.timeout = report_config['timeout']
        self.verify_ssl = report_config['verify_ssl']

        self.send_attempts = 0
        self.send_failures = 0
        self.last_successful_send = None

    def _headers(self) -> Dict[str, str]:
        headers = {
            'Content-Type': 'application/json',
            'User-Agent': f'StanzaVerify/{__version__}'
        }
        if self.auth_token:
            headers['Authorization'] = f'Bearer {self.auth_token}'
        return headers

    def send_report(self, report_data: Dict[str, Any]) -> Tuple[bool, str]:
        """
        Envoie un rapport au point de collecte

        Args:
            report_data: Rapport sérialisé (VerificationReport.to_dict())

        Returns:
            Tuple[bool, str]: (Succès, Message de résultat)
        """
        self.send_attempts += 1

        payload = {
            'timestamp': datetime.now().isoformat(),
            'verifier_version': __version__,
            'report': report_data
        }

        try:
            self.logger.info(f"Envoi du rapport vers {self.url}")
            self.logger.debug(f"Taille des données: {len(json.dumps(payload))} bytes")

            response = requests.post(
                url=self.url,
                json=payload,
                headers=self._headers(),
                timeout=self.timeout,
                verify=self.verify_ssl
            )

        except requests.exceptions.Timeout:
            return self._failed(f"Timeout lors de l'envoi (>{self.timeout}s)")

        except requests.exceptions.SSLError as e:
            return self._failed(f"Erreur SSL: {e}")

        except requests.exceptions.ConnectionError as e:
            return self._failed(f"Erreur de connexion: {e}")

        except requests.exceptions.RequestException as e:
            return self._failed(f"Erreur de requête: {e}")

        if response.status_code in SUCCESS_STATUS_CODES:
            self.last_successful_send = datetime.now()
            self.logger.info("Rapport envoyé avec succès")
            return True, f"Envoi réussi (HTTP {response.status_code})"

        if response.status_code == 401:
            return self._failed("Erreur d'authentification (jeton invalide ou manquant)")

        if response.status_code == 403:
            return self._failed("Accès refusé par le serveur")

        return self._failed(f"Erreur serveur HTTP {response.status_code}: {response.text[:200]}")

    def _failed(self, message: str) -> Tuple[bool, str]:
        self.send_failures += 1
        self.logger.error(message)
        return False, message

    def send_report_with_retry(self, report_data: Dict[str, Any], max_retries: int = 3,
                               retry_delay: int = 5) -> Tuple[bool, str]:
        """
        Envoie le rapport avec nouvelles tentatives

        Args:
            report_data: Rapport sérialisé
            max_retries: Nombre de tentatives supplémentaires
            retry_delay: Délai entre les tentatives (secondes)

        Returns:
            Tuple[bool, str]: (Succès final, Message de résultat)
        """
        last_error = ""

        for attempt in range(max_retries + 1):
            if attempt > 0:
                self.logger.info(f"Tentative {attempt + 1}/{max_retries + 1}")
                time.sleep(retry_delay)

            success, message = self.send_report(report_data)
            if success:
                return True, message

            last_error = message
            if attempt < max_retries:
                self.logger.warning(f"Tentative {attempt + 1} échouée: {message}")

        self.logger.error(f"Échec définitif après {max_retries + 1} tentatives")
        return False, f"Échec après {max_retries + 1} tentatives. Dernière erreur: {last_error}"

    def get_stats(self) -> Dict[str, Any]:
        """
        Retourne les statistiques d'envoi

        Returns:
            dict: Statistiques d'envoi
        """
        return {
            'last_successful_send': self.last_successful_send.isoformat() if self.last_successful_send else None,
            'total_attempts': self.send_attempts,
            'total_failures': self.send_failures,
            'url': self.url
        }
