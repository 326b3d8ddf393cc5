"""
Stanza Install Verifier - Vérification post-installation de l'agent stanza

Ce package vérifie, en lecture seule, qu'une installation de l'agent stanza
est conforme : chemins installés (type, mode, propriétaire, groupe) et
état du service (installé, activé, démarré), sous Linux et Windows.

Version: 1.0.0
"""

__version__ = "1.0.0"
__author__ = "Stanza Install Verifier Team"

# Imports principaux pour faciliter l'utilisation
from .core.config import VerifierConfig
from .core.logger import VerifierLogger
from .core.runner import VerificationRunner

__all__ = ['VerifierConfig', 'VerifierLogger', 'VerificationRunner']
