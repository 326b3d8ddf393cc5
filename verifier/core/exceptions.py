"""
Exceptions du vérificateur d'installation

Les écarts constatés sur l'hôte ne sont pas des exceptions : ils deviennent
des résultats en échec. Ces exceptions couvrent les erreurs qui empêchent
une vérification d'avoir lieu.
"""


class VerifierError(Exception):
    """Erreur de base du vérificateur"""


class ConfigurationError(VerifierError):
    """Configuration illisible ou invalide"""


class UnsupportedPlatformError(VerifierError):
    """Plateforme sans table de vérification"""


class ProbeError(VerifierError):
    """Le gestionnaire de services n'a pas pu être interrogé"""
