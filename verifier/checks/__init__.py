"""
Package des contrôles du vérificateur

- Contrôle de base (classe abstraite)
- Contrôle des chemins installés
- Contrôle de l'état des services
"""
