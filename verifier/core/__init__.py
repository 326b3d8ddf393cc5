"""
Module Core - Composants principaux du vérificateur

Ce module contient les fonctionnalités de base du vérificateur :
- Configuration
- Logging
- Orchestration des contrôles
- Rapport et publication
"""
