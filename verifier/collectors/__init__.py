"""
Package des collecteurs d'informations sur l'hôte vérifié
"""
