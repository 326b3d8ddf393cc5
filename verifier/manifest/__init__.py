"""
Tables déclaratives de ce qu'une installation correcte laisse sur l'hôte
"""
