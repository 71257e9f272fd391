"""
Constantes pour le module de gestion des ingrédients.
"""

# Seuil d'alerte: un ingrédient sous 50 % de son stock total est en stock bas.
# La comparaison est stricte (< 50), un ingrédient à exactement 50 % n'alerte pas.
LOW_STOCK_THRESHOLD_PERCENT = 50
