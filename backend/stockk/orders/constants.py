"""
Constantes pour le module de gestion des commandes.
"""

# Plus grande valeur d'une colonne INTEGER (int4 PostgreSQL).
# Au-delà, un ID de produit ou une quantité ne peut pas être stocké.
MAX_DB_INTEGER = 2**31 - 1
