"""Stockk: gestion des stocks d'ingrédients et des commandes d'un restaurant."""

__version__ = "1.0.0"
