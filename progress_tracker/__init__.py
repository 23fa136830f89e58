"""Suivi de progression - agrégats par rôle et gestion des relevés."""

__version__ = "0.1.0"
