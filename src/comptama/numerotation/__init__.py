"""Numerotation des documents commerciaux."""

from comptama.numerotation.sequence import (
    ConfigNumerotation,
    IdentifiantDocument,
    analyser_identifiant,
    completer_sequence,
    construire_identifiant,
    prochain_identifiant,
)

__all__ = [
    "ConfigNumerotation",
    "IdentifiantDocument",
    "analyser_identifiant",
    "completer_sequence",
    "construire_identifiant",
    "prochain_identifiant",
]
