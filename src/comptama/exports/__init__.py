"""Exports de fichiers (declaration TVA, CSV CNSS)."""

from comptama.exports.base import ExportFichier, ecrire_export, horodatage_ms
from comptama.exports.cnss import exporter_cnss, generer_csv_cnss

__all__ = [
    "ExportFichier",
    "ecrire_export",
    "horodatage_ms",
    "exporter_cnss",
    "generer_csv_cnss",
]
