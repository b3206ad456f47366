"""Export CSV des elements de paie pour la declaration CNSS.

Format: separateur point-virgule, UTF-8 avec BOM (ouverture directe dans
Excel), une ligne d'en-tete, montants a 2 decimales.
"""

from __future__ import annotations

import csv
import io

from comptama.exports.base import ExportFichier, horodatage_ms
from comptama.modeles import ElementPaie
from comptama.montants import arrondir

BOM = "\ufeff"

EN_TETES_CNSS = ["ID", "Nom", "Poste", "CNSS", "Période", "Brut", "Retenues", "Avantages", "Net"]


def lignes_cnss(paie: list[ElementPaie]) -> list[list[str]]:
    """Lignes de donnees CSV (sans en-tete)."""
    return [
        [
            element.id,
            element.nom,
            element.poste,
            element.cnss,
            element.periode,
            str(arrondir(element.salaire_brut)),
            str(arrondir(element.total_retenues)),
            str(arrondir(element.total_avantages)),
            str(arrondir(element.salaire_net)),
        ]
        for element in paie
    ]


def generer_csv_cnss(paie: list[ElementPaie]) -> str:
    """Rend le CSV CNSS (BOM inclus)."""
    tampon = io.StringIO()
    writer = csv.writer(tampon, delimiter=";", lineterminator="\n")
    writer.writerow(EN_TETES_CNSS)
    writer.writerows(lignes_cnss(paie))
    return BOM + tampon.getvalue()


def exporter_cnss(
    paie: list[ElementPaie],
    prefixe: str = "CNSS",
    horodatage: int | None = None,
) -> ExportFichier:
    """Construit le fichier CSV CNSS nomme <PREFIXE>-<epoch-ms>.csv."""
    if horodatage is None:
        horodatage = horodatage_ms()
    return ExportFichier(
        nom_fichier=f"{prefixe}-{horodatage}.csv",
        contenu=generer_csv_cnss(paie).encode("utf-8"),
        type_mime="text/csv;charset=utf-8",
    )
