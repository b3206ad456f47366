"""Taux de TVA legaux au Maroc (Code General des Impots, art. 98 a 100).

Toutes les valeurs sont en Decimal -- jamais de float.
"""

from dataclasses import dataclass
from decimal import Decimal


@dataclass(frozen=True)
class TauxLegal:
    """Taux de TVA en vigueur avec son libelle."""

    taux: Decimal
    libelle: str


TAUX_NORMAL = Decimal("20")

TAUX_LEGAUX: tuple[TauxLegal, ...] = (
    TauxLegal(taux=Decimal("0"), libelle="Exonere"),
    TauxLegal(taux=Decimal("7"), libelle="Taux reduit (eau, produits pharmaceutiques)"),
    TauxLegal(taux=Decimal("10"), libelle="Taux reduit (hotellerie, restauration)"),
    TauxLegal(taux=Decimal("14"), libelle="Taux reduit (transport, energie)"),
    TauxLegal(taux=TAUX_NORMAL, libelle="Taux normal"),
)


def est_taux_legal(taux: Decimal) -> bool:
    """Indique si un taux (en pourcentage) figure dans le bareme legal."""
    return any(t.taux == taux for t in TAUX_LEGAUX)


def libelle_taux(taux: Decimal) -> str:
    """Libelle d'affichage d'un taux: 'Exonere' pour 0, sinon 'NN%'."""
    if taux == 0:
        return "Exonere"
    return f"{taux.normalize():f}%"
