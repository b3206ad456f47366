"""Score de correspondance entre une ecriture bancaire et un document ouvert.

Trois criteres additifs (poids par defaut):
- montant (0.5): |montant bancaire| et |reste a payer| a moins de 5 unites;
- date (0.2): au plus 5 jours d'ecart;
- reference (0.3): l'identifiant du document figure dans libelle + reference.
  Un document sans identifiant ne marque jamais de point sur ce critere.

Score total dans [0, 1].
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from decimal import Decimal

from pydantic import BaseModel, Field, model_validator

from comptama.maroc.tva.calcul import calculer_totaux_document
from comptama.modeles import Document, EcritureBancaire

logger = logging.getLogger(__name__)


class ConfigRapprochement(BaseModel):
    """Parametres du rapprochement automatique."""

    seuil: float = Field(default=0.7, ge=0.0, le=1.0, description="Score minimum d'une proposition")
    tolerance_montant: Decimal = Field(default=Decimal("5"), ge=0, description="Ecart de montant tolere (strict)")
    fenetre_jours: int = Field(default=5, ge=0, description="Ecart de dates maximal (inclus)")
    poids_montant: float = Field(default=0.5, ge=0.0)
    poids_date: float = Field(default=0.2, ge=0.0)
    poids_reference: float = Field(default=0.3, ge=0.0)

    @model_validator(mode="after")
    def _poids_bornes(self) -> ConfigRapprochement:
        somme = self.poids_montant + self.poids_date + self.poids_reference
        if round(somme, 6) > 1.0:
            raise ValueError(f"La somme des poids doit etre <= 1 (recu: {somme})")
        return self


@dataclass(frozen=True)
class DetailScore:
    """Contribution de chaque critere au score."""

    montant: float
    date: float
    reference: float

    @property
    def total(self) -> float:
        return round(self.montant + self.date + self.reference, 2)


def reste_a_payer(document: Document) -> Decimal:
    """Reste a payer du document: arrondir(TTC - paiements)."""
    return calculer_totaux_document(document).reste_a_payer


def evaluer_correspondance(
    ecriture: EcritureBancaire,
    document: Document,
    config: ConfigRapprochement | None = None,
    reste: Decimal | None = None,
) -> DetailScore:
    """Detaille le score d'une ecriture bancaire face a un document.

    Args:
        ecriture: Mouvement bancaire.
        document: Document candidat (non rapproche).
        config: Parametres (defauts si absent).
        reste: Reste a payer deja calcule (evite un recalcul).

    Returns:
        DetailScore.
    """
    config = config or ConfigRapprochement()
    if reste is None:
        reste = reste_a_payer(document)

    ecart_montant = abs(abs(ecriture.montant) - abs(reste))
    score_montant = config.poids_montant if ecart_montant < config.tolerance_montant else 0.0

    score_date = 0.0
    if ecriture.date is not None and document.date is not None:
        if abs((ecriture.date - document.date).days) <= config.fenetre_jours:
            score_date = config.poids_date

    texte = f"{ecriture.libelle} {ecriture.reference}".lower()
    identifiant = document.id.lower()
    score_reference = config.poids_reference if identifiant and identifiant in texte else 0.0

    return DetailScore(montant=score_montant, date=score_date, reference=score_reference)


def score_correspondance(
    ecriture: EcritureBancaire,
    document: Document,
    config: ConfigRapprochement | None = None,
    reste: Decimal | None = None,
) -> float:
    """Score total (arrondi a 2 decimales) d'une ecriture face a un document."""
    return evaluer_correspondance(ecriture, document, config, reste).total
