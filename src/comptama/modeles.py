"""Modeles de donnees consommes par le moteur de calcul.

Documents commerciaux (factures, devis, achats, avoirs), lignes, paiements,
ecritures bancaires, identite de la societe et elements de paie.

Ces enregistrements appartiennent aux modules de vente/grand livre: le moteur
les lit et ne modifie que les deux champs de lettrage (voir
comptama.rapprochement.lettrage).

Les montants et dates malformes ne levent pas d'erreur de validation: ils
sont ramenes a zero (montants) ou a None (dates).
"""

from __future__ import annotations

import datetime
import logging
from decimal import Decimal
from enum import Enum
from typing import Annotated, Any

from dateutil.parser import isoparse
from pydantic import BaseModel, BeforeValidator, Field

from comptama.montants import ZERO, assainir_taux, en_decimal

logger = logging.getLogger(__name__)


def _en_date(v: Any) -> datetime.date | None:
    """Convertit une date ISO (ou datetime) en date; None si illisible."""
    if v is None or v == "":
        return None
    if isinstance(v, datetime.datetime):
        return v.date()
    if isinstance(v, datetime.date):
        return v
    try:
        return isoparse(str(v).strip()).date()
    except (ValueError, OverflowError):
        logger.warning("Date invalide ignoree: %r", v)
        return None


def _en_texte(v: Any) -> str:
    if v is None:
        return ""
    return str(v)


MontantSouple = Annotated[Decimal, BeforeValidator(en_decimal)]
TauxTVA = Annotated[Decimal, BeforeValidator(assainir_taux)]
DateSouple = Annotated[datetime.date | None, BeforeValidator(_en_date)]
Texte = Annotated[str, BeforeValidator(_en_texte)]


class TypeDocument(str, Enum):
    """Type de document commercial."""

    FACTURE = "invoice"
    DEVIS = "quote"
    ACHAT = "purchase"
    AVOIR = "credit"


class ModeTVA(str, Enum):
    """Fait generateur de la TVA: debit (facturation) ou encaissement."""

    DEBIT = "DEBIT"
    ENCAISSEMENT = "ENCAISSEMENT"


class LigneDocument(BaseModel):
    """Ligne de document: quantite, prix unitaire HT, remise et taux de TVA."""

    description: Texte = ""
    quantite: MontantSouple = ZERO
    prix_unitaire: MontantSouple = ZERO
    remise_pct: MontantSouple = ZERO
    taux_tva: TauxTVA = ZERO


class Paiement(BaseModel):
    """Reglement recu (ou verse) sur un document."""

    montant: MontantSouple = ZERO
    date: DateSouple = None


class Document(BaseModel):
    """Document commercial (facture, devis, achat, avoir)."""

    id: str
    type: TypeDocument = TypeDocument.FACTURE
    date: DateSouple = None
    lignes: list[LigneDocument] = Field(default_factory=list)
    paiements: list[Paiement] = Field(default_factory=list)
    ice_tiers: Texte = ""  # ICE du client ou du fournisseur
    rapproche: bool | None = None
    lettrage_id: str | None = None


class EcritureBancaire(BaseModel):
    """Mouvement de releve bancaire (montant signe)."""

    id: str
    date: DateSouple = None
    montant: MontantSouple = ZERO
    libelle: Texte = ""
    reference: Texte = ""
    rapproche: bool | None = None
    document_id: str | None = None


class Societe(BaseModel):
    """Identite fiscale de la societe declarante."""

    raison_sociale: Texte = ""
    ice: Texte = ""  # Identifiant commun de l'entreprise (15 chiffres)
    identifiant_fiscal: Texte = ""  # IF
    registre_commerce: Texte = ""  # RC


class ElementPaie(BaseModel):
    """Ligne de paie mensuelle d'un salarie (pour la declaration CNSS)."""

    id: Texte
    nom: Texte
    poste: Texte = ""
    cnss: Texte = ""
    periode: Texte = ""
    salaire_brut: MontantSouple = ZERO
    retenues: dict[str, MontantSouple] = Field(default_factory=dict)
    avantages: dict[str, MontantSouple] = Field(default_factory=dict)

    @property
    def total_retenues(self) -> Decimal:
        return sum(self.retenues.values(), ZERO)

    @property
    def total_avantages(self) -> Decimal:
        return sum(self.avantages.values(), ZERO)

    @property
    def salaire_net(self) -> Decimal:
        """Net = brut - retenues + avantages."""
        return self.salaire_brut - self.total_retenues + self.total_avantages
