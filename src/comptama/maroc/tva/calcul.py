"""Calcul HT/TVA/TTC par ligne et par document.

Chaque ligne est arrondie au centime; les totaux du document sont la somme
des valeurs de ligne deja arrondies (jamais un arrondi unique du total
general). La TVA est en plus ventilee par taux distinct.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal
from typing import TYPE_CHECKING

from comptama.modeles import Document, LigneDocument, ModeTVA, TypeDocument
from comptama.montants import (
    CENT,
    ZERO,
    arrondir,
    assainir_taux,
    borner_pourcentage,
    en_decimal,
)

if TYPE_CHECKING:
    from comptama.maroc.tva.encaissement import TvaEncaissement


@dataclass(frozen=True)
class MontantsLigne:
    """Montants calcules d'une ligne."""

    ht: Decimal
    tva: Decimal
    taux_tva: Decimal
    ttc: Decimal
    remise: Decimal


@dataclass
class TotauxDocument:
    """Totaux d'un document, avec ventilation de la TVA par taux."""

    ht: Decimal = Decimal("0.00")
    tva: Decimal = Decimal("0.00")
    ttc: Decimal = Decimal("0.00")
    remise: Decimal = Decimal("0.00")
    tva_par_taux: dict[Decimal, Decimal] = field(default_factory=dict)
    reste_a_payer: Decimal = Decimal("0.00")  # negatif si trop-percu
    encaissement: TvaEncaissement | None = None


def calculer_montants_ligne(
    quantite: object,
    prix_unitaire: object,
    remise_pct: object = 0,
    taux_tva: object = 0,
) -> MontantsLigne:
    """Calcule HT, TVA, TTC et remise d'une ligne a partir de valeurs brutes.

    La remise est bornee a [0, 100]; le taux est assaini (virgule acceptee,
    illisible ou negatif -> 0). Aucune erreur n'est levee: une valeur
    illisible vaut zero.

    Args:
        quantite: Quantite.
        prix_unitaire: Prix unitaire HT avant remise.
        remise_pct: Remise en pourcentage.
        taux_tva: Taux de TVA en pourcentage (ex: "20" ou "5,5").

    Returns:
        MontantsLigne avec ht + tva == ttc au centime pres.
    """
    qte = en_decimal(quantite)
    prix = en_decimal(prix_unitaire)
    remise = borner_pourcentage(remise_pct)
    taux = assainir_taux(taux_tva)

    prix_remise = prix * (1 - remise / CENT)
    ht = arrondir(qte * prix_remise)
    tva = arrondir(ht * taux / CENT)
    ttc = arrondir(ht + tva)

    return MontantsLigne(
        ht=ht,
        tva=tva,
        taux_tva=taux,
        ttc=ttc,
        remise=arrondir(qte * prix - ht),
    )


def calculer_ligne(ligne: LigneDocument) -> MontantsLigne:
    """Calcule les montants d'une LigneDocument."""
    return calculer_montants_ligne(
        ligne.quantite, ligne.prix_unitaire, ligne.remise_pct, ligne.taux_tva
    )


def total_paiements(document: Document) -> Decimal:
    """Somme des paiements enregistres sur le document (non arrondie)."""
    return sum((p.montant for p in document.paiements), ZERO)


def calculer_totaux_document(
    document: Document,
    mode: ModeTVA = ModeTVA.DEBIT,
) -> TotauxDocument:
    """Agrege les lignes d'un document.

    Les cumuls HT, TVA, TTC et remise additionnent les valeurs de ligne deja
    arrondies. Le reste a payer vaut arrondir(TTC - somme des paiements) et
    peut etre negatif (trop-percu).

    En mode ENCAISSEMENT, une facture de vente recoit en plus la repartition
    de sa TVA sur ses paiements (voir encaissement.repartir_tva_encaissement).

    Args:
        document: Document a totaliser.
        mode: Regime de TVA (DEBIT ou ENCAISSEMENT).

    Returns:
        TotauxDocument.
    """
    totaux = TotauxDocument()

    for ligne in document.lignes:
        m = calculer_ligne(ligne)
        totaux.ht = arrondir(totaux.ht + m.ht)
        totaux.tva = arrondir(totaux.tva + m.tva)
        totaux.ttc = arrondir(totaux.ttc + m.ttc)
        totaux.remise = arrondir(totaux.remise + m.remise)
        cumul = totaux.tva_par_taux.get(m.taux_tva, ZERO)
        totaux.tva_par_taux[m.taux_tva] = arrondir(cumul + m.tva)

    totaux.reste_a_payer = arrondir(totaux.ttc - total_paiements(document))

    if mode == ModeTVA.ENCAISSEMENT and document.type == TypeDocument.FACTURE:
        from comptama.maroc.tva.encaissement import repartir_tva_encaissement

        totaux.encaissement = repartir_tva_encaissement(document, totaux)

    return totaux

