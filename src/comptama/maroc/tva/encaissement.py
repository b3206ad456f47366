"""TVA sur les encaissements: repartition de la TVA d'une facture sur ses paiements.

Sous le regime de l'encaissement, la TVA n'est exigible qu'au fur et a mesure
des reglements recus, proportionnellement a chaque taux.

Chaque paiement est rapporte au TTC d'origine de la facture (et non au solde
restant). Si le cumul des paiements depasse le TTC, une meme TVA peut donc
etre comptee plusieurs fois: le resultat le signale via `depassement` et un
avertissement est journalise, sans correction.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from decimal import Decimal

from comptama.maroc.tva.calcul import (
    TotauxDocument,
    calculer_totaux_document,
    total_paiements,
)
from comptama.modeles import Document, ModeTVA, Paiement
from comptama.montants import ZERO, arrondir

logger = logging.getLogger(__name__)

UN = Decimal("1")


@dataclass(frozen=True)
class PaiementVentile:
    """Un paiement avec sa quote-part de TVA par taux."""

    paiement: Paiement
    ratio: Decimal
    tva_par_taux: dict[Decimal, Decimal]


@dataclass
class TvaEncaissement:
    """TVA exigible au titre des encaissements d'une facture."""

    par_paiement: list[PaiementVentile] = field(default_factory=list)
    tva_collectee: dict[Decimal, Decimal] = field(default_factory=dict)
    total_collecte: Decimal = Decimal("0.00")
    depassement: bool = False


def ratio_paiement(montant: Decimal, ttc: Decimal) -> Decimal:
    """Part du TTC couverte par un paiement, bornee a [0, 1]; 0 si TTC nul."""
    if ttc <= ZERO:
        return ZERO
    return min(max(montant / ttc, ZERO), UN)


def repartir_tva_encaissement(
    document: Document,
    totaux: TotauxDocument | None = None,
) -> TvaEncaissement:
    """Repartit la TVA de chaque taux sur les paiements d'une facture.

    Pour chaque paiement: ratio = borne(montant / TTC, 0, 1), puis pour chaque
    taux, quote-part = arrondir(TVA du taux x ratio). Les quotes-parts sont
    cumulees par taux et au total.

    Args:
        document: Facture avec ses paiements.
        totaux: Totaux deja calcules (recalcules en mode DEBIT si absents).

    Returns:
        TvaEncaissement.
    """
    if totaux is None:
        totaux = calculer_totaux_document(document, ModeTVA.DEBIT)

    ttc = totaux.ttc
    resultat = TvaEncaissement()

    for paiement in document.paiements:
        ratio = ratio_paiement(paiement.montant, ttc)
        parts = {
            taux: arrondir(tva_taux * ratio)
            for taux, tva_taux in totaux.tva_par_taux.items()
        }
        resultat.par_paiement.append(
            PaiementVentile(paiement=paiement, ratio=ratio, tva_par_taux=parts)
        )
        for taux, part in parts.items():
            cumul = resultat.tva_collectee.get(taux, ZERO)
            resultat.tva_collectee[taux] = arrondir(cumul + part)

    resultat.total_collecte = arrondir(sum(resultat.tva_collectee.values(), ZERO))

    paye = total_paiements(document)
    if ttc > ZERO and paye > ttc:
        resultat.depassement = True
        logger.warning(
            "Document %s: paiements cumules %s superieurs au TTC %s, "
            "la TVA encaissee peut etre comptee en double",
            document.id,
            paye,
            ttc,
        )

    return resultat
