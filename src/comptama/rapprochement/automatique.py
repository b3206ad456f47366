"""Rapprochement automatique: meilleure correspondance par ecriture bancaire.

Algorithme glouton: chaque ecriture non rapprochee, dans l'ordre fourni, est
comparee a tous les documents non rapproches; le meilleur score (premier
document rencontre en cas d'egalite) est propose s'il atteint le seuil.

Un document choisi n'est pas retire des candidats pour les ecritures
suivantes: deux ecritures peuvent proposer le meme document. C'est a
l'appelant de trancher (voir documents_en_conflit).
"""

from __future__ import annotations

import logging

from pydantic import BaseModel, Field

from comptama.modeles import Document, EcritureBancaire
from comptama.rapprochement.scoring import (
    ConfigRapprochement,
    reste_a_payer,
    score_correspondance,
)

logger = logging.getLogger(__name__)


class Correspondance(BaseModel):
    """Une correspondance proposee entre une ecriture bancaire et un document."""

    ecriture_id: str = Field(description="Identifiant de l'ecriture bancaire")
    document_id: str = Field(description="Identifiant du document")
    score: float = Field(ge=0.0, le=1.0, description="Score de correspondance")


def auto_rapprocher(
    ecritures: list[EcritureBancaire],
    documents: list[Document],
    config: ConfigRapprochement | None = None,
) -> list[Correspondance]:
    """Propose au plus une correspondance par ecriture bancaire non rapprochee.

    Args:
        ecritures: Ecritures bancaires, parcourues dans l'ordre fourni.
        documents: Documents candidats; ceux deja rapproches sont ignores.
        config: Parametres (seuil 0.7 par defaut).

    Returns:
        Liste de Correspondance (score >= seuil), dans l'ordre des ecritures.
    """
    config = config or ConfigRapprochement()
    ouverts = [(d, reste_a_payer(d)) for d in documents if not d.rapproche]
    correspondances: list[Correspondance] = []

    for ecriture in ecritures:
        if ecriture.rapproche:
            continue

        meilleur_score = 0.0
        meilleur: Document | None = None
        for document, reste in ouverts:
            score = score_correspondance(ecriture, document, config, reste)
            logger.debug("Score %s <-> %s: %.2f", ecriture.id, document.id, score)
            if score > meilleur_score:
                meilleur_score = score
                meilleur = document

        if meilleur is not None and meilleur_score >= config.seuil:
            logger.info(
                "Correspondance proposee: %s -> %s (score %.2f)",
                ecriture.id,
                meilleur.id,
                meilleur_score,
            )
            correspondances.append(
                Correspondance(
                    ecriture_id=ecriture.id,
                    document_id=meilleur.id,
                    score=meilleur_score,
                )
            )

    return correspondances


def documents_en_conflit(correspondances: list[Correspondance]) -> dict[str, list[str]]:
    """Documents proposes pour plusieurs ecritures: {document_id: [ecriture_id, ...]}."""
    par_document: dict[str, list[str]] = {}
    for c in correspondances:
        par_document.setdefault(c.document_id, []).append(c.ecriture_id)
    return {doc: ecritures for doc, ecritures in par_document.items() if len(ecritures) > 1}
