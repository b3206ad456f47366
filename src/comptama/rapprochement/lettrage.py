"""Lettrage: marque (ou demarque) une ecriture bancaire et son document.

Seules operations du moteur qui modifient des enregistrements de l'appelant.
Les deux cotes changent ensemble; l'appelant doit persister la paire en une
seule ecriture transactionnelle.
"""

from __future__ import annotations

import logging

from comptama.modeles import Document, EcritureBancaire

logger = logging.getLogger(__name__)

PREFIXE_LETTRAGE = "LET-"


def identifiant_lettrage(ecriture: EcritureBancaire) -> str:
    """Code de lettrage derive de l'ecriture bancaire (ex: 'LET-B001')."""
    return f"{PREFIXE_LETTRAGE}{ecriture.id}"


def appliquer_lettrage(
    ecriture: EcritureBancaire,
    document: Document,
) -> tuple[EcritureBancaire, Document]:
    """Lettre une ecriture bancaire avec un document.

    Ecriture: rapproche=True, document_id=<id du document>.
    Document: rapproche=True, lettrage_id='LET-<id de l'ecriture>'.

    Returns:
        La paire (ecriture, document) modifiee en place.
    """
    code = identifiant_lettrage(ecriture)
    ecriture.rapproche = True
    ecriture.document_id = document.id
    document.rapproche = True
    document.lettrage_id = code
    logger.info("Lettrage %s: %s <-> %s", code, ecriture.id, document.id)
    return ecriture, document


def annuler_lettrage(
    ecriture: EcritureBancaire,
    document: Document,
) -> tuple[EcritureBancaire, Document]:
    """Retire les quatre champs de lettrage poses par appliquer_lettrage."""
    ecriture.rapproche = None
    ecriture.document_id = None
    document.rapproche = None
    document.lettrage_id = None
    # Les champs reviennent a l'etat "non renseigne", comme avant appliquer_lettrage.
    ecriture.model_fields_set.difference_update({"rapproche", "document_id"})
    document.model_fields_set.difference_update({"rapproche", "lettrage_id"})
    logger.info("Lettrage annule: %s <-> %s", ecriture.id, document.id)
    return ecriture, document
