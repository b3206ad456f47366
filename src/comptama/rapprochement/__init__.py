"""Rapprochement bancaire: score, proposition automatique et lettrage."""

from comptama.rapprochement.automatique import (
    Correspondance,
    auto_rapprocher,
    documents_en_conflit,
)
from comptama.rapprochement.lettrage import annuler_lettrage, appliquer_lettrage
from comptama.rapprochement.scoring import (
    ConfigRapprochement,
    DetailScore,
    evaluer_correspondance,
    reste_a_payer,
    score_correspondance,
)

__all__ = [
    "Correspondance",
    "auto_rapprocher",
    "documents_en_conflit",
    "annuler_lettrage",
    "appliquer_lettrage",
    "ConfigRapprochement",
    "DetailScore",
    "evaluer_correspondance",
    "reste_a_payer",
    "score_correspondance",
]
