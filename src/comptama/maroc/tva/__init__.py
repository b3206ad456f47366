"""Module de calcul, d'agregation et de declaration de la TVA."""

from comptama.maroc.tva.calcul import (
    MontantsLigne,
    TotauxDocument,
    calculer_ligne,
    calculer_montants_ligne,
    calculer_totaux_document,
)
from comptama.maroc.tva.declaration import (
    exporter_declaration,
    generer_xml_declaration,
    verifier_signature,
)
from comptama.maroc.tva.encaissement import (
    TvaEncaissement,
    repartir_tva_encaissement,
)
from comptama.maroc.tva.periodes import (
    BasePeriode,
    LigneResume,
    Sens,
    TotauxDeclaration,
    agreger_tva,
    calculer_prorata,
    regrouper_par_trimestre,
    resume_en_tableau,
    resumer_tva,
    totaliser,
    totaux_periode,
)
from comptama.maroc.tva.validation import (
    ResultatValidation,
    valider_declaration,
    valider_ice,
)

__all__ = [
    "MontantsLigne",
    "TotauxDocument",
    "calculer_ligne",
    "calculer_montants_ligne",
    "calculer_totaux_document",
    "exporter_declaration",
    "generer_xml_declaration",
    "verifier_signature",
    "TvaEncaissement",
    "repartir_tva_encaissement",
    "BasePeriode",
    "LigneResume",
    "Sens",
    "TotauxDeclaration",
    "agreger_tva",
    "calculer_prorata",
    "regrouper_par_trimestre",
    "resume_en_tableau",
    "resumer_tva",
    "totaliser",
    "totaux_periode",
    "ResultatValidation",
    "valider_declaration",
    "valider_ice",
]
