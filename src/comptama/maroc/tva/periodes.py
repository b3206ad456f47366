"""Agregation de la TVA par periode de declaration.

Les documents sont regroupes par mois civil ("YYYY-MM") de leur date; les
documents sans date lisible sont ignores. Les ventes alimentent la TVA
collectee, les achats la TVA deductible. Le resume fusionne les deux sur
l'union des periodes et calcule le net a reverser (collectee - deductible).

Deux bases de calcul sont disponibles:
- `remisee` (defaut): la ligne est calculee comme sur la facture (remise
  deduite, HT et TVA arrondis par ligne).
- `brute`: base = quantite x prix unitaire sans remise, TVA sur cette base,
  cumul non arrondi par ligne; seuls les totaux de la periode sont arrondis
  au centime.
"""

from __future__ import annotations

import datetime
import logging
from dataclasses import dataclass
from decimal import Decimal
from enum import Enum

from comptama.formatage import Colonne, ConfigFormatage, RenduNombre, rendre_lignes
from comptama.maroc.tva.calcul import calculer_ligne
from comptama.modeles import Document, LigneDocument
from comptama.montants import CENT, ZERO, arrondir, borner_pourcentage, en_decimal

logger = logging.getLogger(__name__)


class Sens(str, Enum):
    """Sens de la TVA agregee."""

    COLLECTEE = "collectee"  # ventes
    DEDUCTIBLE = "deductible"  # achats


class BasePeriode(str, Enum):
    """Base de calcul de la TVA lors de l'agregation par periode."""

    REMISEE = "remisee"
    BRUTE = "brute"


@dataclass
class TotauxPeriode:
    """Cumuls d'une periode pour un sens donne."""

    base: Decimal = ZERO
    collectee: Decimal = ZERO
    deductible: Decimal = ZERO


@dataclass(frozen=True)
class LigneResume:
    """Ligne du resume TVA d'une periode."""

    collectee: Decimal
    deductible: Decimal
    net: Decimal  # positif = TVA due, negatif = credit de TVA
    base_ventes: Decimal
    base_achats: Decimal


@dataclass(frozen=True)
class TotauxDeclaration:
    """Montants portes sur la declaration de TVA.

    Le credit anterieur (credit de TVA reporte de la periode precedente)
    s'impute sur le net: le reste est la TVA a payer, ou a defaut un
    nouveau credit reporte sur la periode suivante.
    """

    collectee: Decimal
    deductible: Decimal
    net: Decimal
    credit_anterieur: Decimal = ZERO

    @property
    def solde(self) -> Decimal:
        """Net apres imputation du credit anterieur (negatif = credit)."""
        return arrondir(self.net - self.credit_anterieur)

    @property
    def tva_a_payer(self) -> Decimal:
        return max(self.solde, ZERO)

    @property
    def nouveau_credit(self) -> Decimal:
        return max(-self.solde, ZERO)


def cle_periode(date: datetime.date) -> str:
    """Cle de periode mensuelle 'YYYY-MM'."""
    return f"{date.year:04d}-{date.month:02d}"


def cle_trimestre(periode: str) -> str:
    """Convertit une cle 'YYYY-MM' en cle trimestrielle 'YYYY-Qn'."""
    annee, mois = periode.split("-")
    return f"{annee}-Q{(int(mois) - 1) // 3 + 1}"


def _base_et_tva(ligne: LigneDocument, base_calcul: BasePeriode) -> tuple[Decimal, Decimal]:
    if base_calcul == BasePeriode.BRUTE:
        base = ligne.quantite * ligne.prix_unitaire
        return base, base * ligne.taux_tva / CENT
    montants = calculer_ligne(ligne)
    return montants.ht, montants.tva


def agreger_tva(
    documents: list[Document],
    sens: Sens,
    base_calcul: BasePeriode = BasePeriode.REMISEE,
) -> dict[str, TotauxPeriode]:
    """Cumule base et TVA par mois civil.

    Args:
        documents: Documents de ventes (sens COLLECTEE) ou d'achats (DEDUCTIBLE).
        sens: Compartiment de TVA alimente.
        base_calcul: Base de calcul (remisee ou brute).

    Returns:
        Dictionnaire {"YYYY-MM": TotauxPeriode}.
    """
    totaux: dict[str, TotauxPeriode] = {}

    for document in documents:
        if document.date is None:
            logger.warning("Document %s sans date valide, ignore dans l'agregation TVA", document.id)
            continue
        periode = totaux.setdefault(cle_periode(document.date), TotauxPeriode())
        for ligne in document.lignes:
            base, tva = _base_et_tva(ligne, base_calcul)
            periode.base += base
            if sens == Sens.COLLECTEE:
                periode.collectee += tva
            else:
                periode.deductible += tva

    for periode in totaux.values():
        periode.base = arrondir(periode.base)
        periode.collectee = arrondir(periode.collectee)
        periode.deductible = arrondir(periode.deductible)

    return totaux


def resumer_tva(
    ventes: list[Document],
    achats: list[Document],
    base_calcul: BasePeriode = BasePeriode.REMISEE,
    prorata: object = CENT,
) -> dict[str, LigneResume]:
    """Fusionne TVA collectee (ventes) et deductible (achats) par periode.

    Args:
        ventes: Documents de ventes.
        achats: Documents d'achats.
        base_calcul: Base de calcul (remisee ou brute).
        prorata: Prorata de deduction en pourcentage (100 = deduction
                 totale), applique a la TVA deductible de chaque periode.

    Returns:
        Dictionnaire {"YYYY-MM": LigneResume}, trie par periode.
    """
    collectee = agreger_tva(ventes, Sens.COLLECTEE, base_calcul)
    deductible = agreger_tva(achats, Sens.DEDUCTIBLE, base_calcul)
    taux_deduction = borner_pourcentage(prorata)

    resume: dict[str, LigneResume] = {}
    for periode in sorted(set(collectee) | set(deductible)):
        c = collectee.get(periode, TotauxPeriode())
        d = deductible.get(periode, TotauxPeriode())
        deductible_admis = arrondir(d.deductible * taux_deduction / CENT)
        resume[periode] = LigneResume(
            collectee=c.collectee,
            deductible=deductible_admis,
            net=c.collectee - deductible_admis,
            base_ventes=c.base,
            base_achats=d.base,
        )
    return resume


def regrouper_par_trimestre(resume: dict[str, LigneResume]) -> dict[str, LigneResume]:
    """Regroupe un resume mensuel en trimestres civils ("YYYY-Qn")."""
    cumuls: dict[str, list[Decimal]] = {}
    for periode, ligne in resume.items():
        c = cumuls.setdefault(cle_trimestre(periode), [ZERO] * 5)
        c[0] += ligne.collectee
        c[1] += ligne.deductible
        c[2] += ligne.net
        c[3] += ligne.base_ventes
        c[4] += ligne.base_achats

    return {
        cle: LigneResume(
            collectee=c[0], deductible=c[1], net=c[2], base_ventes=c[3], base_achats=c[4]
        )
        for cle, c in sorted(cumuls.items())
    }


def totaliser(
    resume: dict[str, LigneResume],
    credit_anterieur: object = ZERO,
) -> TotauxDeclaration:
    """Somme collectee, deductible et net sur toutes les periodes du resume."""
    lignes = list(resume.values())
    return TotauxDeclaration(
        collectee=sum((ligne.collectee for ligne in lignes), ZERO),
        deductible=sum((ligne.deductible for ligne in lignes), ZERO),
        net=sum((ligne.net for ligne in lignes), ZERO),
        credit_anterieur=_credit(credit_anterieur),
    )


def totaux_periode(
    resume: dict[str, LigneResume],
    periode: str,
    credit_anterieur: object = ZERO,
) -> TotauxDeclaration:
    """Montants d'une seule periode; zeros si la periode est sans activite."""
    ligne = resume.get(periode)
    if ligne is None:
        return TotauxDeclaration(
            collectee=ZERO, deductible=ZERO, net=ZERO, credit_anterieur=_credit(credit_anterieur)
        )
    return TotauxDeclaration(
        collectee=ligne.collectee,
        deductible=ligne.deductible,
        net=ligne.net,
        credit_anterieur=_credit(credit_anterieur),
    )


def _credit(valeur: object) -> Decimal:
    credit = arrondir(valeur)
    if credit < ZERO:
        logger.warning("Credit de TVA anterieur negatif %s, remplace par 0", credit)
        return ZERO
    return credit


def calculer_prorata(ca_taxable: object, ca_total: object) -> Decimal:
    """Prorata de deduction: CA taxable / CA total x 100, borne a [0, 100].

    Vaut 0 si le chiffre d'affaires total est nul.
    """
    total = en_decimal(ca_total)
    if total == ZERO:
        return ZERO
    return borner_pourcentage(en_decimal(ca_taxable) / total * CENT)


COLONNES_RESUME = [
    Colonne("periode", "Periode"),
    Colonne("base_ventes", "Base ventes", RenduNombre()),
    Colonne("base_achats", "Base achats", RenduNombre()),
    Colonne("collectee", "TVA collectee", RenduNombre()),
    Colonne("deductible", "TVA deductible", RenduNombre()),
    Colonne("net", "TVA nette", RenduNombre()),
]


def resume_en_tableau(
    resume: dict[str, LigneResume],
    config: ConfigFormatage,
) -> list[dict[str, str]]:
    """Lignes d'affichage du resume, triees par periode, chaque montant formate."""
    lignes = [
        {
            "periode": periode,
            "base_ventes": ligne.base_ventes,
            "base_achats": ligne.base_achats,
            "collectee": ligne.collectee,
            "deductible": ligne.deductible,
            "net": ligne.net,
        }
        for periode, ligne in sorted(resume.items())
    ]
    return rendre_lignes(COLONNES_RESUME, lignes, config)
