"""Validation avant export de la declaration de TVA.

Verifie l'identite fiscale (ICE a 15 chiffres avec cle de Luhn, IF
obligatoire), le format de la periode, les taux utilises sur les lignes et
l'ICE des fournisseurs sur les achats. Les montants declares donnent lieu a
des avertissements de vraisemblance (DECL_W001 a DECL_W004).
Ne leve jamais d'exception: les anomalies sont retournees.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal

from comptama.maroc.taux import TAUX_LEGAUX, est_taux_legal
from comptama.maroc.tva.periodes import TotauxDeclaration
from comptama.modeles import Document, Societe

SEUIL_CREDIT_IMPORTANT = Decimal("50000")
SEUIL_TVA_IMPORTANTE = Decimal("100000")
RATIO_DEDUCTIBLE_MAX = Decimal("0.95")

_PERIODE_MENSUELLE = re.compile(r"^(\d{4})-(\d{2})$")
_PERIODE_TRIMESTRIELLE = re.compile(r"^(\d{4})-Q(\d)$")


@dataclass
class ResultatValidation:
    """Resultat de la validation d'une declaration."""

    erreurs: list[str] = field(default_factory=list)
    avertissements: list[str] = field(default_factory=list)

    @property
    def valide(self) -> bool:
        return not self.erreurs


def nettoyer_ice(ice: str) -> str:
    """Retire les espaces d'un ICE saisi."""
    return re.sub(r"\s+", "", ice or "")


def cle_luhn_valide(chiffres: str) -> bool:
    """Controle de Luhn: un chiffre sur deux double en partant de la droite."""
    total = 0
    for rang, caractere in enumerate(reversed(chiffres)):
        chiffre = int(caractere)
        if rang % 2 == 1:
            chiffre *= 2
            if chiffre > 9:
                chiffre -= 9
        total += chiffre
    return total % 10 == 0


def valider_ice(ice: str) -> str | None:
    """Valide un ICE. Retourne un message d'erreur, ou None si valide."""
    nettoye = nettoyer_ice(ice)
    if not re.fullmatch(r"\d{15}", nettoye):
        return "ICE doit contenir exactement 15 chiffres"
    if not cle_luhn_valide(nettoye):
        return "Cle de controle ICE invalide"
    return None


def formater_ice(ice: str) -> str:
    """Formate un ICE en groupes 3-4-4-4 (ex: '001 2345 6700 0082')."""
    n = nettoyer_ice(ice)
    return f"{n[:3]} {n[3:7]} {n[7:11]} {n[11:15]}"


def valider_periode(periode: str) -> str | None:
    """Valide une periode 'YYYY-MM' ou 'YYYY-Qn'. Message d'erreur ou None."""
    m = _PERIODE_MENSUELLE.match(periode)
    if m:
        if not 1 <= int(m.group(2)) <= 12:
            return f"Mois invalide: {m.group(2)}. Doit etre entre 01 et 12"
        return None
    m = _PERIODE_TRIMESTRIELLE.match(periode)
    if m:
        if not 1 <= int(m.group(2)) <= 4:
            return f"Trimestre invalide: Q{m.group(2)}. Doit etre entre Q1 et Q4"
        return None
    return f"Periode invalide: '{periode}' (attendu YYYY-MM ou YYYY-Qn)"


def _verifier_taux(documents: list[Document], resultat: ResultatValidation) -> None:
    legaux = ", ".join(f"{t.taux}%" for t in TAUX_LEGAUX)
    for document in documents:
        for i, ligne in enumerate(document.lignes, start=1):
            if not est_taux_legal(ligne.taux_tva):
                resultat.erreurs.append(
                    f"TVA_003: document {document.id} ligne {i}: taux {ligne.taux_tva}% "
                    f"hors bareme ({legaux})"
                )


def verifier_ice_fournisseurs(achats: list[Document], resultat: ResultatValidation) -> None:
    """Chaque achat porteur de TVA deductible doit mentionner l'ICE du fournisseur."""
    for document in achats:
        if not any(ligne.taux_tva > 0 for ligne in document.lignes):
            continue
        if not document.ice_tiers.strip():
            resultat.erreurs.append(f"ICE_001: ICE fournisseur manquant pour {document.id}")
            continue
        erreur = valider_ice(document.ice_tiers)
        if erreur:
            resultat.erreurs.append(f"ICE_002: ICE fournisseur invalide pour {document.id}: {erreur}")


def _verifier_montants(
    totaux: TotauxDeclaration,
    nb_lignes: int,
    resultat: ResultatValidation,
) -> None:
    if nb_lignes == 0:
        resultat.avertissements.append("DECL_W001: Aucune ligne de TVA dans la declaration")
    if totaux.nouveau_credit > SEUIL_CREDIT_IMPORTANT:
        resultat.avertissements.append(
            f"DECL_W002: Credit de TVA important: {totaux.nouveau_credit:.2f} MAD"
        )
    if totaux.tva_a_payer > SEUIL_TVA_IMPORTANTE:
        resultat.avertissements.append(
            f"DECL_W003: TVA a payer importante: {totaux.tva_a_payer:.2f} MAD"
        )
    if totaux.collectee > 0:
        ratio = totaux.deductible / totaux.collectee
        if ratio > RATIO_DEDUCTIBLE_MAX:
            resultat.avertissements.append(
                f"DECL_W004: Ratio TVA deductible/collectee eleve: {ratio * 100:.1f}%"
            )


def valider_declaration(
    societe: Societe,
    periode: str,
    ventes: list[Document] | None = None,
    achats: list[Document] | None = None,
    totaux: TotauxDeclaration | None = None,
) -> ResultatValidation:
    """Valide une declaration avant export XML.

    Args:
        societe: Identite fiscale du declarant.
        periode: Periode declaree.
        ventes: Documents de ventes de la periode (controle des taux).
        achats: Documents d'achats de la periode (taux et ICE fournisseur).
        totaux: Montants declares; active les controles de vraisemblance
                (credit ou TVA a payer importants, ratio deductible/collectee).

    Returns:
        ResultatValidation avec erreurs (bloquantes) et avertissements.
    """
    resultat = ResultatValidation()
    ventes = ventes or []
    achats = achats or []

    erreur_ice = valider_ice(societe.ice)
    if erreur_ice:
        resultat.erreurs.append(f"DECL_001: {erreur_ice}")
    if not societe.identifiant_fiscal.strip():
        resultat.erreurs.append("DECL_002: Identifiant fiscal (IF) obligatoire")
    if not societe.raison_sociale.strip():
        resultat.avertissements.append("DECL_W005: Raison sociale absente")

    erreur_periode = valider_periode(periode)
    if erreur_periode:
        resultat.erreurs.append(f"DECL_003: {erreur_periode}")

    _verifier_taux(ventes, resultat)
    _verifier_taux(achats, resultat)
    verifier_ice_fournisseurs(achats, resultat)

    if totaux is not None:
        nb_lignes = sum(len(d.lignes) for d in ventes) + sum(len(d.lignes) for d in achats)
        _verifier_montants(totaux, nb_lignes, resultat)

    return resultat
