"""Tests pour la validation de la declaration avant export."""

from decimal import Decimal

import pytest

from comptama.maroc.taux import est_taux_legal, libelle_taux
from comptama.maroc.tva.periodes import TotauxDeclaration
from comptama.maroc.tva.validation import (
    cle_luhn_valide,
    formater_ice,
    valider_declaration,
    valider_ice,
    valider_periode,
)
from comptama.modeles import Document, Societe


def _achat(id="AC-1", ice_tiers="", taux="20") -> Document:
    return Document.model_validate(
        {
            "id": id,
            "type": "purchase",
            "ice_tiers": ice_tiers,
            "lignes": [{"quantite": 1, "prix_unitaire": 1000, "taux_tva": taux}],
        }
    )


def _totaux(collectee, deductible, credit="0") -> TotauxDeclaration:
    collectee, deductible = Decimal(collectee), Decimal(deductible)
    return TotauxDeclaration(
        collectee=collectee,
        deductible=deductible,
        net=collectee - deductible,
        credit_anterieur=Decimal(credit),
    )


def _societe(**kwargs) -> Societe:
    defaults = dict(
        raison_sociale="Atlas Conseil SARL",
        ice="001234567000082",
        identifiant_fiscal="12345678",
    )
    defaults.update(kwargs)
    return Societe(**defaults)


class TestIce:
    """ICE: 15 chiffres, cle de Luhn."""

    def test_ice_valide(self):
        assert valider_ice("001234567000082") is None

    def test_ice_espaces_toleres(self):
        assert valider_ice("001 2345 6700 0082") is None

    def test_ice_mauvaise_cle(self):
        assert valider_ice("001234567000083") == "Cle de controle ICE invalide"

    @pytest.mark.parametrize("ice", ["", "12345", "00123456700008A", "0012345670000821"])
    def test_ice_mauvais_format(self, ice):
        assert valider_ice(ice) == "ICE doit contenir exactement 15 chiffres"

    def test_luhn(self):
        assert cle_luhn_valide("79927398713")
        assert not cle_luhn_valide("79927398710")

    def test_formater_ice(self):
        assert formater_ice("001234567000082") == "001 2345 6700 0082"


class TestPeriode:
    @pytest.mark.parametrize("periode", ["2025-01", "2025-12", "2025-Q1", "2025-Q4"])
    def test_periodes_valides(self, periode):
        assert valider_periode(periode) is None

    @pytest.mark.parametrize("periode", ["2025-13", "2025-00", "2025-Q5", "2025-Q0", "janvier", "2025/01"])
    def test_periodes_invalides(self, periode):
        assert valider_periode(periode) is not None


class TestValiderDeclaration:
    def test_declaration_valide(self):
        r = valider_declaration(_societe(), "2025-01")
        assert r.valide
        assert r.erreurs == []

    def test_if_obligatoire(self):
        r = valider_declaration(_societe(identifiant_fiscal=" "), "2025-01")
        assert not r.valide
        assert any(e.startswith("DECL_002") for e in r.erreurs)

    def test_ice_invalide(self):
        r = valider_declaration(_societe(ice="123"), "2025-01")
        assert any(e.startswith("DECL_001") for e in r.erreurs)

    def test_raison_sociale_avertissement(self):
        r = valider_declaration(_societe(raison_sociale=""), "2025-01")
        assert r.valide
        assert r.avertissements == ["DECL_W005: Raison sociale absente"]

    def test_periode_invalide(self):
        r = valider_declaration(_societe(), "2025-13")
        assert any(e.startswith("DECL_003") for e in r.erreurs)

    def test_taux_hors_bareme(self):
        ventes = [
            Document.model_validate(
                {"id": "FA-1", "lignes": [{"quantite": 1, "prix_unitaire": 100, "taux_tva": "5,5"}]}
            )
        ]
        r = valider_declaration(_societe(), "2025-01", ventes=ventes)
        assert len(r.erreurs) == 1
        assert r.erreurs[0].startswith("TVA_003: document FA-1 ligne 1")


class TestIceFournisseur:
    """Les achats porteurs de TVA deductible exigent l'ICE du fournisseur."""

    def test_ice_fournisseur_valide(self):
        r = valider_declaration(_societe(), "2025-01", achats=[_achat(ice_tiers="001234567000082")])
        assert r.valide

    def test_ice_fournisseur_manquant(self):
        r = valider_declaration(_societe(), "2025-01", achats=[_achat()])
        assert r.erreurs == ["ICE_001: ICE fournisseur manquant pour AC-1"]

    def test_ice_fournisseur_invalide(self):
        r = valider_declaration(_societe(), "2025-01", achats=[_achat(ice_tiers="001234567000083")])
        assert r.erreurs == [
            "ICE_002: ICE fournisseur invalide pour AC-1: Cle de controle ICE invalide"
        ]

    def test_achat_exonere_sans_ice(self):
        r = valider_declaration(_societe(), "2025-01", achats=[_achat(taux="0")])
        assert r.valide

    def test_ventes_non_concernees(self):
        vente = Document.model_validate(
            {"id": "FA-1", "lignes": [{"quantite": 1, "prix_unitaire": 100, "taux_tva": 20}]}
        )
        assert valider_declaration(_societe(), "2025-01", ventes=[vente]).valide


class TestVraisemblanceMontants:
    def test_sans_montants_aucun_avertissement(self):
        r = valider_declaration(_societe(), "2025-01")
        assert r.avertissements == []

    def test_aucune_ligne(self):
        r = valider_declaration(_societe(), "2025-01", totaux=_totaux("0", "0"))
        assert r.valide
        assert r.avertissements == ["DECL_W001: Aucune ligne de TVA dans la declaration"]

    def test_credit_important(self):
        achats = [_achat(ice_tiers="001234567000082")]
        r = valider_declaration(_societe(), "2025-01", achats=achats, totaux=_totaux("0", "60000"))
        assert r.valide
        assert r.avertissements == ["DECL_W002: Credit de TVA important: 60000.00 MAD"]

    def test_credit_anterieur_compte_dans_le_credit(self):
        achats = [_achat(ice_tiers="001234567000082")]
        totaux = _totaux("10000", "8000", credit="55000")
        r = valider_declaration(_societe(), "2025-01", achats=achats, totaux=totaux)
        assert any(a.startswith("DECL_W002") for a in r.avertissements)

    def test_tva_a_payer_importante(self):
        achats = [_achat(ice_tiers="001234567000082")]
        r = valider_declaration(
            _societe(), "2025-01", achats=achats, totaux=_totaux("150000", "20000")
        )
        assert r.avertissements == ["DECL_W003: TVA a payer importante: 130000.00 MAD"]

    def test_ratio_deductible_eleve(self):
        achats = [_achat(ice_tiers="001234567000082")]
        r = valider_declaration(_societe(), "2025-01", achats=achats, totaux=_totaux("1000", "960"))
        assert r.avertissements == ["DECL_W004: Ratio TVA deductible/collectee eleve: 96.0%"]

    def test_ratio_a_la_limite(self):
        achats = [_achat(ice_tiers="001234567000082")]
        r = valider_declaration(_societe(), "2025-01", achats=achats, totaux=_totaux("1000", "950"))
        assert r.avertissements == []


class TestTauxLegaux:
    def test_bareme(self):
        for taux in ["0", "7", "10", "14", "20"]:
            assert est_taux_legal(Decimal(taux))
        assert not est_taux_legal(Decimal("5.5"))

    def test_libelle(self):
        assert libelle_taux(Decimal("0")) == "Exonere"
        assert libelle_taux(Decimal("20")) == "20%"
        assert libelle_taux(Decimal("20.00")) == "20%"
