"""Tests pour la numerotation des documents."""

import pytest

from comptama.modeles import TypeDocument
from comptama.numerotation import (
    ConfigNumerotation,
    IdentifiantDocument,
    analyser_identifiant,
    completer_sequence,
    construire_identifiant,
    prochain_identifiant,
)


class TestConstruire:
    def test_format_standard(self):
        assert construire_identifiant("FA", 2025, 42) == "FA-2025-000042"

    def test_separateur_et_largeur(self):
        assert construire_identifiant("DE", 2025, 7, "/", 4) == "DE/2025/0007"

    def test_sequence_plus_large(self):
        assert completer_sequence(1234567) == "1234567"

    def test_sequence_negative(self):
        with pytest.raises(ValueError):
            construire_identifiant("FA", 2025, -1)


class TestAnalyser:
    def test_aller_retour(self):
        ident = construire_identifiant("FA", 2025, 42, "-")
        assert analyser_identifiant(ident) == IdentifiantDocument("FA", 2025, 42)

    def test_autre_separateur(self):
        ident = construire_identifiant("AV", 2024, 3, "_")
        assert analyser_identifiant(ident) is None
        assert analyser_identifiant(ident, "_") == IdentifiantDocument("AV", 2024, 3)

    @pytest.mark.parametrize("ident", ["", "FA-2025", "FA-XXXX-000001", "FA-2025-abc", "facture"])
    def test_identifiants_invalides(self, ident):
        assert analyser_identifiant(ident) is None

    def test_parties_supplementaires_ignorees(self):
        assert analyser_identifiant("FA-2025-000001-bis") == IdentifiantDocument("FA", 2025, 1)


class TestProchainIdentifiant:
    def test_premier(self):
        assert prochain_identifiant([], "FA", 2025) == "FA-2025-000001"

    def test_suivant(self):
        existants = ["FA-2025-000001", "FA-2025-000007", "FA-2024-000099", "AV-2025-000050", "n/a"]
        assert prochain_identifiant(existants, "FA", 2025) == "FA-2025-000008"

    def test_debut(self):
        assert prochain_identifiant([], "FA", 2025, debut=100) == "FA-2025-000100"


class TestConfigNumerotation:
    def test_prefixes_par_defaut(self):
        cfg = ConfigNumerotation()
        assert cfg.prefixe(TypeDocument.FACTURE) == "FA"
        assert cfg.prefixe(TypeDocument.AVOIR) == "AV"

    def test_prefixe_manquant(self):
        cfg = ConfigNumerotation(prefixes={})
        assert cfg.prefixe(TypeDocument.DEVIS) == "QU"

    def test_separateur_vide_refuse(self):
        with pytest.raises(ValueError):
            ConfigNumerotation(separateur="")
