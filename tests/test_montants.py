"""Tests pour les primitives monetaires (arrondi, coercition, taux)."""

from decimal import Decimal

import pytest

from comptama.montants import arrondir, assainir_taux, borner_pourcentage, en_decimal


class TestEnDecimal:
    """Coercition tolerante des valeurs numeriques."""

    @pytest.mark.parametrize(
        "valeur,attendu",
        [
            ("12.5", Decimal("12.5")),
            (3, Decimal("3")),
            (0.1, Decimal("0.1")),
            (Decimal("7.25"), Decimal("7.25")),
            (None, Decimal("0")),
            ("", Decimal("0")),
            ("  4 ", Decimal("4")),
        ],
    )
    def test_valeurs_lisibles(self, valeur, attendu):
        assert en_decimal(valeur) == attendu

    def test_valeur_illisible_vaut_zero(self, caplog):
        """Une chaine non numerique vaut 0 et est journalisee."""
        assert en_decimal("abc") == Decimal("0")
        assert "invalide" in caplog.text

    def test_non_fini_vaut_zero(self):
        assert en_decimal("NaN") == Decimal("0")
        assert en_decimal(float("inf")) == Decimal("0")

    def test_booleen_vaut_zero(self):
        assert en_decimal(True) == Decimal("0")


class TestArrondir:
    """Arrondi au centime, egalite loin de zero."""

    def test_demi_vers_le_haut(self):
        assert arrondir(Decimal("2.675")) == Decimal("2.68")
        assert arrondir(Decimal("0.005")) == Decimal("0.01")

    def test_demi_negatif_loin_de_zero(self):
        assert arrondir(Decimal("-0.005")) == Decimal("-0.01")

    def test_float_sans_derive_binaire(self):
        """1.005 en float vaut 1.00499..., mais sa representation texte est 1.005."""
        assert arrondir(1.005) == Decimal("1.01")

    def test_idempotent(self):
        for v in ["1.234", "99.995", "-3.3333", "0"]:
            once = arrondir(Decimal(v))
            assert arrondir(once) == once

    def test_deux_decimales(self):
        assert str(arrondir(5)) == "5.00"


class TestAssainirTaux:
    """Taux de TVA saisis."""

    def test_virgule_decimale(self):
        assert assainir_taux("5,5") == Decimal("5.5")

    def test_taux_negatif(self):
        assert assainir_taux("-20") == Decimal("0")

    def test_taux_illisible(self):
        assert assainir_taux("vingt") == Decimal("0")

    def test_taux_numerique(self):
        assert assainir_taux(20) == Decimal("20")


class TestBornerPourcentage:
    def test_bornes(self):
        assert borner_pourcentage(150) == Decimal("100")
        assert borner_pourcentage(-10) == Decimal("0")
        assert borner_pourcentage("12.5") == Decimal("12.5")
