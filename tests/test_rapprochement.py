"""Tests pour le rapprochement bancaire: score, proposition automatique, lettrage."""

from decimal import Decimal

import pytest
from pydantic import ValidationError

from comptama.modeles import Document, EcritureBancaire
from comptama.rapprochement import (
    ConfigRapprochement,
    annuler_lettrage,
    appliquer_lettrage,
    auto_rapprocher,
    documents_en_conflit,
    evaluer_correspondance,
    score_correspondance,
)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def _document_exemple(**kwargs) -> Document:
    """Facture FAC-2025-00012 de 1000 TTC (833.33 HT a 20%)."""
    defaults = dict(
        id="FAC-2025-00012",
        date="2025-01-08",
        lignes=[{"quantite": 1, "prix_unitaire": "833.33", "taux_tva": 20}],
    )
    defaults.update(kwargs)
    return Document.model_validate(defaults)


def _ecriture_exemple(**kwargs) -> EcritureBancaire:
    defaults = dict(
        id="B001",
        date="2025-01-10",
        montant="-1000",
        libelle="VIR FAC-2025-00012",
    )
    defaults.update(kwargs)
    return EcritureBancaire.model_validate(defaults)


# ---------------------------------------------------------------------------
# Tests: score
# ---------------------------------------------------------------------------


class TestScore:
    """Score additif montant / date / reference."""

    def test_scenario_correspondance_parfaite(self):
        """Montant 1000 (signe ignore), 2 jours d'ecart, reference dans le libelle -> 1.0."""
        detail = evaluer_correspondance(_ecriture_exemple(), _document_exemple())
        assert detail.montant == 0.5
        assert detail.date == 0.2
        assert detail.reference == 0.3
        assert detail.total == 1.0

    def test_tolerance_montant_stricte(self):
        doc = _document_exemple()
        assert score_correspondance(_ecriture_exemple(montant="1004.99", libelle=""), doc) == 0.7
        assert score_correspondance(_ecriture_exemple(montant="1005", libelle=""), doc) == 0.2

    def test_fenetre_dates_incluse(self):
        doc = _document_exemple()
        assert evaluer_correspondance(_ecriture_exemple(date="2025-01-13"), doc).date == 0.2
        assert evaluer_correspondance(_ecriture_exemple(date="2025-01-14"), doc).date == 0.0
        assert evaluer_correspondance(_ecriture_exemple(date="2025-01-03"), doc).date == 0.2

    def test_date_absente(self):
        detail = evaluer_correspondance(_ecriture_exemple(date=None), _document_exemple())
        assert detail.date == 0.0

    def test_reference_insensible_a_la_casse(self):
        e = _ecriture_exemple(libelle="virement", reference="fac-2025-00012")
        assert evaluer_correspondance(e, _document_exemple()).reference == 0.3

    def test_identifiant_vide_ne_correspond_pas(self):
        e = _ecriture_exemple(libelle="VIR")
        assert evaluer_correspondance(e, _document_exemple(id="")).reference == 0.0

    def test_reste_a_payer_utilise(self):
        """Un acompte de 400 laisse 600 a payer: l'ecriture de 600 correspond."""
        doc = _document_exemple(paiements=[{"montant": "400"}])
        detail = evaluer_correspondance(_ecriture_exemple(montant="-600"), doc)
        assert detail.montant == 0.5

    def test_score_borne(self):
        for montant in ["-1000", "0", "999999"]:
            s = score_correspondance(_ecriture_exemple(montant=montant), _document_exemple())
            assert 0.0 <= s <= 1.0

    def test_poids_configurables(self):
        config = ConfigRapprochement(poids_montant=0.6, poids_date=0.1, poids_reference=0.3)
        assert evaluer_correspondance(_ecriture_exemple(), _document_exemple(), config).montant == 0.6

    def test_somme_des_poids_bornee(self):
        with pytest.raises(ValidationError):
            ConfigRapprochement(poids_montant=0.9, poids_date=0.2, poids_reference=0.3)


# ---------------------------------------------------------------------------
# Tests: auto_rapprocher
# ---------------------------------------------------------------------------


class TestAutoRapprocher:
    """Proposition gloutonne par ecriture."""

    def test_scenario_auto_rapproche(self):
        r = auto_rapprocher([_ecriture_exemple()], [_document_exemple()])
        assert len(r) == 1
        assert r[0].ecriture_id == "B001"
        assert r[0].document_id == "FAC-2025-00012"
        assert r[0].score == 1.0

    def test_seuil(self):
        """Montant seul (0.5) sous le seuil 0.7: aucune proposition."""
        e = _ecriture_exemple(date="2025-03-01", libelle="DIVERS")
        assert auto_rapprocher([e], [_document_exemple()]) == []

    def test_seuil_atteint(self):
        """Montant + date = 0.7, egal au seuil: proposition retenue."""
        e = _ecriture_exemple(libelle="DIVERS")
        r = auto_rapprocher([e], [_document_exemple()])
        assert [c.score for c in r] == [0.7]

    def test_meilleur_document(self):
        autre = _document_exemple(id="FAC-2025-00099", date="2025-01-10")
        r = auto_rapprocher([_ecriture_exemple()], [autre, _document_exemple()])
        assert r[0].document_id == "FAC-2025-00012"

    def test_egalite_premier_document(self):
        a = _document_exemple(id="FA-A")
        b = _document_exemple(id="FA-B")
        r = auto_rapprocher([_ecriture_exemple(libelle="VIR")], [a, b])
        assert r[0].document_id == "FA-A"

    def test_ignore_les_rapproches(self):
        e_rapprochee = _ecriture_exemple(rapproche=True)
        assert auto_rapprocher([e_rapprochee], [_document_exemple()]) == []
        doc_rapproche = _document_exemple(rapproche=True)
        assert auto_rapprocher([_ecriture_exemple()], [doc_rapproche]) == []

    def test_non_exclusif(self):
        """Deux ecritures peuvent proposer le meme document."""
        e1 = _ecriture_exemple(id="B001")
        e2 = _ecriture_exemple(id="B002", date="2025-01-09")
        r = auto_rapprocher([e1, e2], [_document_exemple()])
        assert [c.document_id for c in r] == ["FAC-2025-00012", "FAC-2025-00012"]
        assert documents_en_conflit(r) == {"FAC-2025-00012": ["B001", "B002"]}

    def test_ordre_des_ecritures(self):
        e1 = _ecriture_exemple(id="B002")
        e2 = _ecriture_exemple(id="B001")
        r = auto_rapprocher([e1, e2], [_document_exemple()])
        assert [c.ecriture_id for c in r] == ["B002", "B001"]

    def test_jamais_sous_le_seuil(self):
        ecritures = [
            _ecriture_exemple(id=f"B{i}", montant=m, date=d, libelle=lib)
            for i, (m, d, lib) in enumerate(
                [
                    ("-1000", "2025-01-10", "VIR"),
                    ("-1000", "2025-02-10", "VIR"),
                    ("-10", "2025-01-09", "FAC-2025-00012"),
                    ("-995.5", "2025-01-13", ""),
                    ("-1000", None, "FAC-2025-00012"),
                ]
            )
        ]
        for c in auto_rapprocher(ecritures, [_document_exemple()]):
            assert c.score >= 0.7

    def test_listes_vides(self):
        assert auto_rapprocher([], []) == []
        assert auto_rapprocher([_ecriture_exemple()], []) == []


# ---------------------------------------------------------------------------
# Tests: lettrage
# ---------------------------------------------------------------------------


class TestLettrage:
    def test_appliquer(self):
        e, d = appliquer_lettrage(_ecriture_exemple(), _document_exemple())
        assert e.rapproche is True
        assert e.document_id == "FAC-2025-00012"
        assert d.rapproche is True
        assert d.lettrage_id == "LET-B001"

    def test_annuler_restaure_l_etat(self):
        ecriture = _ecriture_exemple()
        document = _document_exemple()
        avant_e = ecriture.model_dump(exclude_unset=True)
        avant_d = document.model_dump(exclude_unset=True)

        appliquer_lettrage(ecriture, document)
        annuler_lettrage(ecriture, document)

        assert ecriture.model_dump(exclude_unset=True) == avant_e
        assert document.model_dump(exclude_unset=True) == avant_d
        assert "lettrage_id" not in document.model_fields_set

    def test_lettrage_exclut_du_rapprochement(self):
        ecriture = _ecriture_exemple()
        document = _document_exemple()
        appliquer_lettrage(ecriture, document)
        assert auto_rapprocher([_ecriture_exemple(id="B002")], [document]) == []
        assert auto_rapprocher([ecriture], [_document_exemple()]) == []
