"""Numerotation sequentielle des documents.

Format: PREFIXE{sep}ANNEE{sep}NNNNNN (sequence completee a 6 chiffres),
ex: FA-2025-000042. Le separateur d'analyse vaut "-" par defaut; un
identifiant construit avec un autre separateur ne se relit qu'en passant ce
meme separateur a analyser_identifiant.
"""

from __future__ import annotations

from dataclasses import dataclass

from pydantic import BaseModel, Field

from comptama.modeles import TypeDocument

SEPARATEUR_DEFAUT = "-"
LARGEUR_DEFAUT = 6


class ConfigNumerotation(BaseModel):
    """Parametres de numerotation des documents."""

    separateur: str = Field(default=SEPARATEUR_DEFAUT, min_length=1)
    largeur: int = Field(default=LARGEUR_DEFAUT, ge=1)
    prefixes: dict[TypeDocument, str] = Field(
        default_factory=lambda: {
            TypeDocument.FACTURE: "FA",
            TypeDocument.DEVIS: "DE",
            TypeDocument.ACHAT: "AC",
            TypeDocument.AVOIR: "AV",
        }
    )

    def prefixe(self, type_document: TypeDocument) -> str:
        """Prefixe d'un type de document (2 premieres lettres par defaut)."""
        return self.prefixes.get(type_document, type_document.value[:2].upper())


@dataclass(frozen=True)
class IdentifiantDocument:
    """Composantes d'un identifiant de document."""

    prefixe: str
    annee: int
    sequence: int


def completer_sequence(sequence: int, largeur: int = LARGEUR_DEFAUT) -> str:
    """Complete une sequence par des zeros a gauche (42 -> '000042')."""
    if sequence < 0:
        raise ValueError(f"Sequence negative: {sequence}")
    return f"{sequence:0{largeur}d}"


def construire_identifiant(
    prefixe: str,
    annee: int,
    sequence: int,
    separateur: str = SEPARATEUR_DEFAUT,
    largeur: int = LARGEUR_DEFAUT,
) -> str:
    """Construit un identifiant PREFIXE{sep}ANNEE{sep}SEQUENCE.

    Raises:
        ValueError: Si la sequence est negative.
    """
    return f"{prefixe}{separateur}{annee}{separateur}{completer_sequence(sequence, largeur)}"


def analyser_identifiant(
    identifiant: str,
    separateur: str = SEPARATEUR_DEFAUT,
) -> IdentifiantDocument | None:
    """Decompose un identifiant en (prefixe, annee, sequence).

    Les trois premieres parties sont retenues; les suivantes sont ignorees.

    Returns:
        IdentifiantDocument, ou None si moins de 3 parties ou si l'annee ou la
        sequence ne sont pas des entiers.
    """
    if not identifiant or not separateur:
        return None
    parties = identifiant.split(separateur)
    if len(parties) < 3:
        return None
    prefixe, annee, sequence = parties[:3]
    try:
        return IdentifiantDocument(prefixe=prefixe, annee=int(annee), sequence=int(sequence))
    except ValueError:
        return None


def prochain_identifiant(
    existants: list[str],
    prefixe: str,
    annee: int,
    separateur: str = SEPARATEUR_DEFAUT,
    largeur: int = LARGEUR_DEFAUT,
    debut: int = 1,
) -> str:
    """Prochain identifiant pour un prefixe et une annee.

    La sequence vaut la plus grande sequence existante + 1 (ou `debut` si
    aucun identifiant ne correspond).
    """
    sequences = []
    for existant in existants:
        ident = analyser_identifiant(existant, separateur)
        if ident is not None and ident.prefixe == prefixe and ident.annee == annee:
            sequences.append(ident.sequence)
    prochaine = max(max(sequences, default=0) + 1, debut)
    return construire_identifiant(prefixe, annee, prochaine, separateur, largeur)
