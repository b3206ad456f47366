"""Formatage des nombres, montants et dates pour l'affichage tabulaire.

La configuration (locale, devise) est passee explicitement a chaque appel;
il n'y a pas d'etat global. Chaque colonne d'un tableau porte une strategie
de rendu typee: texte, nombre, monnaie, date ou fonction personnalisee.
"""

from __future__ import annotations

import datetime
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass, field
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Literal

from pydantic import BaseModel

from comptama.montants import en_decimal

_MOIS_FR = (
    "janv.", "fevr.", "mars", "avr.", "mai", "juin",
    "juil.", "aout", "sept.", "oct.", "nov.", "dec.",
)
_MOIS_EN = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)

# (separateur de milliers, separateur decimal)
_SEPARATEURS = {
    "fr": (" ", ","),
    "ar": (".", ","),
    "en": (",", "."),
}


class ConfigFormatage(BaseModel):
    """Preferences d'affichage: locale et devise."""

    locale: Literal["fr", "ar", "en"] = "fr"
    devise: str = "MAD"


def formater_nombre(valeur: object, config: ConfigFormatage, decimales: int = 2) -> str:
    """Formate un nombre avec separateurs de milliers et decimales fixes.

    >>> formater_nombre(Decimal("1234.5"), ConfigFormatage(locale="en"))
    '1,234.50'
    """
    montant = en_decimal(valeur).quantize(Decimal(1).scaleb(-decimales), rounding=ROUND_HALF_UP)
    milliers, decimal_sep = _SEPARATEURS[config.locale]
    texte = f"{montant:,.{decimales}f}"
    return texte.replace(",", "\x00").replace(".", decimal_sep).replace("\x00", milliers)


def formater_monnaie(valeur: object, config: ConfigFormatage) -> str:
    """Formate un montant suivi du code de devise (ex: '1 234,50 MAD')."""
    return f"{formater_nombre(valeur, config)} {config.devise}"


def formater_date(valeur: object, config: ConfigFormatage) -> str:
    """Formate une date courte; chaine vide si la date est illisible."""
    if isinstance(valeur, datetime.datetime):
        valeur = valeur.date()
    if isinstance(valeur, str):
        try:
            valeur = datetime.date.fromisoformat(valeur[:10])
        except ValueError:
            return ""
    if not isinstance(valeur, datetime.date):
        return ""
    if config.locale == "en":
        return f"{_MOIS_EN[valeur.month - 1]} {valeur.day:02d}, {valeur.year}"
    if config.locale == "fr":
        return f"{valeur.day:02d} {_MOIS_FR[valeur.month - 1]} {valeur.year}"
    return f"{valeur.day:02d}/{valeur.month:02d}/{valeur.year}"


# ---------------------------------------------------------------------------
# Strategies de rendu par colonne
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class RenduTexte:
    """Valeur brute convertie en texte (None -> '')."""

    def formater(self, valeur: Any, config: ConfigFormatage) -> str:
        return "" if valeur is None else str(valeur)


@dataclass(frozen=True)
class RenduNombre:
    """Nombre a decimales fixes, sans devise."""

    decimales: int = 2

    def formater(self, valeur: Any, config: ConfigFormatage) -> str:
        return formater_nombre(valeur, config, self.decimales)


@dataclass(frozen=True)
class RenduMonetaire:
    """Montant avec devise."""

    def formater(self, valeur: Any, config: ConfigFormatage) -> str:
        return formater_monnaie(valeur, config)


@dataclass(frozen=True)
class RenduDate:
    """Date courte selon la locale."""

    def formater(self, valeur: Any, config: ConfigFormatage) -> str:
        return formater_date(valeur, config)


@dataclass(frozen=True)
class RenduPersonnalise:
    """Fonction de rendu fournie par l'appelant."""

    fonction: Callable[[Any, ConfigFormatage], str]

    def formater(self, valeur: Any, config: ConfigFormatage) -> str:
        return self.fonction(valeur, config)


Rendu = RenduTexte | RenduNombre | RenduMonetaire | RenduDate | RenduPersonnalise


@dataclass(frozen=True)
class Colonne:
    """Colonne d'un tableau: cle dans la ligne source, libelle, rendu."""

    cle: str
    libelle: str
    rendu: Rendu = field(default_factory=RenduTexte)


def rendre_lignes(
    colonnes: list[Colonne],
    lignes: Iterable[Mapping[str, Any]],
    config: ConfigFormatage,
) -> list[dict[str, str]]:
    """Applique le rendu de chaque colonne a chaque ligne.

    Args:
        colonnes: Colonnes a produire (les autres cles sont ignorees).
        lignes: Lignes source (dictionnaires).
        config: Preferences d'affichage.

    Returns:
        Lignes {cle: texte formate}, dans l'ordre des colonnes.
    """
    return [
        {c.cle: c.rendu.formater(ligne.get(c.cle), config) for c in colonnes}
        for ligne in lignes
    ]
