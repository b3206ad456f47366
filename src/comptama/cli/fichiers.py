"""Lecture des fichiers de donnees YAML (documents, releves, paie) pour la CLI."""

from __future__ import annotations

from pathlib import Path
from typing import Any, TypeVar

import yaml
from pydantic import BaseModel, ValidationError

from comptama.modeles import Document, EcritureBancaire, ElementPaie

M = TypeVar("M", bound=BaseModel)


def _charger_liste(chemin: Path, cle: str, modele: type[M]) -> list[M]:
    """Charge une liste d'enregistrements depuis un YAML.

    Le fichier contient soit une liste, soit un dictionnaire {cle: [...]}.

    Raises:
        FileNotFoundError: Si le fichier n'existe pas.
        ValueError: Si le contenu ne respecte pas le schema.
    """
    if not chemin.exists():
        raise FileNotFoundError(f"Fichier introuvable: {chemin}")

    donnees: Any = yaml.safe_load(chemin.read_text(encoding="utf-8"))
    if donnees is None:
        return []
    if isinstance(donnees, dict):
        donnees = donnees.get(cle, [])
    if not isinstance(donnees, list):
        raise ValueError(f"{chemin}: liste attendue sous la cle '{cle}'")

    try:
        return [modele.model_validate(d) for d in donnees]
    except ValidationError as e:
        raise ValueError(f"Fichier invalide ({chemin}): {e}") from e


def charger_documents(chemin: Path) -> list[Document]:
    """Charge des documents (cle 'documents')."""
    return _charger_liste(chemin, "documents", Document)


def charger_ecritures(chemin: Path) -> list[EcritureBancaire]:
    """Charge des ecritures bancaires (cle 'ecritures')."""
    return _charger_liste(chemin, "ecritures", EcritureBancaire)


def charger_paie(chemin: Path) -> list[ElementPaie]:
    """Charge des elements de paie (cle 'paie')."""
    return _charger_liste(chemin, "paie", ElementPaie)
