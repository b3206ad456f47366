"""Fichiers d'export: contenu brut en memoire, ecriture disque separee.

Un export est d'abord construit en memoire (ExportFichier). L'ecriture sur
disque est une etape distincte qui peut echouer (OSError) sans alterer les
montants deja calcules.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ExportFichier:
    """Fichier pret a etre livre: nom, octets et type MIME."""

    nom_fichier: str
    contenu: bytes
    type_mime: str

    @property
    def texte(self) -> str:
        """Contenu decode en UTF-8 (BOM eventuel conserve)."""
        return self.contenu.decode("utf-8")


def horodatage_ms() -> int:
    """Horodatage courant en millisecondes depuis l'epoque Unix."""
    return int(time.time() * 1000)


def ecrire_export(export: ExportFichier, dossier: Path) -> Path:
    """Ecrit un export dans un repertoire (cree au besoin).

    Args:
        export: Fichier a ecrire.
        dossier: Repertoire de destination.

    Returns:
        Chemin du fichier ecrit.

    Raises:
        OSError: Si le repertoire ou le fichier ne peut pas etre ecrit.
    """
    dossier.mkdir(parents=True, exist_ok=True)
    chemin = dossier / export.nom_fichier
    chemin.write_bytes(export.contenu)
    logger.info("Export ecrit: %s (%d octets)", chemin, len(export.contenu))
    return chemin
