"""Sous-commande d'export CNSS."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console

from comptama.cli.fichiers import charger_paie
from comptama.exports import ecrire_export, exporter_cnss

console = Console()


def cnss(
    paie: Path = typer.Argument(..., help="Fichier YAML des elements de paie"),
    sortie: Path = typer.Option(Path("exports"), "--sortie", "-o", help="Repertoire de sortie"),
) -> None:
    """Exporter les elements de paie en CSV pour la CNSS."""
    try:
        elements = charger_paie(paie)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Erreur:[/red] {e}")
        raise typer.Exit(1)

    export = exporter_cnss(elements)
    try:
        chemin = ecrire_export(export, sortie)
    except OSError as e:
        console.print(f"[red]Erreur d'ecriture:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Export CNSS: {chemin} ({len(elements)} salarie(s))[/green]")
