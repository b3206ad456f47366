"""Sous-commande de rapprochement bancaire."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from comptama.cli.fichiers import charger_documents, charger_ecritures
from comptama.rapprochement import auto_rapprocher, documents_en_conflit

console = Console()


def rapprocher(
    ctx: typer.Context,
    banque: Path = typer.Argument(..., help="Fichier YAML des ecritures bancaires"),
    documents: Path = typer.Argument(..., help="Fichier YAML des documents ouverts"),
) -> None:
    """Proposer les correspondances ecriture bancaire -> document."""
    from comptama.cli.app import obtenir_config

    cfg = obtenir_config(ctx)
    try:
        ecritures = charger_ecritures(banque)
        docs = charger_documents(documents)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Erreur:[/red] {e}")
        raise typer.Exit(1)

    correspondances = auto_rapprocher(ecritures, docs, cfg.rapprochement)
    if not correspondances:
        console.print("[yellow]Aucune correspondance proposee.[/yellow]")
        return

    tableau = Table(title="Rapprochements proposes", show_header=True)
    tableau.add_column("Ecriture")
    tableau.add_column("Document")
    tableau.add_column("Score", justify="right")
    for c in correspondances:
        tableau.add_row(c.ecriture_id, c.document_id, f"{c.score:.2f}")
    console.print(tableau)

    for document_id, ecriture_ids in documents_en_conflit(correspondances).items():
        console.print(
            f"[yellow]Attention:[/yellow] {document_id} propose pour "
            f"{', '.join(ecriture_ids)}"
        )
