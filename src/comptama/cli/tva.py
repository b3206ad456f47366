"""Sous-commandes TVA: totaux de documents, resume par periode, declaration XML."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

import typer
from rich.console import Console
from rich.table import Table

from comptama.cli.fichiers import charger_documents
from comptama.exports import ecrire_export
from comptama.formatage import Colonne, RenduDate, RenduMonetaire, rendre_lignes
from comptama.maroc.tva import (
    calculer_totaux_document,
    exporter_declaration,
    regrouper_par_trimestre,
    resume_en_tableau,
    resumer_tva,
    totaliser,
    totaux_periode,
    valider_declaration,
)
from comptama.maroc.tva.periodes import COLONNES_RESUME, TotauxDeclaration
from comptama.modeles import ModeTVA

console = Console()

COLONNES_TOTAUX = [
    Colonne("id", "Document"),
    Colonne("type", "Type"),
    Colonne("date", "Date", RenduDate()),
    Colonne("ht", "HT", RenduMonetaire()),
    Colonne("tva", "TVA", RenduMonetaire()),
    Colonne("ttc", "TTC", RenduMonetaire()),
    Colonne("remise", "Remise", RenduMonetaire()),
    Colonne("reste", "Reste a payer", RenduMonetaire()),
]


def _charger(chemin: Path) -> list:
    try:
        return charger_documents(chemin)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Erreur:[/red] {e}")
        raise typer.Exit(1)


def _tableau(titre: str, colonnes: list[Colonne], lignes: list[dict[str, str]]) -> Table:
    tableau = Table(title=titre, show_header=True)
    for i, colonne in enumerate(colonnes):
        tableau.add_column(colonne.libelle, justify="left" if i == 0 else "right")
    for ligne in lignes:
        tableau.add_row(*(ligne[c.cle] for c in colonnes))
    return tableau


def _afficher_solde(total: TotauxDeclaration, devise: str) -> None:
    if total.credit_anterieur > 0:
        console.print(f"Credit anterieur impute: {total.credit_anterieur:.2f} {devise}")
    if total.nouveau_credit > 0:
        console.print(f"[green]Credit de TVA a reporter: {total.nouveau_credit:.2f} {devise}[/green]")
    else:
        console.print(f"TVA a payer: {total.tva_a_payer:.2f} {devise}")


def totaux(
    ctx: typer.Context,
    fichier: Path = typer.Argument(..., help="Fichier YAML de documents"),
    mode: Optional[ModeTVA] = typer.Option(
        None, "--mode", "-m", help="Regime de TVA (defaut: configuration)"
    ),
) -> None:
    """Afficher les totaux HT/TVA/TTC de chaque document."""
    from comptama.cli.app import obtenir_config

    cfg = obtenir_config(ctx)
    mode = mode or cfg.tva.mode
    documents = _charger(fichier)

    lignes = []
    encaissements = []
    for document in documents:
        t = calculer_totaux_document(document, mode)
        lignes.append({
            "id": document.id,
            "type": document.type.value,
            "date": document.date,
            "ht": t.ht,
            "tva": t.tva,
            "ttc": t.ttc,
            "remise": t.remise,
            "reste": t.reste_a_payer,
        })
        if t.encaissement is not None:
            encaissements.append((document.id, t.encaissement.total_collecte))

    if not lignes:
        console.print("[yellow]Aucun document.[/yellow]")
        return

    rendu = rendre_lignes(COLONNES_TOTAUX, lignes, cfg.formatage)
    console.print(_tableau("Totaux des documents", COLONNES_TOTAUX, rendu))

    for doc_id, collecte in encaissements:
        console.print(f"  {doc_id}: TVA exigible sur encaissements = {collecte}")


def tva(
    ctx: typer.Context,
    ventes: Path = typer.Argument(..., help="Fichier YAML des factures de vente"),
    achats: Path = typer.Argument(..., help="Fichier YAML des factures d'achat"),
    trimestriel: Optional[bool] = typer.Option(
        None, "--trimestriel/--mensuel", help="Periodicite (defaut: configuration)"
    ),
    credit_anterieur: float = typer.Option(
        0.0, "--credit-anterieur", help="Credit de TVA reporte de la periode precedente"
    ),
) -> None:
    """Afficher le resume de TVA collectee, deductible et nette par periode."""
    from comptama.cli.app import obtenir_config

    cfg = obtenir_config(ctx)
    resume = resumer_tva(
        _charger(ventes), _charger(achats), cfg.tva.base_periode, cfg.tva.prorata_deduction
    )
    if trimestriel is None:
        trimestriel = cfg.tva.periodicite == "trimestriel"
    if trimestriel:
        resume = regrouper_par_trimestre(resume)

    if not resume:
        console.print("[yellow]Aucune periode avec activite.[/yellow]")
        return

    lignes = resume_en_tableau(resume, cfg.formatage)
    console.print(_tableau("Resume TVA", COLONNES_RESUME, lignes))

    total = totaliser(resume, str(credit_anterieur))
    style = "red" if total.net > 0 else "green"
    console.print(
        f"Collectee: {total.collectee:.2f}  Deductible: {total.deductible:.2f}  "
        f"Nette: [{style}]{total.net:.2f}[/{style}] {cfg.formatage.devise}"
    )
    _afficher_solde(total, cfg.formatage.devise)


def declarer(
    ctx: typer.Context,
    ventes: Path = typer.Argument(..., help="Fichier YAML des factures de vente"),
    achats: Path = typer.Argument(..., help="Fichier YAML des factures d'achat"),
    periode: str = typer.Option(..., "--periode", "-p", help="Periode: YYYY-MM ou YYYY-Qn"),
    sortie: Path = typer.Option(Path("exports"), "--sortie", "-o", help="Repertoire de sortie"),
    forcer: bool = typer.Option(False, "--forcer", help="Exporter malgre les erreurs de validation"),
    credit_anterieur: float = typer.Option(
        0.0, "--credit-anterieur", help="Credit de TVA reporte de la periode precedente"
    ),
) -> None:
    """Valider et exporter la declaration de TVA signee (XML DGI)."""
    from comptama.cli.app import obtenir_config

    cfg = obtenir_config(ctx)
    docs_ventes = _charger(ventes)
    docs_achats = _charger(achats)

    resume = resumer_tva(
        docs_ventes, docs_achats, cfg.tva.base_periode, cfg.tva.prorata_deduction
    )
    if "-Q" in periode:
        resume = regrouper_par_trimestre(resume)
    montants = totaux_periode(resume, periode, str(credit_anterieur))

    validation = valider_declaration(cfg.societe, periode, docs_ventes, docs_achats, montants)
    for avertissement in validation.avertissements:
        console.print(f"[yellow]Avertissement:[/yellow] {avertissement}")
    for erreur in validation.erreurs:
        console.print(f"[red]Erreur:[/red] {erreur}")
    if not validation.valide and not forcer:
        console.print("[red]Declaration non exportee (utilisez --forcer pour ignorer).[/red]")
        raise typer.Exit(1)

    export = exporter_declaration(cfg.societe, periode, montants)
    try:
        chemin = ecrire_export(export, sortie)
    except OSError as e:
        console.print(f"[red]Erreur d'ecriture:[/red] {e}")
        raise typer.Exit(1)

    console.print(f"[green]Declaration exportee: {chemin}[/green]")
    console.print(
        f"  TVA collectee {montants.collectee:.2f}, deductible {montants.deductible:.2f}, "
        f"nette {montants.net:.2f}"
    )
    _afficher_solde(montants, cfg.formatage.devise)
