"""Application CLI principale ComptaMA."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Optional

import typer
from dotenv import load_dotenv
from rich.console import Console

import comptama
from comptama.config import CONFIG_DEFAUT_YAML, ConfigComptama, charger_config
from comptama.modeles import TypeDocument
from comptama.numerotation import construire_identifiant, prochain_identifiant

app = typer.Typer(
    name="comptama",
    help="ComptaMA - TVA, rapprochement bancaire et numerotation pour PME marocaines",
    no_args_is_help=True,
)

console = Console()

CHEMIN_CONFIG_DEFAUT = "comptama.yaml"


def obtenir_config(ctx: typer.Context) -> ConfigComptama:
    """Charge la configuration designee par --config ou $COMPTAMA_CONFIG.

    Seul le fichier implicite comptama.yaml peut manquer (valeurs par defaut);
    un fichier designe explicitement doit exister.
    """
    obj = ctx.obj or {}
    chemin = Path(obj.get("config", CHEMIN_CONFIG_DEFAUT))
    if not chemin.exists() and not obj.get("config_explicite", False):
        console.print(f"[yellow]Configuration {chemin} introuvable, valeurs par defaut.[/yellow]")
        return ConfigComptama()
    try:
        return charger_config(chemin)
    except (FileNotFoundError, ValueError) as e:
        console.print(f"[red]Erreur:[/red] {e}")
        raise typer.Exit(1)


def _version_callback(value: bool) -> None:
    if value:
        console.print(f"ComptaMA version {comptama.__version__}")
        raise typer.Exit()


@app.callback()
def main(
    ctx: typer.Context,
    config: Optional[str] = typer.Option(
        None,
        "--config",
        "-c",
        help="Fichier de configuration YAML (defaut: $COMPTAMA_CONFIG ou comptama.yaml)",
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Journalisation detaillee"),
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-v",
        help="Afficher la version de ComptaMA",
        callback=_version_callback,
        is_eager=True,
    ),
) -> None:
    """ComptaMA - moteur comptable et fiscal (TVA marocaine)."""
    load_dotenv()
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.ensure_object(dict)
    explicite = config or os.environ.get("COMPTAMA_CONFIG")
    ctx.obj["config"] = explicite or CHEMIN_CONFIG_DEFAUT
    ctx.obj["config_explicite"] = bool(explicite)


@app.command(name="init")
def init(
    chemin: Path = typer.Argument(Path(CHEMIN_CONFIG_DEFAUT), help="Fichier a creer"),
) -> None:
    """Creer un fichier de configuration par defaut."""
    if chemin.exists():
        console.print(f"[yellow]{chemin} existe deja, aucune modification.[/yellow]")
        raise typer.Exit(1)
    chemin.write_text(CONFIG_DEFAUT_YAML.lstrip(), encoding="utf-8")
    console.print(f"[green]Configuration creee: {chemin}[/green]")


@app.command(name="numero")
def numero(
    ctx: typer.Context,
    type_document: TypeDocument = typer.Option(
        TypeDocument.FACTURE, "--type", "-t", help="Type de document"
    ),
    annee: int = typer.Option(..., "--annee", "-a", help="Annee de la sequence"),
    sequence: Optional[int] = typer.Option(
        None, "--sequence", "-s", help="Numero de sequence (sinon: suivant)"
    ),
    documents: Optional[Path] = typer.Option(
        None, "--documents", "-d", help="Documents existants (pour le numero suivant)"
    ),
) -> None:
    """Construire un identifiant de document (ex: FA-2025-000042)."""
    from comptama.cli.fichiers import charger_documents

    cfg = obtenir_config(ctx).numerotation
    prefixe = cfg.prefixe(type_document)

    if sequence is not None:
        try:
            identifiant = construire_identifiant(
                prefixe, annee, sequence, cfg.separateur, cfg.largeur
            )
        except ValueError as e:
            console.print(f"[red]Erreur:[/red] {e}")
            raise typer.Exit(1)
    else:
        existants: list[str] = []
        if documents is not None:
            try:
                existants = [d.id for d in charger_documents(documents)]
            except (FileNotFoundError, ValueError) as e:
                console.print(f"[red]Erreur:[/red] {e}")
                raise typer.Exit(1)
        identifiant = prochain_identifiant(
            existants, prefixe, annee, cfg.separateur, cfg.largeur
        )

    console.print(identifiant)


# Import et enregistrement des sous-commandes
from comptama.cli.banque import rapprocher  # noqa: E402
from comptama.cli.paie import cnss  # noqa: E402
from comptama.cli.tva import declarer, totaux, tva  # noqa: E402

app.command(name="totaux", help="Totaux HT/TVA/TTC par document")(totaux)
app.command(name="tva", help="Resume de TVA par periode")(tva)
app.command(name="declarer", help="Exporter la declaration de TVA signee (XML)")(declarer)
app.command(name="rapprocher", help="Proposer les rapprochements bancaires")(rapprocher)
app.command(name="cnss", help="Exporter la paie au format CSV CNSS")(cnss)
