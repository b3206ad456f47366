"""Configuration ComptaMA: societe, regime de TVA, rapprochement, numerotation, affichage.

Chargee depuis un fichier YAML et validee par Pydantic. Les objets de
configuration sont passes explicitement aux fonctions qui en ont besoin.
"""

from __future__ import annotations

from decimal import Decimal
from pathlib import Path
from typing import Literal

import yaml
from pydantic import BaseModel, Field, ValidationError

from comptama.formatage import ConfigFormatage
from comptama.maroc.tva.periodes import BasePeriode
from comptama.modeles import ModeTVA, Societe
from comptama.numerotation.sequence import ConfigNumerotation
from comptama.rapprochement.scoring import ConfigRapprochement


class ConfigTVA(BaseModel):
    """Regime de TVA de la societe."""

    mode: ModeTVA = ModeTVA.DEBIT
    periodicite: Literal["mensuel", "trimestriel"] = "mensuel"
    base_periode: BasePeriode = BasePeriode.REMISEE
    prorata_deduction: Decimal = Field(default=Decimal("100"), ge=0, le=100)


class ConfigComptama(BaseModel):
    """Configuration complete."""

    societe: Societe = Field(default_factory=Societe)
    tva: ConfigTVA = Field(default_factory=ConfigTVA)
    rapprochement: ConfigRapprochement = Field(default_factory=ConfigRapprochement)
    numerotation: ConfigNumerotation = Field(default_factory=ConfigNumerotation)
    formatage: ConfigFormatage = Field(default_factory=ConfigFormatage)


# ---------------------------------------------------------------------------
# YAML par defaut integre (pour les tests et `comptama init`)
# ---------------------------------------------------------------------------

CONFIG_DEFAUT_YAML = """
societe:
  raison_sociale: "Ma Societe SARL"
  ice: "001234567000082"
  identifiant_fiscal: "12345678"
  registre_commerce: "RC-CASA-123456"

tva:
  mode: DEBIT
  periodicite: mensuel
  base_periode: remisee
  prorata_deduction: 100

rapprochement:
  seuil: 0.7
  tolerance_montant: 5
  fenetre_jours: 5
  poids_montant: 0.5
  poids_date: 0.2
  poids_reference: 0.3

numerotation:
  separateur: "-"
  largeur: 6
  prefixes:
    invoice: FA
    quote: DE
    purchase: AC
    credit: AV

formatage:
  locale: fr
  devise: MAD
"""


def charger_config(
    chemin: str | Path = "comptama.yaml",
    *,
    _default_yaml: bool = False,
) -> ConfigComptama:
    """Charge et valide la configuration depuis un fichier YAML.

    Args:
        chemin: Chemin du fichier YAML.
        _default_yaml: Si True, utilise la configuration integree
                       (utile pour les tests sans fichier sur disque).

    Returns:
        ConfigComptama validee.

    Raises:
        FileNotFoundError: Si le fichier n'existe pas et _default_yaml est False.
        ValueError: Si le YAML ne respecte pas le schema.
    """
    if _default_yaml:
        donnees = yaml.safe_load(CONFIG_DEFAUT_YAML)
    else:
        path = Path(chemin)
        if not path.exists():
            raise FileNotFoundError(f"Fichier de configuration introuvable: {chemin}")
        donnees = yaml.safe_load(path.read_text(encoding="utf-8"))

    if donnees is None:
        return ConfigComptama()

    try:
        return ConfigComptama.model_validate(donnees)
    except ValidationError as e:
        raise ValueError(f"Configuration invalide ({chemin}): {e}") from e
