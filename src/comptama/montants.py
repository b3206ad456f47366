"""Primitives monetaires: arrondi au centime et coercition tolerante des nombres.

Toute l'arithmetique utilise Decimal avec ROUND_HALF_UP (arrondi au plus
proche, egalite loin de zero). Les float sont convertis via leur
representation texte pour ne pas heriter de la derive binaire.

Les valeurs numeriques illisibles ne levent jamais d'exception: elles valent
zero et un avertissement est journalise.
"""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP

logger = logging.getLogger(__name__)

CENTIME = Decimal("0.01")
ZERO = Decimal("0")
CENT = Decimal("100")


def en_decimal(valeur: object) -> Decimal:
    """Convertit une valeur brute (str, int, float, Decimal, None) en Decimal.

    None et la chaine vide valent zero sans avertissement. Une valeur
    illisible, NaN ou infinie vaut zero et est journalisee.

    Args:
        valeur: Valeur saisie ou importee.

    Returns:
        Decimal fini.
    """
    if valeur is None or isinstance(valeur, bool):
        return ZERO
    if isinstance(valeur, Decimal):
        resultat = valeur
    elif isinstance(valeur, int):
        return Decimal(valeur)
    else:
        texte = str(valeur).strip()
        if not texte:
            return ZERO
        try:
            resultat = Decimal(texte)
        except InvalidOperation:
            logger.warning("Valeur numerique invalide %r, remplacee par 0", valeur)
            return ZERO
    if not resultat.is_finite():
        logger.warning("Valeur numerique non finie %r, remplacee par 0", valeur)
        return ZERO
    return resultat


def arrondir(valeur: object) -> Decimal:
    """Arrondit au centime (2 decimales, egalite loin de zero).

    Idempotent: arrondir(arrondir(x)) == arrondir(x).
    """
    return en_decimal(valeur).quantize(CENTIME, rounding=ROUND_HALF_UP)


def assainir_taux(taux: object) -> Decimal:
    """Convertit un taux de TVA saisi en pourcentage numerique non negatif.

    Accepte la virgule decimale ("20,5" -> 20.5). Un taux illisible ou
    negatif vaut zero.
    """
    if isinstance(taux, str):
        taux = taux.replace(",", ".", 1)
    resultat = en_decimal(taux)
    if resultat < ZERO:
        logger.warning("Taux de TVA negatif %r, remplace par 0", taux)
        return ZERO
    return resultat


def borner_pourcentage(pourcentage: object) -> Decimal:
    """Borne un pourcentage (remise) dans l'intervalle [0, 100]."""
    valeur = en_decimal(pourcentage)
    return min(max(valeur, ZERO), CENT)
