"""Export XML de la declaration de TVA (format DGI), signe par empreinte SHA-256.

Le XML non signe est rendu depuis un gabarit Jinja2 (valeurs echappees). La
signature est l'empreinte SHA-256 hexadecimale des octets UTF-8 exacts du XML
non signe; elle est ajoutee apres l'element racine:

    <?xml ...?>
    <DGI-POC>...</DGI-POC>
    <Signature>{sha256}</Signature>
"""

from __future__ import annotations

import hashlib

from jinja2 import Environment, PackageLoader

from comptama.exports.base import ExportFichier, horodatage_ms
from comptama.maroc.tva.periodes import TotauxDeclaration
from comptama.modeles import Societe
from comptama.montants import arrondir

SEPARATEUR_SIGNATURE = "\n<Signature>"

_env = Environment(
    loader=PackageLoader("comptama.maroc.tva", "templates"),
    autoescape=True,
)


def generer_xml_declaration(
    societe: Societe,
    periode: str,
    totaux: TotauxDeclaration,
) -> str:
    """Rend le XML non signe de la declaration.

    Args:
        societe: Identite de la societe (raison sociale, ICE, IF, RC).
        periode: Periode declaree (ex: "2025-01" ou "2025-Q1").
        totaux: TVA collectee, deductible et nette.

    Returns:
        XML sans signature (sans saut de ligne final).
    """
    gabarit = _env.get_template("declaration_tva.xml")
    return gabarit.render(
        societe=societe,
        periode=periode,
        collectee=str(arrondir(totaux.collectee)),
        deductible=str(arrondir(totaux.deductible)),
        net=str(arrondir(totaux.net)),
    )


def empreinte(xml: str) -> str:
    """Empreinte SHA-256 hexadecimale des octets UTF-8 du XML."""
    return hashlib.sha256(xml.encode("utf-8")).hexdigest()


def signer_xml(xml: str) -> str:
    """Ajoute l'element Signature portant l'empreinte du XML qui le precede."""
    return f"{xml}{SEPARATEUR_SIGNATURE}{empreinte(xml)}</Signature>"


def verifier_signature(contenu: str | bytes) -> bool:
    """Verifie que la signature finale correspond au XML qui la precede."""
    if isinstance(contenu, bytes):
        contenu = contenu.decode("utf-8")
    xml, sep, reste = contenu.rpartition(SEPARATEUR_SIGNATURE)
    if not sep or not reste.endswith("</Signature>"):
        return False
    return reste[: -len("</Signature>")] == empreinte(xml)


def nom_fichier_declaration(societe: Societe, horodatage: int | None = None) -> str:
    """Nom du fichier: DGI-<ICE>-<epoch-ms>.xml."""
    if horodatage is None:
        horodatage = horodatage_ms()
    return f"DGI-{societe.ice}-{horodatage}.xml"


def exporter_declaration(
    societe: Societe,
    periode: str,
    totaux: TotauxDeclaration,
    horodatage: int | None = None,
) -> ExportFichier:
    """Construit le fichier XML signe de la declaration (sans ecriture disque)."""
    payload = signer_xml(generer_xml_declaration(societe, periode, totaux))
    return ExportFichier(
        nom_fichier=nom_fichier_declaration(societe, horodatage),
        contenu=payload.encode("utf-8"),
        type_mime="application/xml",
    )
