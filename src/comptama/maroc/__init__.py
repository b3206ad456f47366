"""Regles fiscales marocaines (TVA, bareme, declaration DGI)."""
