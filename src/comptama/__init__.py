"""ComptaMA - moteur de calcul comptable et fiscal pour PME marocaines."""

__version__ = "0.1.0"
