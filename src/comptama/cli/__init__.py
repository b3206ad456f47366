"""Interface en ligne de commande ComptaMA."""
