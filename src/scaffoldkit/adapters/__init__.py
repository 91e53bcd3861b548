"""Adapters implementing scaffoldkit ports."""
