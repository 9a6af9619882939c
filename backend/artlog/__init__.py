"""Artlog - artist and artwork enrichment for an art journal."""
