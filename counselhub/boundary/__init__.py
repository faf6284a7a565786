"""Boundary layer: persistence adapters."""
