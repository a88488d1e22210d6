"""Example integrators built on `multi_ownable.MultiOwnable`."""
