"""Implementation package of deltri; import public names from ``deltri``."""
