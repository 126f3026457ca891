"""Module Cards API: CRUD over the ``module_cards`` table."""

__version__ = "1.0.0"
