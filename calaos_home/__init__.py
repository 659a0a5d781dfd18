"""Client models and helpers for a Calaos home automation installation."""

__version__ = "0.1.0"