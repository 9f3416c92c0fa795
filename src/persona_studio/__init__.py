"""Persona Studio: persona extraction, storage and chat functions."""

__version__ = "0.1.0"
