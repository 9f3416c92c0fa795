"""Repositories over the storage collaborator."""

from .persona import PersonaRepository, generate_persona_id

__all__ = ["PersonaRepository", "generate_persona_id"]
