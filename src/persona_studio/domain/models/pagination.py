"""Pagination contract."""

from pydantic import Field

from .base import ContractModel


class Pagination(ContractModel):
    """Page window for listings.

    The only contract that coerces: query strings arrive as text.
    """

    limit: int = Field(default=20, ge=1, le=100)
    offset: int = Field(default=0, ge=0)
