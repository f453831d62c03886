"""
===============================================================================
TARJETA CRC — docreview/interfaces/api/http/routers/__init__.py
===============================================================================

Name:
    Routers Package (HTTP)

Responsibilities:
    - Exponer routers por feature para ser incluidos por el router principal.

Collaborators:
    - routers.review
    - routers.rules

Notas:
    - Este archivo NO define endpoints. Solo re-exporta routers.
===============================================================================
"""

from .review import router as review_router
from .rules import router as rules_router

__all__ = ["review_router", "rules_router"]
