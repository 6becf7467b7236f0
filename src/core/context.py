# src/core/context.py
from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class RequestContext:
    """
    Vem som gör anropet och på vilket språk svaret ska formuleras.

    Skickas explicit in i tjänster och stores; det finns ingen global
    "inloggad användare".
    """

    user_id: str
    language: str = "en"
