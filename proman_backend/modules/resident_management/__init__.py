"""Resident management module for ProMan."""

from .models import Resident
from .routers import router

__all__ = [
    "Resident",
    "router",
]
