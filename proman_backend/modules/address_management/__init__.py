"""Address management module for ProMan.

Hierarchical addresses: community, building, unit/floor and room.
"""

from .models import Address, AddressType
from .routers import router
from .seed import seed_demo_addresses

__all__ = [
    # Models
    "Address",
    # Enums
    "AddressType",
    # Routers
    "router",
    # Seed
    "seed_demo_addresses",
]
