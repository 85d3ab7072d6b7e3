from . import (
    archived,
    health,
    mode,
    products,
    sales,
    settings,
)

__all__ = [
    "archived",
    "health",
    "mode",
    "products",
    "sales",
    "settings",
]
