# bizops/models/__init__.py
from .client import Client
from .inventory import InventoryItem
from .invoice import Invoice
from .order import Order
from .user import User

# Export all models
__all__ = [
    "Client",
    "InventoryItem",
    "Invoice",
    "Order",
    "User",
]
