from dataclasses import dataclass
from typing import Any, Dict, Optional


@dataclass
class Product:
    """Domain model for a catalog product."""

    name: str
    price: float
    description: str = ""
    inventory: int = 0
    id: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "_id": self.id,
            "name": self.name,
            "description": self.description,
            "price": self.price,
            "inventory": self.inventory,
        }
