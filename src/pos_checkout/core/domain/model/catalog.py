from __future__ import annotations

from dataclasses import dataclass

from pos_checkout.core.domain.model.money import Money


@dataclass(frozen=True)
class Product:
    product_id: str
    name: str
    price: Money
    category_name: str = ""
    size: str | None = None
    flavor: str | None = None
    image: str | None = None

    def display_name(self) -> str:
        """``name``, then ``(size)`` and ``- flavor`` when present."""
        parts = [self.name]
        if self.size:
            parts.append(f"({self.size})")
        if self.flavor:
            parts.append(f"- {self.flavor}")
        return " ".join(parts)


@dataclass(frozen=True)
class Addon:
    addon_id: str
    name: str
    price: Money
