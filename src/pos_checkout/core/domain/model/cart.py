from __future__ import annotations

from dataclasses import dataclass, replace
from typing import Iterator, Mapping, Sequence, Tuple

from pos_checkout.core.domain.model.catalog import Addon, Product
from pos_checkout.core.domain.model.errors import ValidationError


@dataclass(frozen=True)
class AddonSelection:
    """addon_id -> quantity. Entries with quantity <= 0 are never stored."""

    entries: Tuple[Tuple[str, int], ...] = ()

    @staticmethod
    def of(quantities: Mapping[str, int] | None = None) -> "AddonSelection":
        merged: dict[str, int] = {}
        for addon_id, qty in (quantities or {}).items():
            if int(qty) > 0:
                merged[str(addon_id)] = int(qty)
        return AddonSelection(tuple(merged.items()))

    def with_quantity(self, addon_id: str, quantity: int) -> "AddonSelection":
        updated = dict(self.entries)
        if quantity > 0:
            updated[str(addon_id)] = quantity
        else:
            updated.pop(str(addon_id), None)
        return AddonSelection(tuple(updated.items()))

    def get(self, addon_id: str) -> int:
        return dict(self.entries).get(str(addon_id), 0)

    def as_dict(self) -> dict[str, int]:
        return dict(self.entries)

    def __iter__(self) -> Iterator[Tuple[str, int]]:
        return iter(self.entries)

    def __len__(self) -> int:
        return len(self.entries)


@dataclass(frozen=True)
class CartLineItem:
    product: Product
    quantity: int
    addons: AddonSelection = AddonSelection()
    # add-on catalog entries offered for this line, captured at add time
    addon_details: Tuple[Addon, ...] = ()

    def __post_init__(self) -> None:
        if self.quantity < 1:
            raise ValidationError(
                f"quantity must be >= 1 (product {self.product.product_id})"
            )

    def find_addon(self, addon_id: str) -> Addon | None:
        for addon in self.addon_details:
            if addon.addon_id == str(addon_id):
                return addon
        return None


@dataclass(frozen=True)
class Cart:
    items: Tuple[CartLineItem, ...] = ()

    def add(
        self,
        product: Product,
        quantity: int = 1,
        addons: Mapping[str, int] | None = None,
        addon_details: Sequence[Addon] = (),
    ) -> "Cart":
        item = CartLineItem(
            product=product,
            quantity=quantity,
            addons=AddonSelection.of(addons),
            addon_details=tuple(addon_details),
        )
        return Cart(self.items + (item,))

    def adjust_quantity(self, index: int, delta: int) -> "Cart":
        item = self._at(index)
        new_quantity = item.quantity + delta
        if new_quantity <= 0:
            return self.remove(index)
        return self._replace_at(index, replace(item, quantity=new_quantity))

    def set_addon_quantity(self, index: int, addon_id: str, quantity: int) -> "Cart":
        item = self._at(index)
        return self._replace_at(
            index, replace(item, addons=item.addons.with_quantity(addon_id, quantity))
        )

    def remove(self, index: int) -> "Cart":
        self._at(index)
        return Cart(self.items[:index] + self.items[index + 1 :])

    def clear(self) -> "Cart":
        return Cart()

    def is_empty(self) -> bool:
        return not self.items

    def __iter__(self) -> Iterator[CartLineItem]:
        return iter(self.items)

    def __len__(self) -> int:
        return len(self.items)

    def _at(self, index: int) -> CartLineItem:
        if not 0 <= index < len(self.items):
            raise ValidationError(f"no cart line at index {index}")
        return self.items[index]

    def _replace_at(self, index: int, item: CartLineItem) -> "Cart":
        return Cart(self.items[:index] + (item,) + self.items[index + 1 :])
