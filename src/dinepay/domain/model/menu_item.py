"""MenuItem — what the kitchen sells.

Menu items live independently of orders and are managed outside this
engine.  Orders and carts only read them: orders snapshot the current
price at the moment a line is added.
"""

from __future__ import annotations

from dataclasses import dataclass

from dinepay.domain.exceptions import ValidationError
from dinepay.domain.model.value_objects import Money


@dataclass
class MenuItem:
    """A dish or drink on the menu.

    ``promo_price``, when set, replaces the regular price for new orders.
    """

    id: str
    name: str
    price: Money
    available: bool = True
    promo_price: Money | None = None
    image_url: str | None = None

    def __post_init__(self) -> None:
        if self.promo_price is not None and self.promo_price > self.price:
            raise ValidationError(
                f"Promo price {self.promo_price} for '{self.name}' "
                f"exceeds the regular price {self.price}"
            )

    @property
    def current_price(self) -> Money:
        return self.promo_price if self.promo_price is not None else self.price
