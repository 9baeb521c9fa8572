"""Cart models for the storefront"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, computed_field

from .product import Product, Variant


class CartItem(BaseModel):
    """One line item in the cart"""
    model_config = ConfigDict(frozen=True)

    id: str
    product: Product
    variant: Variant
    quantity: int = Field(ge=1)
    size: Optional[str] = None
    personalization: Optional[str] = None
    # Unit price snapshot taken when the item was added
    price: float

    @property
    def line_key(self) -> tuple:
        return (self.product.id, self.variant.id, self.size, self.personalization)

    @property
    def line_total(self) -> float:
        return self.price * self.quantity


class CartState(BaseModel):
    """
    Shopping cart state.

    item_count and total are derived from items on every read and are
    never stored.
    """
    model_config = ConfigDict(frozen=True)

    items: tuple[CartItem, ...] = ()
    is_open: bool = False

    @computed_field
    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @computed_field
    @property
    def total(self) -> float:
        return round(sum(item.price * item.quantity for item in self.items), 2)

    @property
    def is_empty(self) -> bool:
        return not self.items

    def get_item(self, item_id: str) -> Optional[CartItem]:
        return next((item for item in self.items if item.id == item_id), None)


class CartActionType(str, Enum):
    ADD_ITEM = "ADD_ITEM"
    UPDATE_QUANTITY = "UPDATE_QUANTITY"
    REMOVE_ITEM = "REMOVE_ITEM"
    CLEAR_CART = "CLEAR_CART"
    TOGGLE_CART = "TOGGLE_CART"
    SET_CART_OPEN = "SET_CART_OPEN"


@dataclass(frozen=True)
class AddItem:
    type: ClassVar[CartActionType] = CartActionType.ADD_ITEM
    product: Product
    variant: Optional[Variant]
    quantity: int = 1
    size: Optional[str] = None
    personalization: Optional[str] = None


@dataclass(frozen=True)
class UpdateQuantity:
    type: ClassVar[CartActionType] = CartActionType.UPDATE_QUANTITY
    item_id: str
    quantity: int


@dataclass(frozen=True)
class RemoveItem:
    type: ClassVar[CartActionType] = CartActionType.REMOVE_ITEM
    item_id: str


@dataclass(frozen=True)
class ClearCart:
    type: ClassVar[CartActionType] = CartActionType.CLEAR_CART


@dataclass(frozen=True)
class ToggleCart:
    type: ClassVar[CartActionType] = CartActionType.TOGGLE_CART


@dataclass(frozen=True)
class SetCartOpen:
    type: ClassVar[CartActionType] = CartActionType.SET_CART_OPEN
    is_open: bool


CartAction = Union[AddItem, UpdateQuantity, RemoveItem, ClearCart, ToggleCart, SetCartOpen]
