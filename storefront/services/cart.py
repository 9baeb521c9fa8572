"""
Cart reducer

Every operation takes the current CartState and an action and returns a new
CartState. Inputs are never mutated.
"""

import uuid
from typing import Callable, Optional

from ..errors import ValidationError
from ..models.cart import (
    AddItem,
    CartAction,
    CartActionType,
    CartItem,
    CartState,
    ClearCart,
    RemoveItem,
    SetCartOpen,
    ToggleCart,
    UpdateQuantity,
)


def new_item_id() -> str:
    return f"item-{uuid.uuid4().hex}"


def normalize_personalization(text: Optional[str]) -> Optional[str]:
    """Absent, empty and blank personalization all mean "none" """
    if text is None:
        return None
    return text.strip() or None


def _resolve_size(action: AddItem) -> Optional[str]:
    sizes = action.product.sizes
    size = action.size or None

    if size is None:
        if len(sizes) > 1:
            raise ValidationError(
                f"Size is required for product {action.product.id}",
                user_message="Please select a size",
            )
        return sizes[0] if sizes else None

    if sizes and size not in sizes:
        raise ValidationError(
            f"Size {size!r} is not offered for product {action.product.id}",
            user_message="Please select a valid size",
        )
    return size


def add_item(state: CartState, action: AddItem, id_factory: Callable[[], str] = new_item_id) -> CartState:
    """Add an item, merging into an existing line with the same identity"""
    product = action.product
    variant = action.variant

    if variant is None:
        raise ValidationError("No variant selected", user_message="Please select a color")

    if product.get_variant(variant.id) is None:
        raise ValidationError(f"Variant {variant.id} does not belong to product {product.id}")

    if variant.stock == 0:
        raise ValidationError(
            f"Variant {variant.id} of product {product.id} is out of stock",
            user_message="This item is out of stock",
        )

    if action.quantity < 1:
        raise ValidationError(f"Quantity must be at least 1, got {action.quantity}")

    size = _resolve_size(action)
    personalization = normalize_personalization(action.personalization)
    key = (product.id, variant.id, size, personalization)

    existing_item = next((item for item in state.items if item.line_key == key), None)

    if existing_item:
        items = tuple(
            item.model_copy(update={"quantity": item.quantity + action.quantity})
            if item.id == existing_item.id
            else item
            for item in state.items
        )
    else:
        cart_item = CartItem(
            id=id_factory(),
            product=product,
            variant=variant,
            quantity=action.quantity,
            size=size,
            personalization=personalization,
            price=product.base_price + variant.price,
        )
        items = state.items + (cart_item,)

    return state.model_copy(update={"items": items})


def update_quantity(state: CartState, action: UpdateQuantity) -> CartState:
    """Set an item's quantity; zero or below removes it"""
    if state.get_item(action.item_id) is None:
        return state

    if action.quantity <= 0:
        return remove_item(state, RemoveItem(item_id=action.item_id))

    items = tuple(
        item.model_copy(update={"quantity": action.quantity}) if item.id == action.item_id else item
        for item in state.items
    )
    return state.model_copy(update={"items": items})


def remove_item(state: CartState, action: RemoveItem) -> CartState:
    if state.get_item(action.item_id) is None:
        return state
    items = tuple(item for item in state.items if item.id != action.item_id)
    return state.model_copy(update={"items": items})


def clear_cart(state: CartState, action: ClearCart) -> CartState:
    return state.model_copy(update={"items": ()})


def toggle_cart(state: CartState, action: ToggleCart) -> CartState:
    return state.model_copy(update={"is_open": not state.is_open})


def set_cart_open(state: CartState, action: SetCartOpen) -> CartState:
    if state.is_open == action.is_open:
        return state
    return state.model_copy(update={"is_open": action.is_open})


_HANDLERS = {
    CartActionType.ADD_ITEM: add_item,
    CartActionType.UPDATE_QUANTITY: update_quantity,
    CartActionType.REMOVE_ITEM: remove_item,
    CartActionType.CLEAR_CART: clear_cart,
    CartActionType.TOGGLE_CART: toggle_cart,
    CartActionType.SET_CART_OPEN: set_cart_open,
}


def apply(state: CartState, action: CartAction) -> CartState:
    """Apply a cart action to a state and return the resulting state"""
    handler = _HANDLERS.get(getattr(action, "type", None))
    if handler is None:
        raise TypeError(f"Unknown cart action: {action!r}")
    return handler(state, action)


def empty_cart() -> CartState:
    return CartState()
