import pytest

from storefront.errors import ValidationError
from storefront.models import (
    AddItem,
    CartState,
    ClearCart,
    RemoveItem,
    SetCartOpen,
    ToggleCart,
    UpdateQuantity,
)
from storefront.services.cart import apply


def add(state, product, variant, quantity=1, size="M", personalization=None):
    return apply(
        state,
        AddItem(product=product, variant=variant, quantity=quantity, size=size, personalization=personalization),
    )


def assert_totals_consistent(state: CartState):
    assert state.item_count == sum(item.quantity for item in state.items)
    assert state.total == sum(item.price * item.quantity for item in state.items)


class TestAddItem:
    def test_add_to_empty_cart(self, empty_cart, bangle, red):
        state = add(empty_cart, bangle, red)

        assert len(state.items) == 1
        assert state.item_count == 1
        assert state.total == 2500
        assert state.items[0].size == "M"

    def test_unit_price_includes_variant_adjustment(self, empty_cart, bangle, gold):
        state = add(empty_cart, bangle, gold, quantity=2)

        assert state.items[0].price == 2750
        assert state.total == 5500

    def test_repeated_adds_merge_into_one_line(self, empty_cart, bangle, red):
        state = empty_cart
        for quantity in (1, 2, 4):
            state = add(state, bangle, red, quantity=quantity)

        assert len(state.items) == 1
        assert state.items[0].quantity == 7
        assert_totals_consistent(state)

    def test_merged_line_keeps_its_id(self, empty_cart, bangle, red):
        first = add(empty_cart, bangle, red)
        second = add(first, bangle, red)

        assert second.items[0].id == first.items[0].id

    def test_different_variants_are_separate_lines(self, empty_cart, bangle, red, gold):
        state = add(add(empty_cart, bangle, red), bangle, gold)

        assert [item.variant.id for item in state.items] == ["v-red", "v-gold"]
        assert state.items[0].id != state.items[1].id
        assert_totals_consistent(state)

    def test_different_sizes_are_separate_lines(self, empty_cart, bangle, red):
        state = add(add(empty_cart, bangle, red, size="S"), bangle, red, size="L")

        assert len(state.items) == 2

    def test_empty_and_absent_personalization_merge(self, empty_cart, bangle, red):
        state = add(empty_cart, bangle, red, personalization=None)
        state = add(state, bangle, red, personalization="")
        state = add(state, bangle, red, personalization="   ")

        assert len(state.items) == 1
        assert state.items[0].quantity == 3
        assert state.items[0].personalization is None

    def test_distinct_personalization_is_a_separate_line(self, empty_cart, bangle, red):
        state = add(add(empty_cart, bangle, red), bangle, red, personalization="A & R")

        assert len(state.items) == 2
        assert state.items[1].personalization == "A & R"

    def test_missing_variant_rejected(self, empty_cart, bangle):
        with pytest.raises(ValidationError):
            add(empty_cart, bangle, None)

    def test_out_of_stock_variant_rejected(self, empty_cart, bangle, sold_out):
        with pytest.raises(ValidationError) as exc_info:
            add(empty_cart, bangle, sold_out)
        assert exc_info.value.user_message == "This item is out of stock"

    def test_variant_of_another_product_rejected(self, empty_cart, earrings, red):
        with pytest.raises(ValidationError):
            add(empty_cart, earrings, red, size="One Size")

    def test_size_required_when_several_offered(self, empty_cart, bangle, red):
        with pytest.raises(ValidationError):
            add(empty_cart, bangle, red, size=None)

    def test_unknown_size_rejected(self, empty_cart, bangle, red):
        with pytest.raises(ValidationError):
            add(empty_cart, bangle, red, size="XXL")

    def test_single_size_product_defaults_size(self, empty_cart, earrings):
        pearl = earrings.variants[0]
        state = add(empty_cart, earrings, pearl, size=None)

        assert state.items[0].size == "One Size"
        assert state.total == 1300

    def test_non_positive_quantity_rejected(self, empty_cart, bangle, red):
        with pytest.raises(ValidationError):
            add(empty_cart, bangle, red, quantity=0)

    def test_input_state_is_not_mutated(self, empty_cart, bangle, red):
        first = add(empty_cart, bangle, red)
        add(first, bangle, red, quantity=3)

        assert empty_cart.items == ()
        assert first.items[0].quantity == 1

    def test_price_snapshot_survives_catalog_change(self, empty_cart, bangle, red):
        state = add(empty_cart, bangle, red)
        repriced = bangle.model_copy(update={"base_price": 9999})

        state = add(state, repriced, red)

        assert state.items[0].price == 2500
        assert state.total == 5000


class TestUpdateAndRemove:
    def test_update_quantity(self, empty_cart, bangle, red):
        state = add(empty_cart, bangle, red)
        item_id = state.items[0].id

        state = apply(state, UpdateQuantity(item_id=item_id, quantity=4))

        assert state.items[0].quantity == 4
        assert state.item_count == 4
        assert state.total == 10000

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_update_to_zero_or_below_removes(self, empty_cart, bangle, red, gold, quantity):
        state = add(add(empty_cart, bangle, red), bangle, gold)
        item_id = state.items[0].id

        updated = apply(state, UpdateQuantity(item_id=item_id, quantity=quantity))
        removed = apply(state, RemoveItem(item_id=item_id))

        assert updated == removed
        assert [item.variant.id for item in updated.items] == ["v-gold"]

    def test_update_unknown_id_is_noop(self, empty_cart, bangle, red):
        state = add(empty_cart, bangle, red)

        assert apply(state, UpdateQuantity(item_id="missing", quantity=3)) == state
        assert apply(state, UpdateQuantity(item_id="missing", quantity=0)) == state

    def test_remove_unknown_id_is_noop(self, empty_cart, bangle, red):
        state = add(empty_cart, bangle, red)

        assert apply(state, RemoveItem(item_id="missing")) == state

    def test_double_remove_is_harmless(self, empty_cart, bangle, red):
        state = add(empty_cart, bangle, red)
        item_id = state.items[0].id

        once = apply(state, RemoveItem(item_id=item_id))
        twice = apply(once, RemoveItem(item_id=item_id))

        assert twice == once
        assert twice.item_count == 0

    def test_removal_preserves_order_of_remaining_items(self, empty_cart, bangle, red, gold, earrings):
        state = add(add(empty_cart, bangle, red), bangle, gold)
        state = add(state, earrings, earrings.variants[0], size="One Size")

        state = apply(state, RemoveItem(item_id=state.items[1].id))

        assert [item.product.id for item in state.items] == ["prod-bangle", "prod-earrings"]


class TestClearAndToggle:
    def test_clear_cart(self, empty_cart, bangle, red, gold):
        state = add(add(empty_cart, bangle, red, quantity=2), bangle, gold)

        state = apply(state, ClearCart())

        assert state.items == ()
        assert state.item_count == 0
        assert state.total == 0

    def test_clear_empty_cart(self, empty_cart):
        state = apply(empty_cart, ClearCart())

        assert state.item_count == 0
        assert state.total == 0

    def test_toggle_only_flips_open_flag(self, empty_cart, bangle, red):
        state = add(empty_cart, bangle, red)

        toggled = apply(state, ToggleCart())

        assert toggled.is_open is True
        assert toggled.items == state.items
        assert toggled.total == state.total
        assert apply(toggled, ToggleCart()).is_open is False

    def test_set_cart_open(self, empty_cart):
        opened = apply(empty_cart, SetCartOpen(is_open=True))

        assert opened.is_open is True
        assert apply(opened, SetCartOpen(is_open=True)) is opened


def test_example_scenario(empty_cart, bangle, red):
    state = add(empty_cart, bangle, red, quantity=1, size="M")
    assert (len(state.items), state.item_count, state.total) == (1, 1, 2500)

    state = add(state, bangle, red, quantity=2, size="M")
    assert (len(state.items), state.items[0].quantity, state.item_count, state.total) == (1, 3, 3, 7500)

    state = apply(state, UpdateQuantity(item_id=state.items[0].id, quantity=0))
    assert (state.items, state.item_count, state.total) == ((), 0, 0)


def test_derived_fields_are_serialized(empty_cart, bangle, red):
    state = add(empty_cart, bangle, red, quantity=2)

    data = state.model_dump(mode="json")

    assert data["item_count"] == 2
    assert data["total"] == 5000
    assert CartState.model_validate(data) == state


def test_unknown_action_rejected(empty_cart):
    with pytest.raises(TypeError):
        apply(empty_cart, object())
