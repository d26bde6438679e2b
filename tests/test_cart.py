from decimal import Decimal

import pytest

from store_api.client import Cart

SCARF = {"id": 1, "title": "Scarf", "price": 19.99, "image": "http://x/scarf.png", "stock": 4}
HAT = {"id": 2, "title": "Hat", "price": "5.50"}


def test_add_merges_lines():
    cart = Cart()
    cart.add(SCARF)
    cart.add(SCARF, quantity=2)
    cart.add(HAT)

    assert len(cart.lines) == 2
    assert cart.lines[1].quantity == 3
    assert cart.item_count == 4


def test_total_is_sum_of_price_times_quantity():
    cart = Cart()
    cart.add(SCARF, quantity=2)
    cart.add(HAT, quantity=3)
    assert cart.total == Decimal("19.99") * 2 + Decimal("5.50") * 3


def test_empty_cart_total_is_zero():
    assert Cart().total == 0
    assert Cart().is_empty()


def test_decrement_below_one_removes_line():
    cart = Cart()
    cart.add(SCARF, quantity=2)
    cart.decrement(1)
    assert cart.lines[1].quantity == 1

    cart.decrement(1)
    assert 1 not in cart.lines


def test_update_quantity():
    cart = Cart()
    cart.add(HAT)
    cart.update_quantity(2, 5)
    assert cart.lines[2].quantity == 5

    cart.update_quantity(2, 0)
    assert cart.is_empty()

    with pytest.raises(KeyError):
        cart.update_quantity(99, 1)


def test_add_rejects_non_positive_quantity():
    with pytest.raises(ValueError):
        Cart().add(SCARF, quantity=0)


def test_snapshot_is_detached_from_product():
    product = dict(SCARF)
    cart = Cart()
    cart.add(product)
    product["price"] = 99

    assert cart.to_order_items() == [
        {"id": 1, "title": "Scarf", "price": 19.99, "quantity": 1, "image": "http://x/scarf.png"},
    ]


def test_clear():
    cart = Cart()
    cart.add(SCARF)
    cart.clear()
    assert cart.is_empty()
