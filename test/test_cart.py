import pytest

from dukan.domain.cart import Cart
from dukan.domain.errors import InsufficientStockError, NotFoundError, ValidationError
from dukan.domain.models import Product, SaleUnit
from dukan.services.inventory_service import InventoryService
from dukan.services.sales_service import SalesService


def _product(qty: int = 3) -> Product:
    return Product(id="p1", name="Rice", quantity=qty, unit=SaleUnit.BOX, purchase_price=1.0, sell_price=2.0)


def test_add_line_accumulates_up_to_available_stock():
    cart = Cart()
    p = _product(3)

    cart.add_line(p)
    cart.add_line(p, 2)

    assert cart.quantity_of("p1") == 3
    with pytest.raises(InsufficientStockError):
        cart.add_line(p)
    assert cart.quantity_of("p1") == 3


def test_set_quantity_zero_removes_the_line():
    cart = Cart()
    p = _product()
    cart.set_quantity(p, 2)

    cart.set_quantity(p, 0)

    assert cart.is_empty
    assert "p1" not in cart


def test_negative_quantities_are_rejected():
    cart = Cart()
    with pytest.raises(ValidationError):
        cart.set_quantity(_product(), -1)
    with pytest.raises(ValidationError):
        cart.add_line(_product(), 0)


def test_sales_service_cart_helpers_use_current_stock(repo):
    product = InventoryService(repo).add_product("Sugar", 4, "kilo", 1.0, 3.0)
    sales = SalesService(repo)
    cart = sales.new_cart()

    sales.add_to_cart(cart, product.id)
    sales.set_cart_quantity(cart, product.id, 4)

    assert cart.lines() == {product.id: 4}
    assert sales.cart_total(cart) == 12.0
    with pytest.raises(InsufficientStockError):
        sales.set_cart_quantity(cart, product.id, 5)
    with pytest.raises(NotFoundError):
        sales.add_to_cart(cart, "missing")


def test_cart_keeps_insertion_order():
    cart = Cart()
    a = _product()
    b = Product(id="p2", name="Tea", quantity=1, unit=SaleUnit.BOX, purchase_price=1.0, sell_price=2.0)
    cart.add_line(b)
    cart.add_line(a)

    assert [pid for pid, _ in cart] == ["p2", "p1"]


@pytest.mark.parametrize("qty", ["two", 1.5, "nan", float("inf"), None, True])
def test_non_whole_quantities_are_validation_errors(qty):
    cart = Cart()
    with pytest.raises(ValidationError):
        cart.add_line(_product(), qty)
    with pytest.raises(ValidationError):
        cart.set_quantity(_product(), qty)
    assert cart.is_empty


def test_whole_number_input_is_normalised_to_int():
    cart = Cart()
    cart.set_quantity(_product(), "2")
    cart.add_line(_product(), 1.0)

    assert cart.lines() == {"p1": 3}


def test_remove_line_and_clear():
    cart = Cart()
    a = _product()
    b = Product(id="p2", name="Tea", quantity=1, unit=SaleUnit.BOX, purchase_price=1.0, sell_price=2.0)
    cart.add_line(a, 2)
    cart.add_line(b)

    cart.remove_line("p1")
    cart.remove_line("missing")
    assert cart.lines() == {"p2": 1}

    cart.clear()
    assert cart.is_empty
    assert len(cart) == 0
