from dataclasses import replace

import pytest

from conftest import StubAi
from dukan.domain.errors import GenerationError, NotFoundError, ValidationError
from dukan.domain.models import SaleUnit
from dukan.services.customer_service import CustomerService
from dukan.services.inventory_service import InventoryService


def test_add_product_persists_and_keeps_insertion_order(repo):
    inv = InventoryService(repo)
    a = inv.add_product("Tomatoes", 5, "kilo", 1.5, 2.0)
    b = inv.add_product("Cheese", 2, SaleUnit.BOX, 3.0, 4.0)

    listed = inv.list_products()
    assert [p.id for p in listed] == [a.id, b.id]
    assert listed[0].unit is SaleUnit.KILO
    assert inv.get_product(b.id) == b


def test_add_product_with_empty_name_changes_nothing(repo):
    inv = InventoryService(repo)
    inv.add_product("Tomatoes", 5, "kilo", 1.5, 2.0)

    with pytest.raises(ValidationError):
        inv.add_product("   ", 5, "kilo", 1.5, 2.0)

    assert len(inv.list_products()) == 1


@pytest.mark.parametrize(
    "quantity, unit, purchase, sell",
    [
        (None, "box", 1.0, 2.0),
        ("five", "box", 1.0, 2.0),
        (1.5, "box", 1.0, 2.0),
        (-1, "box", 1.0, 2.0),
        (1, "crate", 1.0, 2.0),
        (1, "box", "", 2.0),
        (1, "box", 1.0, -2.0),
        (1, "box", 1.0, "nan"),
        (1, "box", float("nan"), 2.0),
        (1, "box", 1.0, "inf"),
        (1, "box", float("inf"), 2.0),
        ("nan", "box", 1.0, 2.0),
        ("inf", "box", 1.0, 2.0),
        (float("-inf"), "box", 1.0, 2.0),
    ],
)
def test_add_product_rejects_invalid_fields(repo, quantity, unit, purchase, sell):
    inv = InventoryService(repo)
    with pytest.raises(ValidationError):
        inv.add_product("Olives", quantity, unit, purchase, sell)
    assert inv.list_products() == []


def test_get_product_raises_not_found(repo):
    with pytest.raises(NotFoundError):
        InventoryService(repo).get_product("nope")


def test_search_products_is_case_sensitive_and_can_hide_empty_stock(repo):
    inv = InventoryService(repo)
    inv.add_product("Green Apples", 0, "kilo", 1.0, 2.0)
    red = inv.add_product("Red Apples", 3, "kilo", 1.0, 2.0)

    assert len(inv.search_products("Apples")) == 2
    assert inv.search_products("apples") == []
    assert inv.search_products("Apples", in_stock_only=True) == [red]


def test_generate_product_image_returns_data_uri(repo):
    ai = StubAi(image=b"png-bytes")
    inv = InventoryService(repo, ai)

    uri = inv.generate_product_image("Dates")

    assert uri == "data:image/png;base64,cG5nLWJ5dGVz"
    assert "Dates" in ai.image_prompts[0]


def test_generate_product_image_surfaces_generation_errors(repo):
    inv = InventoryService(repo, StubAi(fail=GenerationError("quota")))
    with pytest.raises(GenerationError):
        inv.generate_product_image("Dates")
    with pytest.raises(ValidationError):
        inv.generate_product_image("")


def test_add_customer_starts_without_debt(repo):
    customers = CustomerService(repo)
    c = customers.add_customer(" Ali ", "0999 123")

    assert c.name == "Ali"
    assert c.debt == 0
    assert customers.list_customers() == [c]


@pytest.mark.parametrize("name, phone", [("", "0999"), ("Ali", ""), ("  ", "  ")])
def test_add_customer_requires_name_and_phone(repo, name, phone):
    customers = CustomerService(repo)
    with pytest.raises(ValidationError):
        customers.add_customer(name, phone)
    assert customers.list_customers() == []


def test_total_outstanding_debt_ignores_credit_balances(repo):
    customers = CustomerService(repo)
    a = customers.add_customer("Ali", "0999")
    b = customers.add_customer("Sara", "0888")
    customers.add_customer("Omar", "0777")
    repo.save_customers([replace(c, debt={a.id: 7.5, b.id: -3.0}.get(c.id, 0.0)) for c in repo.list_customers()])

    assert customers.total_outstanding_debt() == 7.5


def test_find_customers_by_name_substring(repo):
    customers = CustomerService(repo)
    ali = customers.add_customer("Ali", "0999")

    assert customers.find_by_name_substring("Al") == [ali]
    assert customers.find_by_name_substring("xyz") == []
    assert customers.find_by_name_substring("al") == []
