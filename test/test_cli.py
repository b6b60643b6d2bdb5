from pathlib import Path

import pytest

from conftest import StubAi
from dukan.application.container import build_container
from dukan.domain.errors import StoreNotConfiguredError
from dukan.main import _build_parser, run


def _app(tmp_path: Path):
    return build_container(tmp_path / "cli.db", ai=StubAi())


def test_commands_require_store_setup(tmp_path: Path):
    app = _app(tmp_path)
    with pytest.raises(StoreNotConfiguredError):
        run(app, _build_parser().parse_args(["summary"]))
    app.tasks.shutdown()


def test_setup_then_summary_and_invoice(tmp_path: Path, capsys):
    app = _app(tmp_path)
    parser = _build_parser()
    assert run(app, parser.parse_args(["setup", "Corner", "0111"])) == 0

    product = app.inventory.add_product("Tea", 4, "box", 1.0, 2.0)
    sale = app.sales.checkout({product.id: 2}, amount_paid=4)

    assert run(app, parser.parse_args(["summary"])) == 0
    assert run(app, parser.parse_args(["invoice", sale.id, "--xlsx", str(tmp_path / "inv.xlsx")])) == 0

    out = capsys.readouterr().out
    assert "Store saved: Corner (0111)" in out
    assert "Sales: 1" in out
    assert "Total: 4.00" in out
    assert (tmp_path / "inv.xlsx").exists()
    app.tasks.shutdown()


def test_sort_inventory_prints_new_order(tmp_path: Path, capsys):
    app = _app(tmp_path)
    parser = _build_parser()
    run(app, parser.parse_args(["setup", "Corner", "0111"]))
    for name in ["Soap", "Apple"]:
        app.inventory.add_product(name, 1, "box", 1.0, 2.0)

    assert run(app, parser.parse_args(["sort-inventory"])) == 0
    assert capsys.readouterr().out.splitlines()[-2:] == ["Apple", "Soap"]
    app.tasks.shutdown()
