"""Tests for the JSON-file-backed stock service."""

import json

import pytest

from shophub.domain.exceptions import StorageError, ValidationError
from shophub.domain.model.value_objects import Money
from shophub.infrastructure.persistence.json_stock_service import JsonStockService
from tests.fakes import make_product

CATALOGUE = [
    {"id": "0001", "description": "40 inch TV", "image": "0001.jpg", "price": "269.00", "stock": 10},
    {"id": "0002", "description": "DAB Radio", "image": "0002.jpg", "price": "29.99", "stock": 3},
    {"id": "0003", "description": "Smart Radio", "image": "0003.jpg", "price": "49.99", "stock": 0},
]


@pytest.fixture
def catalogue(tmp_path):
    path = tmp_path / "products.json"
    path.write_text(json.dumps(CATALOGUE), encoding="utf-8")
    return path


def _line(product_id: str, quantity: int):
    return make_product(product_id, quantity=quantity)


class TestSearch:

    def test_exact_id(self, catalogue):
        found = JsonStockService(catalogue).search_product("0002")
        assert [p.id for p in found] == ["0002"]
        assert found[0].unit_price == Money.of("29.99")
        assert found[0].stock_quantity == 3

    def test_description_substring_is_case_insensitive(self, catalogue):
        found = JsonStockService(catalogue).search_product("RADIO")
        assert [p.id for p in found] == ["0002", "0003"]

    def test_blank_keyword(self, catalogue):
        assert JsonStockService(catalogue).search_product("  ") == []

    def test_get_product(self, catalogue):
        service = JsonStockService(catalogue)
        assert service.get_product("0001").description == "40 inch TV"
        assert service.get_product("9999") is None


class TestPurchase:

    def test_decrements_all_lines(self, catalogue):
        service = JsonStockService(catalogue)
        assert service.purchase_stocks([_line("0001", 2), _line("0002", 3)]) == []
        assert service.get_product("0001").stock_quantity == 8
        assert service.get_product("0002").stock_quantity == 0

    def test_persists_to_file(self, catalogue):
        JsonStockService(catalogue).purchase_stocks([_line("0001", 1)])
        raw = json.loads(catalogue.read_text(encoding="utf-8"))
        assert raw[0]["stock"] == 9
        assert raw[0]["price"] == "269.00"

    def test_shortage_is_all_or_nothing(self, catalogue):
        service = JsonStockService(catalogue)
        shortages = service.purchase_stocks([_line("0001", 2), _line("0002", 4)])
        assert [(p.id, p.stock_quantity, p.ordered_quantity) for p in shortages] == [("0002", 3, 4)]
        assert service.get_product("0001").stock_quantity == 10
        assert service.get_product("0002").stock_quantity == 3

    def test_unknown_product_is_short(self, catalogue):
        shortages = JsonStockService(catalogue).purchase_stocks([_line("0999", 1)])
        assert shortages[0].stock_quantity == 0


class TestRelease:

    def test_release_restores_stock(self, catalogue):
        service = JsonStockService(catalogue)
        lines = [_line("0001", 4)]
        service.purchase_stocks(lines)
        service.release_stocks(lines)
        assert service.get_product("0001").stock_quantity == 10

    def test_release_unknown_rejected(self, catalogue):
        with pytest.raises(ValidationError, match="unknown product"):
            JsonStockService(catalogue).release_stocks([_line("0999", 1)])


class TestFileHandling:

    def test_missing_file_is_created_empty(self, tmp_path):
        path = tmp_path / "new" / "products.json"
        service = JsonStockService(path)
        assert path.read_text(encoding="utf-8") == "[]"
        assert service.search_product("tv") == []

    def test_corrupt_file(self, tmp_path):
        path = tmp_path / "products.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(StorageError, match="Cannot read catalogue"):
            JsonStockService(path).get_product("0001")

