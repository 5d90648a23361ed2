"""Servis katmanı ve dışa aktarma testleri."""
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pandas as pd
import pytest

from katalog.exporter import EXPORT_COLUMNS, format_price, generate_excel_bytes, quick_check
from katalog.filters import FilterState
from katalog.models import Product, ProductVariant
from katalog.restrictions import RestrictedTermStore
from katalog.service import CatalogService, ExportService


def make(code, name, company="ACME", shelf=0.0, currency="TL"):
    return Product(stock_code=code, company=company, name=name, shelf_price_incl_tax=shelf, currency=currency)


PRODUCTS = [
    make("K-1", "KALEM SIYAH", shelf=5),
    make("K-2", "KALEM BEYAZ", shelf=6),
    make("S-1", "SILGI", shelf=2),
    make("D-1", "DEFTER", company="Kağıtçı", shelf=8),
]


class TestCatalogService:

    def test_browse_groups_variants(self):
        result = CatalogService(PRODUCTS).browse(FilterState())
        assert len(result.products) == 4
        assert len(result.cards) == 3
        assert isinstance(result.cards[0], ProductVariant)
        assert result.cards[0].variant_options == ["SIYAH", "BEYAZ"]
        assert result.suggestions == []

    def test_suggestions_when_nothing_found(self):
        result = CatalogService(PRODUCTS).browse(FilterState(search_term="DEFTERR"))
        assert result.cards == []
        assert result.suggestions == ["DEFTER"]

    def test_no_suggestions_for_empty_catalog(self):
        result = CatalogService([]).browse(FilterState(search_term="defter"))
        assert result.suggestions == []

    def test_restricted_terms_are_read_on_every_call(self):
        store = RestrictedTermStore()
        service = CatalogService(PRODUCTS, store)
        assert len(service.browse(FilterState()).products) == 4

        store.add("kalem", created_by="admin")
        result = service.browse(FilterState())
        assert [p.stock_code for p in result.products] == ["S-1", "D-1"]

        store.delete(store.list()[0].id)
        assert len(service.browse(FilterState()).products) == 4

    def test_categories_hide_restricted_companies(self):
        store = RestrictedTermStore()
        store.add("kağıtçı", "company")
        service = CatalogService(PRODUCTS, store)
        assert service.categories() == ["ACME"]
        assert service.suppliers() == ["ACME"]

    def test_replace_and_add_products(self):
        service = CatalogService()
        service.replace_products(PRODUCTS[:2])
        service.add_products(PRODUCTS[2:])
        assert len(service.products) == 4
        service.replace_products([])
        assert service.products == []


class TestCatalogAdmin:

    def _service(self):
        return CatalogService([
            make("K-1", "KALEM SIYAH", shelf=5),
            make("K-1", "KALEM SIYAH", company="Depo", shelf=5),
            make("S-1", "SILGI", shelf=2),
        ])

    def test_lookup(self):
        service = self._service()
        assert len(service.lookup("")) == 3
        assert [p.stock_code for p in service.lookup("silgi")] == ["S-1"]
        assert [p.company for p in service.lookup("depo")] == ["Depo"]

    def test_update_prices_changes_every_matching_product(self):
        service = self._service()
        updated = service.update_prices("K-1", shelf_price_incl_tax=7, discount_5=6.65)
        assert len(updated) == 2
        assert all(p.shelf_price_incl_tax == 7.0 for p in updated)
        assert all(p.discount_5 == pytest.approx(6.65) for p in updated)

        result = service.browse(FilterState(sort_by="shelf_price_desc"))
        assert result.products[0].shelf_price_incl_tax == 7.0

    @pytest.mark.parametrize("prices", [
        {"shelf_price_incl_tax": -1},
        {"tax_rate": 18},
        {"name": "yeni"},
    ])
    def test_update_prices_rejects_invalid(self, prices):
        service = self._service()
        with pytest.raises(ValueError):
            service.update_prices("S-1", **prices)
        assert service.lookup("silgi")[0].shelf_price_incl_tax == 2.0

    def test_unknown_stock_code(self):
        service = self._service()
        with pytest.raises(KeyError):
            service.update_prices("YOK", shelf_price_incl_tax=1)
        with pytest.raises(KeyError):
            service.set_image("YOK", "http://img")
        with pytest.raises(KeyError):
            service.delete_product("YOK")

    def test_set_and_clear_image(self):
        service = self._service()
        service.set_image("S-1", "https://cdn.example.com/silgi.jpg")
        assert service.lookup("silgi")[0].image_url == "https://cdn.example.com/silgi.jpg"
        service.set_image("S-1", "")
        assert service.lookup("silgi")[0].image_url is None

    def test_delete_product(self):
        service = self._service()
        assert service.delete_product("K-1") == 2
        assert [p.stock_code for p in service.products] == ["S-1"]


class TestExport:

    def test_excel_bytes_are_readable(self):
        output, file_name = generate_excel_bytes(PRODUCTS, base_name="liste.xlsx")
        assert file_name.startswith("liste_")
        assert file_name.endswith(".xlsx")

        df = pd.read_excel(output)
        assert list(df.columns) == [title for _, title in EXPORT_COLUMNS]
        assert len(df) == 4
        assert df["Stok Kodu"].tolist() == ["K-1", "K-2", "S-1", "D-1"]

    def test_filename_from_first_company(self):
        _, file_name = ExportService().get_excel_bytes(PRODUCTS)
        assert file_name.startswith("ACME_")

    def test_export_to_directory(self, tmp_path):
        path = ExportService().export_data(PRODUCTS, str(tmp_path) + "/")
        assert os.path.exists(path)
        assert len(pd.read_excel(path)) == 4

    def test_quick_check(self):
        products = PRODUCTS + [make("K-1", "", shelf=0, currency="USD")]
        report = quick_check(products)
        assert report["toplam_urun"] == 5
        assert report["raf_fiyati_sifir"] == 1
        assert report["liste_fiyati_sifir"] == 5
        assert report["adi_bos"] == 1
        assert report["yinelenen_stok_kodu"] == 1
        assert report["para_birimleri"] == ["TL", "USD"]

    def test_format_price(self):
        assert format_price(12.5, "EUR") == "€12.50"
        assert format_price(3, "TL") == "₺3.00"
        assert format_price(1, "") == "$1.00"
