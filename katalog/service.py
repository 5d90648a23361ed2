"""
İş servis katmanı; her servis tek bir sorumluluğa sahiptir.
"""
from dataclasses import dataclass, field, replace
from io import BytesIO
from typing import List, Optional, Tuple, Union

from katalog.config import get_settings
from katalog.exporter import export_to_excel, generate_excel_bytes, quick_check
from katalog.filters import FilterState, filter_products, get_categories, get_suppliers
from katalog.importer import parse_excel_to_products
from katalog.logger import get_logger
from katalog.models import Product, ProductVariant
from katalog.restrictions import RestrictedTermStore
from katalog.search.suggestions import find_similar_product_names
from katalog.variants import detect_product_variants

logger = get_logger(__name__)

EDITABLE_PRICE_FIELDS = (
    "shelf_price_incl_tax",
    "list_price_incl_tax",
    "discount_5",
    "discount_10",
    "discount_15",
)


@dataclass
class BrowseResult:
    """Katalog ekranında gösterilecek sonuç."""
    cards: List[Union[Product, ProductVariant]] = field(default_factory=list)
    products: List[Product] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


class ImportService:
    """
    İçe aktarma servisi: dış veriyi iç modele dönüştürür.
    Yalnızca bellek içi işlem yapar.
    """
    def import_from_excel(self, file_content: bytes) -> List[Product]:
        return parse_excel_to_products(file_content)


class CatalogService:
    """
    Katalog servisi: filtreleme, varyant gruplama ve öneri hattını çalıştırır.
    Yasaklı terimler her çağrıda depodan yeniden okunur.
    """
    def __init__(
        self,
        products: Optional[List[Product]] = None,
        restricted_terms: Optional[RestrictedTermStore] = None
    ):
        self.products: List[Product] = list(products or [])
        self.restricted_terms = restricted_terms or RestrictedTermStore()

    def replace_products(self, products: List[Product]) -> None:
        self.products = list(products)
        logger.info(f"Katalog yüklendi: {len(self.products)} ürün")

    def add_products(self, products: List[Product]) -> None:
        self.products.extend(products)
        logger.info(f"{len(products)} ürün eklendi (toplam {len(self.products)})")

    def categories(self) -> List[str]:
        return get_categories(self.products, self.restricted_terms.terms())

    def suppliers(self) -> List[str]:
        return get_suppliers(self.products, self.restricted_terms.terms())

    def browse(self, state: FilterState) -> BrowseResult:
        state = replace(state, restricted_terms=self.restricted_terms.terms())
        filtered = filter_products(self.products, state)
        cards = detect_product_variants(filtered)

        suggestions = []
        if not cards and self.products and state.search_term.strip():
            suggestions = self.suggest(state.search_term)

        return BrowseResult(cards=cards, products=filtered, suggestions=suggestions)

    def suggest(self, search_term: str) -> List[str]:
        """Filtrelenmemiş tüm ürün adları üzerinden öneri üretir."""
        settings = get_settings()
        names = [p.name for p in self.products]
        return find_similar_product_names(
            search_term, names, settings.SUGGESTION_THRESHOLD, settings.MAX_SUGGESTIONS
        )

    # ==========================================
    # Yönetici işlemleri (fiyat, görsel, silme)
    # ==========================================

    def lookup(self, term: str = "") -> List[Product]:
        """Yönetim ekranı araması: stok kodu, ad veya firmada düz alt dize."""
        term = term.strip().lower()
        if not term:
            return list(self.products)
        return [
            p for p in self.products
            if term in p.stock_code.lower() or term in p.name.lower() or term in p.company.lower()
        ]

    def update_prices(self, stock_code: str, **prices: float) -> List[Product]:
        """
        Raf, liste ve indirimli fiyatları günceller.
        Aynı stok koduna sahip tüm ürünler güncellenir.
        """
        unknown = set(prices) - set(EDITABLE_PRICE_FIELDS)
        if unknown:
            raise ValueError(f"Düzenlenemeyen alanlar: {sorted(unknown)}")
        for field_name, value in prices.items():
            if value is None or value < 0:
                raise ValueError(f"Geçersiz fiyat ({field_name}): {value}")

        products = self._by_stock_code(stock_code)
        for product in products:
            for field_name, value in prices.items():
                setattr(product, field_name, float(value))
        logger.info(f"Fiyatlar güncellendi: {stock_code} {prices}")
        return products

    def set_image(self, stock_code: str, image_url: Optional[str]) -> List[Product]:
        products = self._by_stock_code(stock_code)
        for product in products:
            product.image_url = image_url or None
        logger.info(f"Görsel güncellendi: {stock_code}")
        return products

    def delete_product(self, stock_code: str) -> int:
        removed = self._by_stock_code(stock_code)
        self.products = [p for p in self.products if p.stock_code != stock_code]
        logger.info(f"Ürün silindi: {stock_code} ({len(removed)} kayıt)")
        return len(removed)

    def _by_stock_code(self, stock_code: str) -> List[Product]:
        products = [p for p in self.products if p.stock_code == stock_code]
        if not products:
            raise KeyError(stock_code)
        return products


class ExportService:
    """Dışa aktarma servisi: ürünleri dosyaya ya da bayt akışına yazar."""

    def export_data(self, products: List[Product], output_path: str = "output.xlsx", base_name: str = "") -> str:
        return export_to_excel(products, output_path, base_name)

    def get_excel_bytes(self, products: List[Product], base_name: str = "") -> Tuple[BytesIO, str]:
        """Web indirmesi için (bayt akışı, önerilen dosya adı) döndürür."""
        return generate_excel_bytes(products, base_name)

    def get_quick_report(self, products: List[Product]) -> dict:
        return quick_check(products)
