"""Ürün karşılaştırma listesi (stok koduna göre, en fazla N ürün)."""
from typing import List, Optional

from katalog.config import get_settings
from katalog.models import Product


class CompareList:

    def __init__(self, max_items: Optional[int] = None):
        self.max_items = get_settings().MAX_COMPARE_ITEMS if max_items is None else max_items
        self.products: List[Product] = []

    def toggle(self, product: Product) -> bool:
        """Listede varsa çıkarır, yoksa (yer varsa) ekler. Ürün listede mi döner."""
        if self.contains(product):
            self.products = [p for p in self.products if p.stock_code != product.stock_code]
            return False
        if len(self.products) < self.max_items:
            self.products.append(product)
            return True
        return False

    def contains(self, product: Product) -> bool:
        return any(p.stock_code == product.stock_code for p in self.products)

    def clear(self) -> None:
        self.products = []
