"""
Ürün filtreleme ve sıralama.
Yasaklı terim, arama, kategori/tedarikçi filtrelerini uygular ve sonucu sıralar.
"""
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterable, List, Tuple

from katalog.config import get_settings
from katalog.logger import get_logger
from katalog.models import Product
from katalog.search.turkish import enhanced_turkish_search, normalize_turkish

logger = get_logger(__name__)

ALL = "all"


@dataclass(frozen=True)
class FilterState:
    """
    Katalog ekranının filtre durumu.
    Kategori ve tedarikçi aynı 'company' alanı üzerinde çalışır.
    """
    search_term: str = ""
    category: str = ALL
    supplier: str = ALL
    sort_by: str = ""
    show_top_cheapest: bool = False
    restricted_terms: Tuple[str, ...] = field(default_factory=tuple)


def _collation_key(text: str) -> Tuple[str, str]:
    # Önce aksan/harf büyüklüğü duyarsız, eşitlikte orijinal metin
    return (normalize_turkish(text).casefold(), text)


SORTERS: Dict[str, Tuple[Callable[[Product], object], bool]] = {
    "name": (lambda p: _collation_key(p.name), False),
    "stock_code": (lambda p: _collation_key(p.stock_code), False),
    "shelf_price_asc": (lambda p: p.shelf_price_incl_tax, False),
    "shelf_price_desc": (lambda p: p.shelf_price_incl_tax, True),
    "list_price_asc": (lambda p: p.list_price_incl_tax, False),
    "list_price_desc": (lambda p: p.list_price_incl_tax, True),
}


def normalize_restricted_terms(terms: Iterable[str]) -> Tuple[str, ...]:
    """Boş terimleri atar, kalanları küçük harfe çevirir."""
    return tuple(t.strip().lower() for t in terms if t and t.strip())


def is_product_restricted(product: Product, restricted_terms: Iterable[str]) -> bool:
    """Ürün adı, stok kodu veya firmasında yasaklı terim geçiyor mu?"""
    terms = normalize_restricted_terms(restricted_terms)
    if not terms:
        return False

    searchable_text = " ".join([product.name, product.stock_code, product.company]).lower()
    return any(term in searchable_text for term in terms)


def _unique_companies(products: Iterable[Product], restricted_terms: Iterable[str]) -> List[str]:
    terms = normalize_restricted_terms(restricted_terms)
    seen = []
    for product in products:
        company = product.company
        if not company or not company.strip() or company in seen:
            continue
        if any(term in company.lower() for term in terms):
            continue
        seen.append(company)
    return seen


def get_categories(products: Iterable[Product], restricted_terms: Iterable[str] = ()) -> List[str]:
    """Kategori seçenekleri (firma alanı)."""
    return _unique_companies(products, restricted_terms)


def get_suppliers(products: Iterable[Product], restricted_terms: Iterable[str] = ()) -> List[str]:
    """Tedarikçi seçenekleri (kategori ile aynı firma alanı)."""
    return _unique_companies(products, restricted_terms)


def sort_products(products: List[Product], sort_by: str) -> List[Product]:
    """Bilinmeyen sıralama anahtarında liste olduğu gibi döner."""
    sorter = SORTERS.get(sort_by)
    if sorter is None:
        if sort_by:
            logger.debug(f"Bilinmeyen sıralama anahtarı yok sayıldı: {sort_by}")
        return list(products)

    key, reverse = sorter
    return sorted(products, key=key, reverse=reverse)


def filter_products(products: List[Product], state: FilterState) -> List[Product]:
    """
    Filtre durumunu ürün listesine uygular. Giriş listesi değiştirilmez.

    Sıra:
    1. Yasaklı terim içeren ürünler çıkarılır.
    2. Arama terimi ad veya stok kodunda aranır.
    3. Kategori ve tedarikçi filtreleri (firma alanı) uygulanır.
    4. Sıralama anahtarına göre sıralanır.
    5. 'En ucuzlar' seçiliyse raf fiyatına göre yeniden sıralanıp ilk N alınır.
    """
    terms = normalize_restricted_terms(state.restricted_terms)

    filtered = []
    for product in products:
        if terms and is_product_restricted(product, terms):
            continue

        matches_search = (
            enhanced_turkish_search(state.search_term, product.name)
            or enhanced_turkish_search(state.search_term, product.stock_code)
        )
        matches_category = state.category == ALL or product.company == state.category
        matches_supplier = state.supplier == ALL or product.company == state.supplier

        if matches_search and matches_category and matches_supplier:
            filtered.append(product)

    filtered = sort_products(filtered, state.sort_by)

    if state.show_top_cheapest:
        top_n = get_settings().TOP_CHEAPEST_COUNT
        filtered = sorted(filtered, key=lambda p: p.shelf_price_incl_tax)[:top_n]

    return filtered
