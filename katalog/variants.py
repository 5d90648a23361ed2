"""
Ürün varyantı tespiti.
Yalnızca renk/beden kelimesiyle ayrışan ürünleri tek kart altında toplar.
"""
import re
from typing import Dict, List, Union

from katalog.logger import get_logger
from katalog.models import Product, ProductVariant
from katalog.search.turkish import normalize_turkish

logger = get_logger(__name__)

VARIANT_KEYWORDS = [
    "SIYAH", "BEYAZ", "GRI", "KIRMIZI", "MAVI", "YESIL", "SARI", "KAHVE", "PEMBE",
    "BLACK", "WHITE", "GREY", "GRAY", "RED", "BLUE", "GREEN", "YELLOW", "BROWN", "PINK",
    "SMALL", "MEDIUM", "LARGE", "XL", "XXL", "S", "M", "L",
]

DEFAULT_VARIANT_LABEL = "Standart"
MIN_BASE_NAME_LENGTH = 3

_KEYWORD_PATTERNS = [
    re.compile(rf"\b{re.escape(keyword)}\b", re.IGNORECASE)
    for keyword in VARIANT_KEYWORDS
]


def extract_base_name(name: str) -> str:
    """
    Varyant kelimelerini çıkararak temel ürün adını bulur.
    Sonuç çok kısaysa ya da hiçbir şey çıkarılmadıysa adın tamamı kullanılır.
    """
    original = name.upper()
    base_name = original

    for pattern in _KEYWORD_PATTERNS:
        base_name = pattern.sub("", base_name).strip()

    base_name = re.sub(r"\s+", " ", base_name).strip()

    if len(base_name) < MIN_BASE_NAME_LENGTH or base_name == original.strip():
        base_name = original.strip()

    return base_name


def variant_label(name: str, base_name: str) -> str:
    """Ürün adında olup temel adda olmayan varyant kelimelerinden etiket üretir."""
    words = name.upper().split()
    base_words = base_name.upper().split()

    variant_words = [
        word for word in words
        if word not in base_words and _is_variant_word(normalize_turkish(word))
    ]
    return " ".join(variant_words) if variant_words else DEFAULT_VARIANT_LABEL


def _is_variant_word(word: str) -> bool:
    return any(word in keyword or keyword in word for keyword in VARIANT_KEYWORDS)


def detect_product_variants(products: List[Product]) -> List[Union[Product, ProductVariant]]:
    """
    Ürünleri (temel ad, firma) anahtarına göre gruplar.
    Tek elemanlı gruplar düz ürün olarak, diğerleri ProductVariant olarak döner.
    Çıktı sırası her grubun ilk görüldüğü sıradır.
    """
    groups: Dict[str, List[Product]] = {}
    base_names: Dict[str, str] = {}

    for product in products:
        if not product.name:
            logger.warning(f"Adı boş ürün varyant gruplamasına alınmadı: {product.stock_code!r}")
            continue

        base_name = extract_base_name(product.name)
        group_key = f"{base_name}-{product.company}"

        if group_key not in groups:
            groups[group_key] = []
            base_names[group_key] = base_name
        groups[group_key].append(product)

    result: List[Union[Product, ProductVariant]] = []
    for group_key, group_products in groups.items():
        if len(group_products) == 1:
            result.append(group_products[0])
            continue

        base_name = base_names[group_key]
        options = [variant_label(p.name, base_name) for p in group_products]

        if len(set(options)) < len(options):
            logger.warning(
                f"Olası hatalı gruplama '{group_key}': yinelenen varyant etiketleri {options}"
            )

        result.append(ProductVariant(
            base_product=group_products[0],
            variants=list(group_products),
            variant_options=options,
        ))

    return result


def is_product_variant(item: Union[Product, ProductVariant]) -> bool:
    return isinstance(item, ProductVariant)
