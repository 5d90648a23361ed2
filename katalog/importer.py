"""
Veri içe aktarma modülü.
Yüklenen Excel dosyasını çözümleyip Product modellerine dönüştürür.
Para birimi tespiti, yerel biçimli sayı ayrıştırma ve başlık satırı tespiti içerir.
"""
import re
from io import BytesIO
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from katalog.config import get_settings
from katalog.logger import get_logger
from katalog.models import Product
from katalog.search.turkish import normalize_turkish

logger = get_logger(__name__)

# Varsayılan sütun sırası (başlık yoksa ya da tanınmazsa kullanılır)
POSITIONAL_FIELDS = [
    "stock_code",               # 1. Stok Kodu
    "company",                  # 2. Firma
    "name",                     # 3. Ürün Adı
    "unit",                     # 4. Birim
    "shelf_price_incl_tax",     # 5. Raf Fiyatı KDV Dahil
    "purchase_discount_rate",   # 6. Alış İskonto Oranı
    "list_price_incl_tax",      # 7. Liste Fiyatı KDV Dahil
    "discount_5",               # 8. İndirim %5
    "discount_10",              # 9. İndirim %10
    "discount_15",              # 10. İndirim %15
    "tax_rate",                 # 11. KDV %
]

# Alan -> olası Excel başlıkları
COLUMN_MAPPING = {
    "stock_code": ["stok kodu", "stok", "stock code", "stock_code", "sku"],
    "company": ["firma", "marka", "company", "brand"],
    "name": ["ürün adı", "urun adi", "ürün", "product name", "name"],
    "unit": ["birim", "unit"],
    "shelf_price_incl_tax": ["raf fiyatı kdv dahil", "raf fiyatı", "raf fiyati", "shelf price"],
    "purchase_discount_rate": ["alış iskonto oranı", "alis iskonto orani", "iskonto oranı", "purchase discount"],
    "list_price_incl_tax": ["liste fiyatı kdv dahil", "liste fiyatı", "liste fiyati", "list price"],
    "discount_5": ["indirim %5", "%5 indirim", "indirim 5", "discount 5"],
    "discount_10": ["indirim %10", "%10 indirim", "indirim 10", "discount 10"],
    "discount_15": ["indirim %15", "%15 indirim", "indirim 15", "discount 15"],
    "tax_rate": ["kdv %", "kdv", "kdv oranı", "tax", "vat"],
}

# Para birimi tespiti için örneklenen sütunlar (0 tabanlı)
PRICE_SAMPLE_COLUMNS = [4, 6, 7, 8, 9]
CURRENCY_SAMPLE_ROWS = 10

# Öncelik sırası önemli: USD, EUR, TL
CURRENCY_PATTERNS = [
    ("USD", re.compile(r"[$]|usd|dollar", re.IGNORECASE)),
    ("EUR", re.compile(r"[€]|eur|euro", re.IGNORECASE)),
    ("TL", re.compile(r"[₺]|tl|lira", re.IGNORECASE)),
]

CURRENCY_SYMBOLS = {"USD": "$", "EUR": "€", "TL": "₺"}

_NUMBER_PATTERN = re.compile(r"\d+(?:\.\d+)?|\.\d+")


def parse_excel_to_products(file_content: bytes) -> List[Product]:
    """
    Excel içeriğini Product listesine çevirir.
    Okunamayan dosyalar için boş liste döner.
    """
    try:
        df_raw = pd.read_excel(BytesIO(file_content), header=None, dtype=object)
    except Exception as e:
        logger.error(f"Excel okuma hatası: {e}")
        return []

    if df_raw.empty:
        return []

    rows = [[_cell(v) for v in row] for row in df_raw.itertuples(index=False, name=None)]
    return parse_rows(rows)


def parse_rows(rows: Sequence[Sequence[Any]]) -> List[Product]:
    """
    Ham satırları (liste listesi) Product listesine çevirir.
    Bir yükleme içinde tek para birimi kullanılır.
    """
    currency = detect_currency(rows)
    logger.info(f"Algılanan para birimi: {currency}")

    header_index = _detect_header_row(rows)
    if header_index is not None:
        col_map = _build_column_map(rows[header_index])
        data_rows = rows[header_index + 1:]
    else:
        col_map = {field: i for i, field in enumerate(POSITIONAL_FIELDS)}
        data_rows = rows

    products = []
    skipped = 0
    for row in data_rows:
        if _is_empty_row(row):
            continue

        # Başlık satırını atla
        first_cell = _text(row[0] if row else "").upper()
        if "STOK" in first_cell or "KODU" in first_cell:
            skipped += 1
            continue

        products.append(row_to_product(row, col_map, currency))

    if skipped:
        logger.debug(f"{skipped} başlık satırı atlandı")
    logger.info(f"{len(products)} ürün okundu")
    return products


def row_to_product(row: Sequence[Any], col_map: Dict[str, int], currency: str) -> Product:
    """Tek satırı Product modeline dönüştürür."""
    def get(field: str) -> Any:
        idx = col_map.get(field)
        if idx is None or idx >= len(row):
            return None
        return row[idx]

    return Product(
        stock_code=_text(get("stock_code")),
        company=_text(get("company")),
        name=_text(get("name")),
        unit=_text(get("unit")),
        shelf_price_incl_tax=parse_price(get("shelf_price_incl_tax")),
        purchase_discount_rate=parse_price(get("purchase_discount_rate")),
        list_price_incl_tax=parse_price(get("list_price_incl_tax")),
        discount_5=parse_price(get("discount_5")),
        discount_10=parse_price(get("discount_10")),
        discount_15=parse_price(get("discount_15")),
        tax_rate=parse_price(get("tax_rate")),
        currency=currency,
    )


def detect_currency(rows: Sequence[Sequence[Any]]) -> str:
    """
    Fiyat sütunlarındaki sembollere bakarak para birimini bulur.
    Öncelik: USD -> EUR -> TL. Hiçbiri yoksa varsayılan para birimi.
    """
    sample_values = []
    for row in rows[:CURRENCY_SAMPLE_ROWS]:
        if not row or len(row) <= 6:
            continue
        for col in PRICE_SAMPLE_COLUMNS:
            if col < len(row) and _text(row[col]):
                sample_values.append(_text(row[col]))

    for code, pattern in CURRENCY_PATTERNS:
        if any(pattern.search(value) for value in sample_values):
            return code

    return get_settings().DEFAULT_CURRENCY


def currency_symbol(currency: Optional[str]) -> str:
    return CURRENCY_SYMBOLS.get(currency or "", "$")


def parse_price(value: Any) -> float:
    """
    Fiyat değerini sayıya çevirir; sonuç her zaman negatif olmayan bir float'tır.
    '1.234,56 ₺', '$1,234.56', '12,5' gibi biçimleri anlar.
    """
    if value is None:
        return 0.0
    if isinstance(value, bool):
        return 0.0
    if isinstance(value, (int, float)):
        if pd.isna(value):
            return 0.0
        return abs(float(value))

    text = re.sub(r"[^\d.,]", "", str(value))
    if not text:
        return 0.0

    if "," in text and "." in text:
        # Son görülen ayraç ondalık ayracıdır
        if text.rfind(",") > text.rfind("."):
            text = text.replace(".", "").replace(",", ".")
        else:
            text = text.replace(",", "")
    elif "," in text:
        text = text.replace(",", ".")

    match = _NUMBER_PATTERN.search(text)
    if not match:
        return 0.0
    try:
        return float(match.group())
    except ValueError:
        return 0.0


# ==========================================
# İç yardımcı fonksiyonlar
# ==========================================

def _cell(value: Any) -> Any:
    """pandas NaN değerlerini None'a çevirir."""
    if value is None:
        return None
    try:
        if pd.isna(value):
            return None
    except (TypeError, ValueError):
        pass
    return value


def _text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value).strip()


def _is_empty_row(row: Sequence[Any]) -> bool:
    return not row or all(not _text(cell) for cell in row)


def _header_key(value: Any) -> str:
    """Başlıkları Türkçe karakterlerden arındırıp küçük harfe çevirir."""
    return normalize_turkish(_text(value)).lower()


def _detect_header_row(rows: Sequence[Sequence[Any]], max_scan_rows: int = 20) -> Optional[int]:
    """
    Başlık satırını tespit eder.
    En az iki bilinen başlık içeren ilk en iyi satırın indeksini döndürür.
    """
    keywords = {_header_key(k) for keys in COLUMN_MAPPING.values() for k in keys}

    best_row_idx = None
    max_matches = 0
    for i, row in enumerate(rows[:max_scan_rows]):
        values = [_header_key(v) for v in row if _text(v)]
        matches = sum(1 for v in values if v in keywords)
        if matches > max_matches:
            max_matches = matches
            best_row_idx = i

    if max_matches >= 2:
        return best_row_idx
    return None


def _build_column_map(header: Sequence[Any]) -> Dict[str, int]:
    """
    Başlık satırından alan -> sütun indeksi eşlemesi üretir.
    Başlığı tanınmayan alanlar, sütunu başka bir alana verilmemişse
    varsayılan sıradaki yerinden okunur.
    """
    keys = [_header_key(h) for h in header]
    result = {}
    for field in POSITIONAL_FIELDS:
        for candidate in COLUMN_MAPPING[field]:
            candidate = _header_key(candidate)
            if candidate in keys:
                result[field] = keys.index(candidate)
                break

    used = set(result.values())
    for index, field in enumerate(POSITIONAL_FIELDS):
        if field not in result and index not in used:
            result[field] = index
            used.add(index)

    missing = [f for f in POSITIONAL_FIELDS if f not in result]
    if missing:
        logger.debug(f"Sütunu bulunamayan alanlar: {missing}")
    return result
