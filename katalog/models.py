"""
Veri modeli tanımları.
Projede kullanılan temel veri yapılarını içerir: Product, ProductVariant,
RestrictedTerm, CartItem ve Order.
"""
from dataclasses import dataclass, field
from datetime import datetime
from typing import List, Optional, Dict, Any


CURRENCIES = ("USD", "EUR", "TL")
RESTRICTED_TERM_TYPES = ("keyword", "company", "product")
DISCOUNT_TIERS = (0, 5, 10, 15)


@dataclass
class Product:
    """
    Katalogdaki bir ürün satırı.
    Fiyat alanları her zaman sayısaldır; kaynakta boş olan değerler 0 olur.
    """
    stock_code: str = ""
    company: str = ""
    name: str = ""
    unit: str = ""
    shelf_price_incl_tax: float = 0.0     # raf fiyatı (KDV dahil)
    purchase_discount_rate: float = 0.0   # alış iskonto oranı
    list_price_incl_tax: float = 0.0      # liste fiyatı (KDV dahil)

    # İndirimli fiyatlar; isimlerine rağmen yüzde değil, tutar olarak saklanır
    discount_5: float = 0.0
    discount_10: float = 0.0
    discount_15: float = 0.0

    tax_rate: float = 0.0                 # KDV %
    currency: str = "USD"
    image_url: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "stock_code": self.stock_code,
            "company": self.company,
            "name": self.name,
            "unit": self.unit,
            "shelf_price_incl_tax": self.shelf_price_incl_tax,
            "purchase_discount_rate": self.purchase_discount_rate,
            "list_price_incl_tax": self.list_price_incl_tax,
            "discount_5": self.discount_5,
            "discount_10": self.discount_10,
            "discount_15": self.discount_15,
            "tax_rate": self.tax_rate,
            "currency": self.currency,
            "image_url": self.image_url,
        }


@dataclass
class ProductVariant:
    """
    Yalnızca renk/beden bakımından ayrışan ürünlerin tek kart altında toplanmış hali.
    Hesaplama sırasında üretilir, saklanmaz.
    """
    base_product: Product
    variants: List[Product] = field(default_factory=list)
    variant_options: List[str] = field(default_factory=list)


@dataclass
class RestrictedTerm:
    """Yönetici tarafından tanımlanan yasaklı terim."""
    id: int
    term: str
    type: str = "keyword"
    description: Optional[str] = None
    created_by: str = ""
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class CartItem:
    """
    Sepetteki bir ürün.
    Aynı stok kodu farklı varyantlarla eklenebildiği için variant_id ayrı tutulur.
    """
    product: Product
    cart_id: str
    variant_id: str
    quantity: int = 1
    applied_discount: int = 0
    selected_variant: Optional[str] = None


@dataclass
class Order:
    """Onay sürecindeki sipariş."""
    id: int
    user_id: str
    items: List[Dict[str, Any]] = field(default_factory=list)
    billing_info: Dict[str, Any] = field(default_factory=dict)
    total_amount: float = 0.0
    status: str = "pending"
    created_at: datetime = field(default_factory=datetime.now)
    approved_at: Optional[datetime] = None
    approved_by: Optional[str] = None


@dataclass
class SearchRecord:
    """Kaydedilmiş bir arama sorgusu."""
    id: int
    query_text: str
    results_count: int = 0
    user_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)


@dataclass
class UnsuccessfulSearch:
    """Sonuç döndürmeyen arama; yönetici panelinde incelenir."""
    id: int
    search_query: str
    user_id: Optional[str] = None
    created_at: datetime = field(default_factory=datetime.now)
    is_resolved: bool = False
    resolved_at: Optional[datetime] = None
    resolved_by: Optional[str] = None
    admin_notes: str = ""
