"""
Sepet işlemleri.
Ürün ekleme, miktar güncelleme, kalem bazlı indirim ve toplam hesaplama.
"""
import time
import uuid
from typing import Any, Dict, List, Optional

from katalog.logger import get_logger
from katalog.models import CartItem, DISCOUNT_TIERS, Product

logger = get_logger(__name__)


def make_variant_id(product: Product, selected_variant: Optional[str] = None) -> str:
    """
    Sepet kalemini ayırt eden kimlik.
    Aynı stok kodu farklı varyantlarla eklendiğinde ayrı kalem oluşur.
    """
    if selected_variant:
        suffix = "-".join(selected_variant.split()).lower()
        return f"{product.stock_code or 'no-stock'}-{suffix}"
    return product.stock_code or f"fallback-{int(time.time() * 1000)}"


def discounted_price(item: CartItem) -> float:
    """Liste fiyatından uygulanan yüzde indirim düşülür."""
    price = item.product.list_price_incl_tax
    return price - price * (item.applied_discount or 0) / 100


def item_total(item: CartItem) -> float:
    return discounted_price(item) * item.quantity


class Cart:
    """İstemci tarafı sepet; sunucu tarafında yetkili kaynak değildir."""

    def __init__(self):
        self.items: List[CartItem] = []

    def add(self, product: Product, quantity: int = 1, selected_variant: Optional[str] = None) -> CartItem:
        variant_id = make_variant_id(product, selected_variant)

        for item in self.items:
            if item.variant_id == variant_id:
                item.quantity += quantity
                logger.debug(f"Sepetteki kalem güncellendi: {variant_id} -> {item.quantity}")
                return item

        item = CartItem(
            product=product,
            cart_id=uuid.uuid4().hex,
            variant_id=variant_id,
            quantity=quantity,
            applied_discount=0,
            selected_variant=selected_variant,
        )
        self.items.append(item)
        logger.debug(f"Sepete eklendi: {variant_id} x{quantity}")
        return item

    def get(self, cart_id: str) -> CartItem:
        for item in self.items:
            if item.cart_id == cart_id:
                return item
        raise KeyError(cart_id)

    def update_quantity(self, cart_id: str, quantity: int) -> None:
        """Miktar 0 veya altına inerse kalem sepetten çıkarılır."""
        if quantity <= 0:
            self.remove(cart_id)
            return
        self.get(cart_id).quantity = quantity

    def apply_discount(self, cart_id: str, percent: int) -> None:
        if percent not in DISCOUNT_TIERS:
            raise ValueError(f"Geçersiz indirim oranı: {percent}. Geçerli değerler: {DISCOUNT_TIERS}")
        self.get(cart_id).applied_discount = percent

    def remove(self, cart_id: str) -> None:
        self.items = [item for item in self.items if item.cart_id != cart_id]

    def clear(self) -> None:
        self.items = []

    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    def grand_total(self) -> float:
        return sum(item_total(item) for item in self.items)

    def is_empty(self) -> bool:
        return not self.items

    def to_order_lines(self) -> List[Dict[str, Any]]:
        """Sipariş kaydı için kalem listesi."""
        lines = []
        for item in self.items:
            product = item.product
            lines.append({
                "cart_id": item.cart_id,
                "stock_code": product.stock_code,
                "name": product.name,
                "company": product.company,
                "currency": product.currency or "USD",
                "list_price_incl_tax": product.list_price_incl_tax,
                "discount_5": product.discount_5,
                "discount_10": product.discount_10,
                "discount_15": product.discount_15,
                "quantity": item.quantity,
                "applied_discount": item.applied_discount,
                "discounted_price": discounted_price(item),
                "total": item_total(item),
                "variant_id": item.variant_id or product.stock_code,
                "selected_variant": item.selected_variant,
            })
        return lines
