"""
Sipariş onay akışı.
Sepetten sipariş oluşturma ve yönetici onayı / reddi.
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from katalog.cart import Cart
from katalog.logger import get_logger
from katalog.models import Order

logger = get_logger(__name__)

REQUIRED_BILLING_FIELDS = [
    "company_name",
    "tax_office",
    "tax_number",
    "contact_person",
    "phone",
    "email",
    "address",
    "city",
    "invoice_created_by",
]

PENDING = "pending"
APPROVED = "approved"
REJECTED = "rejected"


class OrderError(Exception):
    """Sipariş akışında geçersiz işlem."""


class OrderBook:
    """Bellek içi sipariş deposu."""

    def __init__(self):
        self._orders: Dict[int, Order] = {}
        self._next_id = 1

    def place_order(self, user_id: str, cart: Cart, billing_info: Dict[str, Any]) -> Order:
        if cart.is_empty():
            raise OrderError("Sipariş vermek için sepette ürün olmalı.")

        missing = [f for f in REQUIRED_BILLING_FIELDS if not billing_info.get(f)]
        if missing:
            raise OrderError(f"Eksik fatura bilgileri: {', '.join(missing)}")

        order = Order(
            id=self._next_id,
            user_id=user_id,
            items=cart.to_order_lines(),
            billing_info=dict(billing_info),
            total_amount=cart.grand_total(),
            status=PENDING,
        )
        self._orders[order.id] = order
        self._next_id += 1

        cart.clear()
        logger.info(f"Sipariş #{order.id} oluşturuldu (kullanıcı={user_id}, tutar={order.total_amount:.2f})")
        return order

    def get(self, order_id: int) -> Order:
        order = self._orders.get(order_id)
        if order is None:
            raise OrderError(f"Sipariş bulunamadı: {order_id}")
        return order

    def approve(self, order_id: int, admin_id: str) -> Order:
        return self._decide(order_id, admin_id, APPROVED)

    def reject(self, order_id: int, admin_id: str) -> Order:
        return self._decide(order_id, admin_id, REJECTED)

    def _decide(self, order_id: int, admin_id: str, status: str) -> Order:
        order = self.get(order_id)
        if order.status != PENDING:
            raise OrderError(f"Sipariş #{order_id} zaten '{order.status}' durumunda.")

        order.status = status
        order.approved_at = datetime.now()
        order.approved_by = admin_id
        logger.info(f"Sipariş #{order_id} -> {status} (yönetici={admin_id})")
        return order

    def list_orders(self, status: Optional[str] = None) -> List[Order]:
        orders = sorted(self._orders.values(), key=lambda o: (o.created_at, o.id), reverse=True)
        if status:
            orders = [o for o in orders if o.status == status]
        return orders

    def orders_for_user(self, user_id: str) -> List[Order]:
        return [o for o in self.list_orders() if o.user_id == user_id]

    def product_stats(self, limit: int = 15) -> List[Dict[str, Any]]:
        """
        Onaylanmış siparişlerde ürün bazında sipariş sayısı, toplam miktar ve ciro.
        Ürünler stok kodu ve firmaya göre ayrılır; en çok sipariş edilen önce gelir.
        """
        stats: Dict[str, Dict[str, Any]] = {}
        for order in self.list_orders(APPROVED):
            for line in order.items:
                key = f"{line.get('stock_code')}-{line.get('company')}"
                entry = stats.setdefault(key, {
                    "stock_code": line.get("stock_code") or "",
                    "name": line.get("name") or "Bilinmeyen Ürün",
                    "company": line.get("company") or "Bilinmeyen Firma",
                    "order_count": 0,
                    "total_quantity": 0,
                    "total_revenue": 0.0,
                })
                entry["order_count"] += 1
                entry["total_quantity"] += line.get("quantity") or 0
                entry["total_revenue"] += line.get("total") or 0.0

        ranked = sorted(stats.values(), key=lambda e: e["order_count"], reverse=True)
        return ranked[:limit]
