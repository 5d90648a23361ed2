from typing import Any, Dict, List, Optional

import uvicorn
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel

from katalog.cart import Cart
from katalog.config import get_settings
from katalog.filters import ALL, FilterState
from katalog.importer import parse_rows
from katalog.logger import get_logger
from katalog.models import Product
from katalog.orders import OrderBook, OrderError
from katalog.restrictions import RestrictedTermStore
from katalog.service import CatalogService
from katalog.variants import is_product_variant

logger = get_logger(__name__)
settings = get_settings()

app = FastAPI(title=settings.APP_NAME, version=settings.APP_VERSION)

restricted_store = RestrictedTermStore()
catalog = CatalogService(restricted_terms=restricted_store)
order_book = OrderBook()


class ProductIn(BaseModel):
    stock_code: str = ""
    company: str = ""
    name: str = ""
    unit: str = ""
    shelf_price_incl_tax: float = 0.0
    purchase_discount_rate: float = 0.0
    list_price_incl_tax: float = 0.0
    discount_5: float = 0.0
    discount_10: float = 0.0
    discount_15: float = 0.0
    tax_rate: float = 0.0
    currency: str = "USD"
    image_url: Optional[str] = None


class RowsRequest(BaseModel):
    rows: List[List[Any]]
    replace: bool = False


class RestrictedTermIn(BaseModel):
    term: str
    type: str = "keyword"
    description: Optional[str] = None
    created_by: str = ""


class OrderLineIn(BaseModel):
    stock_code: str
    quantity: int = 1
    applied_discount: int = 0
    selected_variant: Optional[str] = None


class OrderRequest(BaseModel):
    user_id: str
    items: List[OrderLineIn]
    billing_info: Dict[str, Any]


class PriceUpdate(BaseModel):
    shelf_price_incl_tax: Optional[float] = None
    list_price_incl_tax: Optional[float] = None
    discount_5: Optional[float] = None
    discount_10: Optional[float] = None
    discount_15: Optional[float] = None


class ImageUpdate(BaseModel):
    image_url: Optional[str] = None


class DecisionRequest(BaseModel):
    admin_id: str


def _card_to_dict(card) -> Dict[str, Any]:
    if is_product_variant(card):
        return {
            "type": "variant",
            "base_product": card.base_product.to_dict(),
            "variants": [p.to_dict() for p in card.variants],
            "variant_options": card.variant_options,
        }
    return {"type": "product", "product": card.to_dict()}


def _order_to_dict(order) -> Dict[str, Any]:
    return {
        "id": order.id,
        "user_id": order.user_id,
        "items": order.items,
        "billing_info": order.billing_info,
        "total_amount": order.total_amount,
        "status": order.status,
        "created_at": order.created_at.isoformat(),
        "approved_at": order.approved_at.isoformat() if order.approved_at else None,
        "approved_by": order.approved_by,
    }


@app.get("/")
def root():
    return {"name": settings.APP_NAME, "version": settings.APP_VERSION, "status": "running"}


@app.get("/health")
def health():
    return {"status": "healthy", "products": len(catalog.products)}


# ===================== ÜRÜNLER =====================

@app.post("/products")
def upload_products(products: List[ProductIn], replace: bool = False):
    items = [Product(**p.model_dump()) for p in products]
    if replace:
        catalog.replace_products(items)
    else:
        catalog.add_products(items)
    return {"count": len(items), "total": len(catalog.products)}


@app.post("/products/rows")
def upload_rows(req: RowsRequest):
    """Elektronik tablodan okunmuş ham satırları içe aktarır."""
    items = parse_rows(req.rows)
    if req.replace:
        catalog.replace_products(items)
    else:
        catalog.add_products(items)
    return {
        "count": len(items),
        "currency": items[0].currency if items else None,
        "total": len(catalog.products),
    }


@app.get("/products")
def browse_products(
    search: str = "",
    category: str = ALL,
    supplier: str = ALL,
    sort_by: str = settings.DEFAULT_SORT,
    top_cheapest: bool = False
):
    state = FilterState(
        search_term=search,
        category=category,
        supplier=supplier,
        sort_by=sort_by,
        show_top_cheapest=top_cheapest,
    )
    result = catalog.browse(state)
    return {
        "count": len(result.products),
        "cards": [_card_to_dict(c) for c in result.cards],
        "suggestions": result.suggestions,
    }


@app.patch("/products/{stock_code}/prices")
def update_prices(stock_code: str, req: PriceUpdate):
    prices = req.model_dump(exclude_none=True)
    if not prices:
        raise HTTPException(status_code=400, detail="Güncellenecek fiyat yok")
    try:
        products = catalog.update_prices(stock_code, **prices)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Ürün bulunamadı: {stock_code}")
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return [p.to_dict() for p in products]


@app.put("/products/{stock_code}/image")
def set_product_image(stock_code: str, req: ImageUpdate):
    try:
        products = catalog.set_image(stock_code, req.image_url)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Ürün bulunamadı: {stock_code}")
    return [p.to_dict() for p in products]


@app.delete("/products/{stock_code}")
def delete_product(stock_code: str):
    try:
        count = catalog.delete_product(stock_code)
    except KeyError:
        raise HTTPException(status_code=404, detail=f"Ürün bulunamadı: {stock_code}")
    return {"deleted": count, "total": len(catalog.products)}


@app.get("/categories")
def list_categories():
    return catalog.categories()


@app.get("/suppliers")
def list_suppliers():
    return catalog.suppliers()


@app.get("/suggestions")
def suggestions(q: str):
    return catalog.suggest(q)


# ===================== YASAKLI TERİMLER =====================

@app.get("/restricted-terms")
def list_restricted_terms():
    return [
        {"id": t.id, "term": t.term, "type": t.type, "description": t.description, "created_by": t.created_by}
        for t in restricted_store.list()
    ]


@app.post("/restricted-terms")
def add_restricted_term(req: RestrictedTermIn):
    try:
        item = restricted_store.add(req.term, req.type, req.created_by, req.description)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"id": item.id, "term": item.term, "type": item.type}


@app.delete("/restricted-terms/{term_id}")
def delete_restricted_term(term_id: int):
    try:
        restricted_store.delete(term_id)
    except KeyError:
        raise HTTPException(status_code=404, detail="Yasaklı terim bulunamadı")
    return {"deleted": term_id}


# ===================== SİPARİŞLER =====================

@app.post("/orders")
def place_order(req: OrderRequest):
    by_code = {p.stock_code: p for p in catalog.products}
    cart = Cart()
    try:
        for line in req.items:
            product = by_code.get(line.stock_code)
            if product is None:
                raise HTTPException(status_code=404, detail=f"Ürün bulunamadı: {line.stock_code}")
            item = cart.add(product, line.quantity, line.selected_variant)
            cart.apply_discount(item.cart_id, line.applied_discount)
        order = order_book.place_order(req.user_id, cart, req.billing_info)
    except (ValueError, OrderError) as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _order_to_dict(order)


@app.get("/orders")
def list_orders(status: Optional[str] = None, user_id: Optional[str] = None):
    orders = order_book.orders_for_user(user_id) if user_id else order_book.list_orders(status)
    return [_order_to_dict(o) for o in orders]


@app.post("/orders/{order_id}/approve")
def approve_order(order_id: int, req: DecisionRequest):
    try:
        order = order_book.approve(order_id, req.admin_id)
    except OrderError as e:
        raise HTTPException(status_code=_error_status(order_id), detail=str(e))
    return _order_to_dict(order)


@app.post("/orders/{order_id}/reject")
def reject_order(order_id: int, req: DecisionRequest):
    try:
        order = order_book.reject(order_id, req.admin_id)
    except OrderError as e:
        raise HTTPException(status_code=_error_status(order_id), detail=str(e))
    return _order_to_dict(order)


# ===================== ANALİTİK =====================

@app.get("/analytics/products")
def product_analytics(limit: int = 15):
    """Onaylanmış siparişlerden ürün bazında satış özeti."""
    return order_book.product_stats(limit)


def _error_status(order_id: int) -> int:
    try:
        order_book.get(order_id)
    except OrderError:
        return 404
    return 400


if __name__ == "__main__":
    uvicorn.run(app, host="0.0.0.0", port=8000)
