"""
Streamlit web uygulaması girişi.
Arayüzü çizer ve kullanıcı etkileşimlerini servis katmanına iletir.
"""
import pandas as pd
import streamlit as st
from typing import Any, Dict

from katalog.activity import SearchActivityTracker
from katalog.cart import Cart, discounted_price, item_total
from katalog.comparison import CompareList
from katalog.config import get_settings
from katalog.exporter import format_price
from katalog.filters import ALL, SORTERS, FilterState
from katalog.models import DISCOUNT_TIERS, RESTRICTED_TERM_TYPES
from katalog.orders import REQUIRED_BILLING_FIELDS, OrderBook, OrderError, PENDING
from katalog.restrictions import RestrictedTermStore
from katalog.service import CatalogService, ExportService, ImportService
from katalog.variants import is_product_variant

SORT_LABELS = {
    "stock_code": "Stok Kodu",
    "name": "Ürün Adı",
    "shelf_price_asc": "Raf Fiyatı (artan)",
    "shelf_price_desc": "Raf Fiyatı (azalan)",
    "list_price_asc": "Liste Fiyatı (artan)",
    "list_price_desc": "Liste Fiyatı (azalan)",
}

BILLING_LABELS = {
    "company_name": "Firma Adı",
    "tax_office": "Vergi Dairesi",
    "tax_number": "Vergi No",
    "contact_person": "Yetkili Kişi",
    "phone": "Telefon",
    "email": "E-posta",
    "address": "Adres",
    "city": "Şehir",
    "invoice_created_by": "Faturayı Düzenleyen",
}

# ==========================================
# UI yardımcı fonksiyonları
# ==========================================

def init_session_state():
    """Session State değişkenlerini başlatır."""
    if "restricted" not in st.session_state:
        st.session_state.restricted = RestrictedTermStore()
    if "catalog" not in st.session_state:
        st.session_state.catalog = CatalogService(restricted_terms=st.session_state.restricted)
    if "cart" not in st.session_state:
        st.session_state.cart = Cart()
    if "compare" not in st.session_state:
        st.session_state.compare = CompareList()
    if "orders" not in st.session_state:
        st.session_state.orders = OrderBook()
    if "activity" not in st.session_state:
        st.session_state.activity = SearchActivityTracker()
    if "import_filename" not in st.session_state:
        st.session_state.import_filename = ""


def render_sidebar() -> Dict[str, Any]:
    """Kenar çubuğunu çizer ve ayarları döndürür."""
    config = {}
    with st.sidebar:
        st.header("⚙️ Ayarlar")
        config["user_id"] = st.text_input("Kullanıcı", value="demo@firma.com")
        config["is_admin"] = st.checkbox("Yönetici modu", value=False)

        st.markdown("---")
        cart = st.session_state.cart
        st.metric("🛒 Sepet", cart.item_count())
        compare = st.session_state.compare
        if compare.products:
            st.caption("Karşılaştırma: " + ", ".join(p.stock_code for p in compare.products))
            if st.button("Karşılaştırmayı temizle"):
                compare.clear()
                st.rerun()
    return config


def render_upload_area():
    st.subheader("📂 Excel Yükleme")
    st.caption(
        "Sütunlar: Stok Kodu, Firma, Ürün Adı, Birim, Raf Fiyatı KDV Dahil, Alış İskonto Oranı, "
        "Liste Fiyatı KDV Dahil, İndirim %5, İndirim %10, İndirim %15, KDV %. "
        "$, €, ₺ sembolleri otomatik algılanır (öncelik USD → EUR → TL, varsayılan USD)."
    )
    uploaded_file = st.file_uploader("Excel dosyası", type=["xlsx", "xls"])
    replace = st.checkbox("Mevcut katalogun yerine geçsin", value=True)

    if uploaded_file and st.button("🚀 İçe aktar", type="primary"):
        products = ImportService().import_from_excel(uploaded_file.getvalue())
        if not products:
            st.error("Excel dosyasından veri okunamadı. Dosyanın boş olmadığından emin olun.")
            return

        catalog = st.session_state.catalog
        if replace:
            catalog.replace_products(products)
        else:
            catalog.add_products(products)
        st.session_state.import_filename = uploaded_file.name
        st.success(f"{len(products)} ürün yüklendi ({products[0].currency}).")
        st.dataframe(pd.DataFrame([p.to_dict() for p in products[:10]]), hide_index=True)


def render_filters(catalog: CatalogService) -> FilterState:
    settings = get_settings()
    col1, col2, col3, col4 = st.columns(4)
    with col1:
        search_term = st.text_input("Arama", placeholder="Ürün adı veya stok kodu")
    with col2:
        category = st.selectbox("Kategori", [ALL] + catalog.categories(),
                                format_func=lambda x: "Tümü" if x == ALL else x)
    with col3:
        supplier = st.selectbox("Tedarikçi", [ALL] + catalog.suppliers(),
                                format_func=lambda x: "Tümü" if x == ALL else x)
    with col4:
        sort_keys = list(SORTERS)
        sort_by = st.selectbox("Sıralama", sort_keys, index=sort_keys.index(settings.DEFAULT_SORT),
                               format_func=lambda x: SORT_LABELS.get(x, x))
    show_top_cheapest = st.checkbox(f"En ucuz {settings.TOP_CHEAPEST_COUNT} ürün")

    return FilterState(
        search_term=search_term,
        category=category,
        supplier=supplier,
        sort_by=sort_by,
        show_top_cheapest=show_top_cheapest,
    )


def render_catalog_area(config: Dict[str, Any]):
    catalog = st.session_state.catalog
    if not catalog.products:
        st.info("Henüz ürün bulunamadı. Lütfen önce ürün yükleyin.")
        return

    state = render_filters(catalog)
    result = catalog.browse(state)

    tracker = st.session_state.activity
    tracker.flush()
    tracker.observe(state.search_term, len(result.cards), config["user_id"], len(catalog.products))

    if not result.cards:
        if state.search_term.strip():
            st.warning(f"'{state.search_term}' için sonuç bulunamadı.")
            if result.suggestions:
                st.write("Bunu mu demek istediniz? " + ", ".join(f"**{s}**" for s in result.suggestions))
        return

    excel_bytes, file_name = ExportService().get_excel_bytes(
        result.products, st.session_state.import_filename
    )
    st.download_button(
        label="📥 Listeyi Excel olarak indir",
        data=excel_bytes,
        file_name=file_name,
        mime="application/vnd.openxmlformats-officedocument.spreadsheetml.sheet",
    )

    cols = st.columns(3)
    for index, card in enumerate(result.cards):
        with cols[index % 3]:
            _render_card(card, index)


def _render_card(card, index: int):
    cart = st.session_state.cart
    compare = st.session_state.compare

    product = card.base_product if is_product_variant(card) else card
    selected_variant = None
    with st.container(border=True):
        if is_product_variant(card):
            option_index = st.selectbox(
                "Varyant", range(len(card.variants)),
                format_func=lambda i: card.variant_options[i],
                key=f"variant_{index}"
            )
            product = card.variants[option_index]
            selected_variant = card.variant_options[option_index]

        if product.image_url:
            st.image(product.image_url)
        st.markdown(f"**{product.name}**")
        st.caption(f"{product.stock_code} · {product.company} · {product.unit}")
        st.write(
            f"Raf: {format_price(product.shelf_price_incl_tax, product.currency)} | "
            f"Liste: {format_price(product.list_price_incl_tax, product.currency)}"
        )

        c1, c2 = st.columns(2)
        with c1:
            if st.button("🛒 Sepete ekle", key=f"add_{index}"):
                cart.add(product, 1, selected_variant)
                label = f" ({selected_variant})" if selected_variant else ""
                st.toast(f"{product.name}{label} sepetinize eklendi.")
        with c2:
            label = "Karşılaştırmadan çıkar" if compare.contains(product) else "Karşılaştır"
            if st.button(label, key=f"cmp_{index}"):
                compare.toggle(product)
                st.rerun()


def render_cart_area(config: Dict[str, Any]):
    cart = st.session_state.cart
    if cart.is_empty():
        st.info("Sepetiniz boş.")
        return

    for item in list(cart.items):
        p = item.product
        with st.container(border=True):
            title = f"**{p.name}**" + (f" ({item.selected_variant})" if item.selected_variant else "")
            st.markdown(title)
            c1, c2, c3, c4 = st.columns([2, 2, 2, 1])
            with c1:
                quantity = st.number_input("Adet", min_value=0, value=item.quantity, key=f"qty_{item.cart_id}")
                if quantity != item.quantity:
                    cart.update_quantity(item.cart_id, int(quantity))
                    st.rerun()
            with c2:
                discount = st.radio(
                    "İndirim", DISCOUNT_TIERS, index=DISCOUNT_TIERS.index(item.applied_discount),
                    format_func=lambda x: f"%{x}", horizontal=True, key=f"disc_{item.cart_id}"
                )
                if discount != item.applied_discount:
                    cart.apply_discount(item.cart_id, discount)
                    st.rerun()
            with c3:
                st.write(f"Birim: {format_price(discounted_price(item), p.currency)}")
                st.write(f"Toplam: {format_price(item_total(item), p.currency)}")
            with c4:
                if st.button("🗑️", key=f"rm_{item.cart_id}"):
                    cart.remove(item.cart_id)
                    st.rerun()

    currency = cart.items[0].product.currency
    st.subheader(f"Genel Toplam: {format_price(cart.grand_total(), currency)}")

    with st.form("billing"):
        st.markdown("#### Fatura Bilgileri")
        billing = {field: st.text_input(BILLING_LABELS[field]) for field in REQUIRED_BILLING_FIELDS}
        billing["notes"] = st.text_area("Notlar")
        if st.form_submit_button("Siparişi gönder", type="primary"):
            try:
                order = st.session_state.orders.place_order(config["user_id"], cart, billing)
            except OrderError as e:
                st.error(str(e))
            else:
                st.success(f"Sipariş #{order.id} alındı. Yönetici onayı bekleniyor.")


def render_admin_area(config: Dict[str, Any]):
    tab_orders, tab_products, tab_terms, tab_searches, tab_analytics = st.tabs([
        "📦 Siparişler", "💲 Ürün Yönetimi", "🚫 Yasaklı Terimler", "🔍 Sonuçsuz Aramalar", "📈 Analitik"
    ])

    with tab_products:
        render_product_manager()

    with tab_analytics:
        render_analytics()

    with tab_orders:
        for order in st.session_state.orders.list_orders():
            with st.expander(f"#{order.id} · {order.user_id} · {order.total_amount:.2f} · {order.status}"):
                st.dataframe(pd.DataFrame(order.items), hide_index=True)
                if order.status == PENDING:
                    c1, c2 = st.columns(2)
                    if c1.button("Onayla", key=f"approve_{order.id}"):
                        st.session_state.orders.approve(order.id, config["user_id"])
                        st.rerun()
                    if c2.button("Reddet", key=f"reject_{order.id}"):
                        st.session_state.orders.reject(order.id, config["user_id"])
                        st.rerun()

    with tab_terms:
        store = st.session_state.restricted
        with st.form("new_term"):
            term = st.text_input("Terim")
            term_type = st.selectbox("Tip", RESTRICTED_TERM_TYPES)
            description = st.text_input("Açıklama")
            if st.form_submit_button("Ekle"):
                try:
                    store.add(term, term_type, config["user_id"], description or None)
                except ValueError as e:
                    st.error(str(e))
        for item in store.list():
            c1, c2 = st.columns([4, 1])
            c1.write(f"**{item.term}** ({item.type}) {item.description or ''}")
            if c2.button("Sil", key=f"del_term_{item.id}"):
                store.delete(item.id)
                st.rerun()

    with tab_searches:
        tracker = st.session_state.activity
        st.metric("Çözülmemiş", tracker.unresolved_count())
        top = tracker.top_queries()
        if top:
            st.dataframe(pd.DataFrame(top), hide_index=True)
        for search in tracker.unsuccessful.values():
            c1, c2 = st.columns([4, 1])
            c1.write(f"{search.search_query} · {search.user_id or '-'} · {search.created_at:%d.%m.%Y %H:%M}")
            if search.is_resolved:
                if c2.button("Yeniden aç", key=f"reopen_{search.id}"):
                    tracker.reopen(search.id)
                    st.rerun()
            elif c2.button("Çözüldü", key=f"resolve_{search.id}"):
                tracker.resolve(search.id, config["user_id"])
                st.rerun()


def render_product_manager():
    """Fiyat düzenleme, görsel bağlama ve ürün silme."""
    catalog = st.session_state.catalog
    term = st.text_input("Ürün ara", placeholder="Stok kodu, ürün adı veya firma", key="admin_lookup")
    products = catalog.lookup(term)
    st.caption(f"{len(products)} ürün")

    for product in products[:50]:
        code = product.stock_code
        with st.expander(f"{code} · {product.name} · {product.company}"):
            with st.form(f"prices_{code}"):
                c1, c2 = st.columns(2)
                shelf = c1.number_input("Raf Fiyatı", min_value=0.0, value=product.shelf_price_incl_tax)
                list_price = c2.number_input("Liste Fiyatı", min_value=0.0, value=product.list_price_incl_tax)
                c3, c4, c5 = st.columns(3)
                d5 = c3.number_input("İndirim %5", min_value=0.0, value=product.discount_5)
                d10 = c4.number_input("İndirim %10", min_value=0.0, value=product.discount_10)
                d15 = c5.number_input("İndirim %15", min_value=0.0, value=product.discount_15)
                image_url = st.text_input("Görsel URL", value=product.image_url or "")
                if st.form_submit_button("Kaydet"):
                    catalog.update_prices(
                        code,
                        shelf_price_incl_tax=shelf,
                        list_price_incl_tax=list_price,
                        discount_5=d5,
                        discount_10=d10,
                        discount_15=d15,
                    )
                    catalog.set_image(code, image_url.strip())
                    st.success("Ürün güncellendi.")
            if st.button("🗑️ Ürünü sil", key=f"delete_{code}"):
                catalog.delete_product(code)
                st.rerun()


def render_analytics():
    tracker = st.session_state.activity
    c1, c2 = st.columns(2)
    with c1:
        st.markdown("#### En Çok Aranan Kelimeler")
        words = tracker.word_frequency()
        if words:
            df_words = pd.DataFrame(words)
            st.dataframe(df_words, hide_index=True)
            st.bar_chart(df_words.head(10).set_index("word"))
        else:
            st.caption("Henüz arama verisi bulunmuyor.")
    with c2:
        st.markdown("#### En Çok Yapılan Aramalar")
        searches = tracker.top_searches()
        if searches:
            st.dataframe(pd.DataFrame(searches), hide_index=True)
        else:
            st.caption("Henüz arama verisi bulunmuyor.")

    st.markdown("#### En Çok Sipariş Edilen Ürünler")
    stats = st.session_state.orders.product_stats()
    if stats:
        st.dataframe(pd.DataFrame(stats), hide_index=True)
    else:
        st.caption("Henüz onaylanmış sipariş bulunmuyor.")


# ==========================================
# Ana program
# ==========================================

def main():
    settings = get_settings()
    st.set_page_config(page_title=settings.APP_NAME, page_icon="📦", layout="wide")
    init_session_state()

    st.title(f"📦 {settings.APP_NAME}")
    config = render_sidebar()

    tabs = ["Katalog", "Sepet", "Yükleme"]
    if config["is_admin"]:
        tabs.append("Yönetim")
    rendered = st.tabs(tabs)

    with rendered[0]:
        render_catalog_area(config)
    with rendered[1]:
        render_cart_area(config)
    with rendered[2]:
        render_upload_area()
    if config["is_admin"]:
        with rendered[3]:
            render_admin_area(config)


if __name__ == "__main__":
    main()
