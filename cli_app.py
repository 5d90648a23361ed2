"""
Basit komut satırı girişi: Excel dosyasını içe aktarır, katalogda arar/filtreler ve
isteğe bağlı olarak sonucu Excel'e yazar.
Kullanım örneği:
    python cli_app.py --input urunler.xlsx --search ampul --sort shelf_price_asc --out sonuc.xlsx
"""
import argparse
import time

from katalog.config import get_settings
from katalog.exporter import format_price
from katalog.filters import ALL, SORTERS, FilterState
from katalog.restrictions import RestrictedTermStore
from katalog.service import CatalogService, ExportService, ImportService
from katalog.variants import is_product_variant


def read_terms(path: str):
    with open(path, "r", encoding="utf-8") as f:
        return [l.strip() for l in f if l.strip()]


def main():
    settings = get_settings()
    parser = argparse.ArgumentParser(description="B2B ürün kataloğu")
    parser.add_argument("--input", required=True, help="Ürün listesini içeren Excel dosyası")
    parser.add_argument("--search", default="", help="Arama terimi (ad veya stok kodu)")
    parser.add_argument("--category", default=ALL, help="Kategori (firma)")
    parser.add_argument("--supplier", default=ALL, help="Tedarikçi (firma)")
    parser.add_argument(
        "--sort",
        choices=sorted(SORTERS),
        default=settings.DEFAULT_SORT,
        help="Sıralama anahtarı"
    )
    parser.add_argument(
        "--top-cheapest", dest="top_cheapest", action="store_true",
        help=f"Yalnızca en ucuz {settings.TOP_CHEAPEST_COUNT} ürünü göster"
    )
    parser.add_argument(
        "--restricted", help="Yasaklı terimleri içeren metin dosyası, her satırda bir terim"
    )
    parser.add_argument("--out", help="Sonucu yazılacak Excel dosyası")

    args = parser.parse_args()
    start = time.time()

    with open(args.input, "rb") as f:
        products = ImportService().import_from_excel(f.read())

    if not products:
        print("Dosyadan ürün okunamadı.")
        return

    store = RestrictedTermStore()
    if args.restricted:
        for term in read_terms(args.restricted):
            try:
                store.add(term, created_by="cli")
            except ValueError as e:
                print(f"Terim atlandı: {e}")

    catalog = CatalogService(products, store)
    state = FilterState(
        search_term=args.search,
        category=args.category,
        supplier=args.supplier,
        sort_by=args.sort,
        show_top_cheapest=args.top_cheapest,
    )
    result = catalog.browse(state)

    print(f"--- {len(result.products)} ürün, {len(result.cards)} kart ---")
    for card in result.cards:
        if is_product_variant(card):
            p = card.base_product
            options = ", ".join(card.variant_options)
            print(f"[{p.stock_code}] {p.name} ({p.company}) - varyantlar: {options}")
        else:
            print(f"[{card.stock_code}] {card.name} ({card.company}) "
                  f"{format_price(card.shelf_price_incl_tax, card.currency)}")

    if not result.cards and args.search:
        print(f"'{args.search}' için sonuç bulunamadı.")
        if result.suggestions:
            print("Bunu mu demek istediniz?", ", ".join(result.suggestions))

    if args.out and result.products:
        out_path = ExportService().export_data(result.products, args.out, base_name=args.input)
        print(f"Sonuç dışa aktarıldı: {out_path}")

    report = ExportService().get_quick_report(products)
    print("Kontrol raporu:", report)
    print(f"Toplam süre: {time.time() - start:.2f} sn")


if __name__ == "__main__":
    main()
