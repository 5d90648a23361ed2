"""
Dışa aktarma ve hızlı kontrol modülü.
Katalogu Excel dosyasına (yerel dosya veya bellek akışı) yazar ve kısa bir özet rapor üretir.
"""
import os
import re
from datetime import datetime
from io import BytesIO
from typing import Dict, List, Tuple, Union

import pandas as pd
from openpyxl import load_workbook
from openpyxl.styles import Alignment, Border, Font, PatternFill, Side

from katalog.importer import currency_symbol
from katalog.models import Product

# Alan -> Excel başlığı (içe aktarma sırası ile aynı)
EXPORT_COLUMNS = [
    ("stock_code", "Stok Kodu"),
    ("company", "Firma"),
    ("name", "Ürün Adı"),
    ("unit", "Birim"),
    ("shelf_price_incl_tax", "Raf Fiyatı KDV Dahil"),
    ("purchase_discount_rate", "Alış İskonto Oranı"),
    ("list_price_incl_tax", "Liste Fiyatı KDV Dahil"),
    ("discount_5", "İndirim %5"),
    ("discount_10", "İndirim %10"),
    ("discount_15", "İndirim %15"),
    ("tax_rate", "KDV %"),
    ("currency", "Para Birimi"),
]


def generate_excel_bytes(products: List[Product], base_name: str = "") -> Tuple[BytesIO, str]:
    """Excel dosyasının bellek akışını ve önerilen dosya adını üretir."""
    file_name = _generate_filename(products, base_name)
    output = BytesIO()
    _write_excel_data(products, output)
    output.seek(0)
    return output, file_name


def export_to_excel(products: List[Product], path: str = "output.xlsx", base_name: str = "") -> str:
    """Ürünleri yerel bir Excel dosyasına yazar."""
    if path == "output.xlsx" or path.endswith("/") or path.endswith("\\"):
        file_name = _generate_filename(products, base_name)
        if path.endswith("/") or path.endswith("\\"):
            path = os.path.join(path, file_name)
        else:
            path = file_name

    _write_excel_data(products, path)
    return path


def quick_check(products: List[Product]) -> Dict[str, object]:
    """Katalog için hızlı kontrol raporu."""
    currencies = sorted({p.currency for p in products if p.currency})
    return {
        "toplam_urun": len(products),
        "raf_fiyati_sifir": sum(1 for p in products if p.shelf_price_incl_tax == 0.0),
        "liste_fiyati_sifir": sum(1 for p in products if p.list_price_incl_tax == 0.0),
        "adi_bos": sum(1 for p in products if not p.name),
        "yinelenen_stok_kodu": len(products) - len({p.stock_code for p in products}),
        "para_birimleri": currencies,
    }


def format_price(amount: float, currency: str) -> str:
    return f"{currency_symbol(currency)}{amount:.2f}"


# ==========================================
# İç yardımcı fonksiyonlar
# ==========================================

def _generate_filename(products: List[Product], base_name: str = "") -> str:
    """Temel dosya adından ya da ilk firmadan dosya adı üretir."""
    file_name = None

    if base_name:
        file_name = os.path.splitext(base_name)[0]
    elif products and products[0].company:
        file_name = products[0].company.strip()

    if not file_name:
        file_name = "urun_katalogu"

    safe_filename = re.sub(r'[\\/:*?"<>|]', "_", file_name)
    timestamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    return f"{safe_filename}_{timestamp}.xlsx"


def _write_excel_data(products: List[Product], target: Union[str, BytesIO]):
    rows = []
    for product in products:
        data = product.to_dict()
        rows.append({title: data[field] for field, title in EXPORT_COLUMNS})

    df = pd.DataFrame(rows, columns=[title for _, title in EXPORT_COLUMNS])
    df.to_excel(target, index=False, sheet_name="Ürünler")

    _format_excel(target)


def _format_excel(target: Union[str, BytesIO]):
    """Excel dosyasını biçimlendirir."""
    if isinstance(target, BytesIO):
        target.seek(0)
    wb = load_workbook(target)
    ws = wb.active

    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF", size=11)
    border = Border(
        left=Side(style="thin"), right=Side(style="thin"),
        top=Side(style="thin"), bottom=Side(style="thin")
    )
    center_align = Alignment(horizontal="center", vertical="center", wrap_text=True)
    left_align = Alignment(horizontal="left", vertical="center", wrap_text=True)

    for cell in ws[1]:
        cell.fill = header_fill
        cell.font = header_font
        cell.alignment = center_align
        cell.border = border

    for row in ws.iter_rows(min_row=2, max_row=ws.max_row):
        for cell in row:
            cell.border = border
            cell.alignment = left_align

    # Sütun genişliklerini ayarla
    for column in ws.columns:
        column_letter = column[0].column_letter
        max_length = max(len(str(cell.value)) if cell.value is not None else 0 for cell in column)
        ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

    ws.freeze_panes = "A2"

    if isinstance(target, BytesIO):
        target.seek(0)
        target.truncate()
    wb.save(target)
