"""
Türkçe arama yardımcıları.
Türkçe karakter farklılıklarını ve sık kullanılan kelime türevlerini tolere eden
eşleştirme fonksiyonlarını içerir.
"""
import re
from typing import Dict, List


# Temel harf -> varyantlar
TURKISH_CHAR_MAP: Dict[str, List[str]] = {
    "a": ["a", "â"],
    "c": ["c", "ç"],
    "g": ["g", "ğ"],
    "i": ["i", "ı", "î"],
    "o": ["o", "ö", "ô"],
    "s": ["s", "ş"],
    "u": ["u", "ü", "û"],
    "A": ["A", "Â"],
    "C": ["C", "Ç"],
    "G": ["G", "Ğ"],
    "I": ["I", "İ", "Î"],
    "O": ["O", "Ö", "Ô"],
    "S": ["S", "Ş"],
    "U": ["U", "Ü", "Û"],
}

# Varyant -> temel harf
_NORMALIZE_MAP: Dict[str, str] = {
    variant: base
    for base, variants in TURKISH_CHAR_MAP.items()
    for variant in variants
}

# Yaygın kelime türevleri; yalnızca tam terim anahtar olarak aranır
TURKISH_WORD_VARIATIONS: Dict[str, List[str]] = {
    "ampul": ["ampül", "ampu", "lamba"],
    "ampül": ["ampul", "ampu", "lamba"],
    "çelik": ["celik", "steel"],
    "çeşit": ["cesit", "tür", "tip"],
    "düğme": ["dugme", "buton"],
    "göz": ["goz", "eye"],
    "hızlı": ["hizli", "fast", "sürat"],
    "işık": ["isik", "light", "ışık"],
    "kağıt": ["kagit", "paper"],
    "küçük": ["kucuk", "small", "mini"],
    "büyük": ["buyuk", "large", "big"],
    "müşteri": ["musteri", "customer"],
    "ölçü": ["olcu", "size", "measure"],
    "özel": ["ozel", "special"],
    "şeker": ["seker", "sugar"],
    "tüp": ["tup", "tube"],
    "ürün": ["urun", "product"],
    "üst": ["ust", "top", "upper"],
    "yan": ["side", "lateral"],
    "yeni": ["new", "fresh"],
}


def normalize_turkish(text: str) -> str:
    """
    Türkçe karakterleri temel Latin karşılıklarına çevirir (büyük/küçük harf korunur).
    Örn: 'Işık Çubuğu' -> 'Isik Cubugu'
    """
    return "".join(_NORMALIZE_MAP.get(char, char) for char in text)


def create_flexible_pattern(search_term: str) -> "re.Pattern[str]":
    """
    Arama terimindeki her harf için Türkçe varyantlarını kapsayan bir desen üretir.
    Örn: 'isik' -> '[iıî][sş][iıî]k'
    """
    normalized = normalize_turkish(search_term.lower())

    parts = []
    for char in normalized:
        variations = TURKISH_CHAR_MAP.get(char, [char])
        if len(variations) > 1:
            parts.append("[" + "".join(variations) + "]")
        else:
            parts.append(re.escape(char))

    return re.compile("".join(parts), re.IGNORECASE)


def turkish_search(search_term: str, target_text: str) -> bool:
    """Türkçe karakter farklılıklarını göz ardı ederek arar. Boş terim her şeyle eşleşir."""
    if not search_term.strip():
        return True

    # Önce düz alt dize kontrolü (en hızlısı)
    if search_term.lower() in target_text.lower():
        return True

    pattern = create_flexible_pattern(search_term)
    return pattern.search(target_text) is not None


def enhanced_turkish_search(search_term: str, target_text: str) -> bool:
    """
    Karakter eşleştirmesine ek olarak kelime türevleri sözlüğünü de kullanır.
    Sözlükte yalnızca terimin tamamı (küçük harfle) anahtar olarak aranır.
    """
    if not search_term.strip():
        return True

    if turkish_search(search_term, target_text):
        return True

    variations = TURKISH_WORD_VARIATIONS.get(search_term.lower(), [])
    return any(turkish_search(variation, target_text) for variation in variations)
