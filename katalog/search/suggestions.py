"""
"Bunu mu demek istediniz?" önerileri.
Sonuçsuz aramalarda Levenshtein benzerliğine göre yakın ürün adlarını bulur.
"""
from typing import List


def levenshtein_distance(str1: str, str2: str) -> int:
    """Klasik dinamik programlama ile düzenleme mesafesi."""
    previous = list(range(len(str1) + 1))

    for j in range(1, len(str2) + 1):
        current = [j] + [0] * len(str1)
        for i in range(1, len(str1) + 1):
            indicator = 0 if str1[i - 1] == str2[j - 1] else 1
            current[i] = min(
                current[i - 1] + 1,             # silme
                previous[i] + 1,                # ekleme
                previous[i - 1] + indicator,    # değiştirme
            )
        previous = current

    return previous[len(str1)]


def calculate_similarity(str1: str, str2: str) -> float:
    """0 ile 1 arasında benzerlik; iki boş dize için 1."""
    a, b = str1.lower(), str2.lower()
    max_length = max(len(a), len(b))
    if max_length == 0:
        return 1.0
    return 1 - levenshtein_distance(a, b) / max_length


def find_similar_product_names(
    search_term: str,
    product_names: List[str],
    threshold: float = 0.6,
    max_suggestions: int = 3
) -> List[str]:
    """
    Arama terimine benzeyen ürün adlarını benzerliğe göre azalan sırada döndürür.

    - Terimle aynı olan adlar (büyük/küçük harf duyarsız) önerilmez.
    - Eşit benzerlikte giriş sırası korunur.
    """
    if not search_term.strip() or len(search_term) < 2:
        return []

    term_lower = search_term.lower()
    scored = [
        (name, calculate_similarity(search_term, name))
        for name in product_names
    ]
    candidates = [
        (name, similarity) for name, similarity in scored
        if similarity >= threshold and name.lower() != term_lower
    ]
    candidates.sort(key=lambda item: item[1], reverse=True)

    return [name for name, _ in candidates[:max_suggestions]]
