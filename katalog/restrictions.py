"""
Yasaklı terim yönetimi.
Yönetici tarafından eklenip silinen, katalog hattının yalnızca okuduğu liste.
"""
from typing import Dict, List, Optional, Tuple

from katalog.logger import get_logger
from katalog.models import RESTRICTED_TERM_TYPES, RestrictedTerm

logger = get_logger(__name__)


class RestrictedTermStore:
    """Bellek içi yasaklı terim deposu."""

    def __init__(self):
        self._terms: Dict[int, RestrictedTerm] = {}
        self._next_id = 1

    def add(
        self,
        term: str,
        type: str = "keyword",
        created_by: str = "",
        description: Optional[str] = None
    ) -> RestrictedTerm:
        term = (term or "").strip()
        if not term:
            raise ValueError("Yasaklı terim boş olamaz.")
        if type not in RESTRICTED_TERM_TYPES:
            raise ValueError(f"Geçersiz terim tipi: {type}. Geçerli tipler: {RESTRICTED_TERM_TYPES}")
        if any(t.term.lower() == term.lower() for t in self._terms.values()):
            raise ValueError(f"Bu terim zaten ekli: {term}")

        item = RestrictedTerm(
            id=self._next_id,
            term=term,
            type=type,
            description=description,
            created_by=created_by,
        )
        self._terms[item.id] = item
        self._next_id += 1
        logger.info(f"Yasaklı terim eklendi: {term!r} ({type})")
        return item

    def delete(self, term_id: int) -> None:
        if term_id not in self._terms:
            raise KeyError(term_id)
        removed = self._terms.pop(term_id)
        logger.info(f"Yasaklı terim silindi: {removed.term!r}")

    def list(self) -> List[RestrictedTerm]:
        return sorted(self._terms.values(), key=lambda t: t.id, reverse=True)

    def terms(self) -> Tuple[str, ...]:
        """Filtreleme için küçük harfli anlık görüntü."""
        return tuple(t.term.lower() for t in self._terms.values())
