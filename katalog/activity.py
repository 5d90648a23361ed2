"""
Arama etkinliği takibi.
Arama sorgularını ve sonuçsuz aramaları gecikmeli (debounce) olarak kaydeder;
yönetici paneli için basit istatistikler sunar.
"""
import re
import time
from collections import Counter
from dataclasses import dataclass
from datetime import datetime
from typing import Dict, List, Optional, Tuple

from katalog.config import get_settings
from katalog.logger import get_logger
from katalog.models import SearchRecord, UnsuccessfulSearch

logger = get_logger(__name__)

_PUNCTUATION = re.compile(r"[^\w]")


@dataclass
class _PendingSearch:
    term: str
    results_count: int
    user_id: Optional[str]
    catalog_size: int
    observed_at: float


class SearchActivityTracker:
    """
    Kullanıcı yazmayı bıraktıktan sonra son arama terimini kaydeder.
    Her yeni terim bekleyen terimin yerini alır; böylece ara tuşlamalar kaydedilmez.
    Zaman değerleri dışarıdan verilebilir (saniye cinsinden, monotonic).
    """

    def __init__(
        self,
        search_delay: Optional[float] = None,
        unsuccessful_delay: Optional[float] = None,
        min_length: Optional[int] = None
    ):
        settings = get_settings()
        self.search_delay = settings.SEARCH_LOG_DELAY_SECONDS if search_delay is None else search_delay
        self.unsuccessful_delay = (
            settings.UNSUCCESSFUL_SEARCH_DELAY_SECONDS if unsuccessful_delay is None else unsuccessful_delay
        )
        self.min_length = settings.MIN_LOGGED_QUERY_LENGTH if min_length is None else min_length

        self.searches: List[SearchRecord] = []
        self.unsuccessful: Dict[int, UnsuccessfulSearch] = {}
        self._pending: Optional[_PendingSearch] = None
        self._search_logged = False
        self._last_observed: Optional[Tuple[str, int, int]] = None
        self._next_search_id = 1
        self._next_unsuccessful_id = 1

    def observe(
        self,
        term: str,
        results_count: int,
        user_id: Optional[str] = None,
        catalog_size: int = 1,
        now: Optional[float] = None
    ) -> None:
        """
        Arama kutusu her çizildiğinde çağrılabilir.
        Terim, sonuç sayısı ve katalog boyutu son gözlemle aynıysa hiçbir şey yapılmaz;
        aynı arama bu üçünden biri değişene kadar yeniden kaydedilmez.
        """
        now = time.monotonic() if now is None else now
        term = term.strip()

        if len(term) < self.min_length:
            self._pending = None
            self._last_observed = None
            return

        key = (term, results_count, catalog_size)
        if key == self._last_observed:
            return
        self._last_observed = key

        self._pending = _PendingSearch(term, results_count, user_id, catalog_size, now)
        self._search_logged = False

    def flush(self, now: Optional[float] = None) -> None:
        """Bekleme süresi dolan kayıtları işler."""
        if self._pending is None:
            return

        now = time.monotonic() if now is None else now
        pending = self._pending
        idle = now - pending.observed_at

        if not self._search_logged and idle >= self.search_delay:
            self._record_search(pending)
            self._search_logged = True

        is_unsuccessful = pending.results_count == 0 and pending.catalog_size > 0
        if not is_unsuccessful:
            if self._search_logged:
                self._pending = None
            return

        if idle >= self.unsuccessful_delay:
            self._record_unsuccessful(pending)
            self._pending = None

    def _record_search(self, pending: _PendingSearch) -> None:
        record = SearchRecord(
            id=self._next_search_id,
            query_text=pending.term,
            results_count=pending.results_count,
            user_id=pending.user_id,
        )
        self._next_search_id += 1
        self.searches.append(record)
        logger.debug(f"Arama kaydedildi: {pending.term!r} ({pending.results_count} sonuç)")

    def _record_unsuccessful(self, pending: _PendingSearch) -> None:
        record = UnsuccessfulSearch(
            id=self._next_unsuccessful_id,
            search_query=pending.term,
            user_id=pending.user_id,
        )
        self._next_unsuccessful_id += 1
        self.unsuccessful[record.id] = record
        logger.info(f"Sonuçsuz arama kaydedildi: {pending.term!r}")

    # ==========================================
    # Yönetici işlemleri
    # ==========================================

    def top_queries(self, limit: int = 5) -> List[Dict[str, object]]:
        """En sık tekrarlanan sonuçsuz aramalar."""
        counts = Counter(s.search_query.lower() for s in self.unsuccessful.values())
        return [{"query": q, "count": c} for q, c in counts.most_common(limit)]

    def unresolved_count(self) -> int:
        return sum(1 for s in self.unsuccessful.values() if not s.is_resolved)

    def resolve(self, search_id: int, admin_id: str, notes: str = "") -> UnsuccessfulSearch:
        search = self.unsuccessful[search_id]
        search.is_resolved = True
        search.resolved_at = datetime.now()
        search.resolved_by = admin_id
        if notes:
            search.admin_notes = notes
        return search

    def reopen(self, search_id: int) -> UnsuccessfulSearch:
        search = self.unsuccessful[search_id]
        search.is_resolved = False
        search.resolved_at = None
        search.resolved_by = None
        return search

    # ==========================================
    # Analitik
    # ==========================================

    def top_searches(self, limit: int = 10) -> List[Dict[str, object]]:
        """
        Tüm kayıtlı aramalar içinde en sık yapılan sorgular.
        Sorgular küçük harfe çevrilip gruplanır; eşitlikte en yeni arama önce gelir.
        """
        counts = Counter(s.query_text.lower().strip() for s in reversed(self.searches))
        return [
            {"query": q, "count": c, "words": [w for w in q.split() if len(w) > 2]}
            for q, c in counts.most_common(limit)
        ]

    def word_frequency(self, limit: int = 20) -> List[Dict[str, object]]:
        """Aramalarda geçen kelimelerin sıklığı (noktalama atılır, 3+ harfli kelimeler)."""
        counts = Counter()
        for search in reversed(self.searches):
            for word in search.query_text.lower().split():
                word = _PUNCTUATION.sub("", word)
                if len(word) > 2:
                    counts[word] += 1
        return [{"word": w, "count": c} for w, c in counts.most_common(limit)]
