"""Arama etkinliği ve yasaklı terim deposu testleri."""
import sys
import os
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), '..')))

import pytest

from katalog.activity import SearchActivityTracker
from katalog.restrictions import RestrictedTermStore


def tracker():
    return SearchActivityTracker(search_delay=1.0, unsuccessful_delay=2.0, min_length=3)


class TestSearchActivityTracker:

    def test_search_recorded_after_delay(self):
        t = tracker()
        t.observe("kalem", 4, "u1", now=0.0)
        t.flush(now=0.5)
        assert t.searches == []
        t.flush(now=1.0)
        assert [s.query_text for s in t.searches] == ["kalem"]
        assert t.searches[0].results_count == 4
        assert t.unsuccessful == {}

    def test_typing_replaces_pending_term(self):
        t = tracker()
        t.observe("kal", 10, now=0.0)
        t.observe("kale", 5, now=0.4)
        t.observe("kalem", 4, now=0.8)
        t.flush(now=2.0)
        assert [s.query_text for s in t.searches] == ["kalem"]

    def test_short_terms_are_ignored(self):
        t = tracker()
        t.observe("ka", 0, now=0.0)
        t.flush(now=10.0)
        assert t.searches == []
        assert t.unsuccessful == {}

    def test_unsuccessful_search_waits_longer(self):
        t = tracker()
        t.observe("vidaa", 0, "u1", now=0.0)
        t.flush(now=1.5)
        assert len(t.searches) == 1
        assert t.unsuccessful == {}
        t.flush(now=2.0)
        assert [s.search_query for s in t.unsuccessful.values()] == ["vidaa"]
        t.flush(now=5.0)
        assert len(t.unsuccessful) == 1

    def test_empty_catalog_is_not_unsuccessful(self):
        t = tracker()
        t.observe("vidaa", 0, catalog_size=0, now=0.0)
        t.flush(now=5.0)
        assert t.unsuccessful == {}

    def test_repeated_renders_record_one_search(self):
        t = tracker()
        for now in [0.0, 3.0, 6.0]:
            t.flush(now=now)
            t.observe("vidaa", 0, "u1", now=now)
        t.flush(now=9.0)

        assert len(t.searches) == 1
        assert len(t.unsuccessful) == 1
        assert t.unresolved_count() == 1

    def test_changed_result_count_is_a_new_search(self):
        t = tracker()
        t.observe("vidaa", 0, now=0.0)
        t.flush(now=3.0)
        t.observe("vidaa", 2, now=3.0)
        t.flush(now=6.0)
        assert [s.results_count for s in t.searches] == [0, 2]

    def test_retyping_after_clearing_records_again(self):
        t = tracker()
        t.observe("kalem", 4, now=0.0)
        t.flush(now=2.0)
        t.observe("", 4, now=2.0)
        t.observe("kalem", 4, now=3.0)
        t.flush(now=5.0)
        assert [s.query_text for s in t.searches] == ["kalem", "kalem"]

    def test_admin_views(self):
        t = tracker()
        for i, term in enumerate(["Vida", "vida", "civata"]):
            t.observe(term + "x", 0, now=i * 10.0)
            t.flush(now=i * 10.0 + 3)

        assert t.top_queries(1) == [{"query": "vidax", "count": 2}]
        assert t.unresolved_count() == 3

        search = t.resolve(1, "admin", "Ürün eklendi")
        assert search.is_resolved and search.admin_notes == "Ürün eklendi"
        assert t.unresolved_count() == 2

        t.reopen(1)
        assert t.unresolved_count() == 3


class TestSearchAnalytics:

    def _tracker_with(self, *terms):
        t = tracker()
        for i, term in enumerate(terms):
            t.observe(term, 1, now=i * 10.0)
            t.flush(now=i * 10.0 + 1)
        return t

    def test_top_searches_over_all_searches(self):
        t = self._tracker_with("LED ampul", "kalem", "led ampul", "vida")
        top = t.top_searches()
        assert top[0] == {"query": "led ampul", "count": 2, "words": ["led", "ampul"]}
        # eşit sayıda en yeni arama önce gelir
        assert [q["query"] for q in top[1:]] == ["vida", "kalem"]
        assert len(t.top_searches(limit=2)) == 2

    def test_word_frequency(self):
        t = self._tracker_with("led ampul", "ampul, 10w", "çelik vida")
        words = t.word_frequency()
        assert words[0] == {"word": "ampul", "count": 2}
        assert {"word": "çelik", "count": 1} in words
        # 3 harften kısa kelimeler sayılmaz
        assert all(len(w["word"]) > 2 for w in words)

    def test_empty(self):
        assert tracker().top_searches() == []
        assert tracker().word_frequency() == []


class TestRestrictedTermStore:

    def test_add_and_snapshot(self):
        store = RestrictedTermStore()
        store.add("Sigara", "keyword", "admin")
        store.add("ACME", "company", "admin")
        assert store.terms() == ("sigara", "acme")

    @pytest.mark.parametrize("term, type", [("", "keyword"), ("  ", "keyword"), ("x", "brand")])
    def test_invalid(self, term, type):
        with pytest.raises(ValueError):
            RestrictedTermStore().add(term, type)

    def test_duplicate_is_case_insensitive(self):
        store = RestrictedTermStore()
        store.add("Sigara")
        with pytest.raises(ValueError):
            store.add("SIGARA")

    def test_delete(self):
        store = RestrictedTermStore()
        item = store.add("sigara")
        store.delete(item.id)
        assert store.terms() == ()
        with pytest.raises(KeyError):
            store.delete(item.id)
