"""
Trending and similar-reader tests.

Trending counts borrows in the last 30 days: Dune 3, Foundation 2, then four
books with one borrow each. Alice's Gone Girl borrow (40 days ago) is outside
the window and the admin's three Cosmos borrows never count.
"""

from shelfwise.stages import TrendingService, find_similar_users, jaccard


class TestTrending:
    def test_counts_and_order(self, history, catalog, users, clock):
        trending = TrendingService(history, catalog, users, clock=clock)
        top = trending.top_books(10)
        assert [(t.book.id, t.borrow_count) for t in top] == [
            (1, 3), (2, 2), (3, 1), (5, 1), (6, 1), (7, 1),
        ]

    def test_admin_borrows_excluded(self, history, catalog, users, clock):
        ids = TrendingService(history, catalog, users, clock=clock).top_book_ids(10)
        assert 8 not in ids

    def test_without_directory_admin_counts(self, history, catalog, clock):
        ids = TrendingService(history, catalog, clock=clock).top_book_ids(10)
        # Cosmos ties Dune at three borrows
        assert ids[:2] == [1, 8]

    def test_top_n(self, history, catalog, users, clock):
        trending = TrendingService(history, catalog, users, clock=clock)
        assert trending.top_book_ids(5) == [1, 2, 3, 5, 6]

    def test_non_positive_top_n_uses_default(self, history, catalog, users, clock):
        trending = TrendingService(history, catalog, users, clock=clock)
        assert len(trending.top_books(0)) == 6

    def test_wider_window(self, history, catalog, users, clock):
        trending = TrendingService(history, catalog, users, window_days=60, clock=clock)
        counts = {t.book.id: t.borrow_count for t in trending.top_books(10)}
        assert counts[5] == 2

    def test_books_missing_from_catalog_skipped(self, history, users, clock):
        from shelfwise.providers import InMemoryCatalog

        catalog = InMemoryCatalog([{"id": 2, "title": "Foundation", "available_count": 1}])
        top = TrendingService(history, catalog, users, clock=clock).top_books(10)
        assert [t.book.id for t in top] == [2]


class TestSimilarUsers:
    def test_jaccard(self):
        assert jaccard({1, 2}, {2, 3}) == 1 / 3
        assert jaccard(set(), set()) == 0.0

    def test_ranking(self, history, users):
        similar = find_similar_users(1, history, users)
        assert [(s.username, round(s.similarity, 4)) for s in similar] == [
            ("dave", round(1 / 3, 4)),
            ("bob", 0.25),
            ("carol", 0.25),
            ("eve", 0.0),
        ]
        assert similar[0].common_books == 1

    def test_excludes_self_and_admins(self, history, users):
        ids = {s.user_id for s in find_similar_users(1, history, users)}
        assert 1 not in ids
        assert 99 not in ids

    def test_top_n(self, history, users):
        assert len(find_similar_users(1, history, users, top_n=2)) == 2
