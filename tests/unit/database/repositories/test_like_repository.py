#!/usr/bin/env python3
"""
Tests for LikeRepository: the SQL affinity ledger.
"""

import pytest

from core.matching.errors import AlreadyLiked
from database.repositories.like import LikeRepository
from database.repositories.profile import ProfileRepository


@pytest.fixture
def profiles(db_session):
    repo = ProfileRepository(db_session)
    created = [
        repo.create_profile({
            'display_name': name,
            'age': 25 + i,
            'gender': 'female',
            'gender_preference': 'male',
        })
        for i, name in enumerate(["Ana", "Bea", "Cleo", "Dani"])
    ]
    db_session.commit()
    return created


@pytest.fixture
def ledger(db_session):
    return LikeRepository(db_session)


@pytest.mark.db
class TestLikeRepository:

    def test_create_edge(self, ledger, profiles):
        a, b = profiles[0], profiles[1]
        edge = ledger.create_edge(a.id, b.id)

        assert edge.id is not None
        assert edge.created_at is not None
        assert ledger.has_edge(a.id, b.id)
        assert not ledger.has_edge(b.id, a.id)
        assert ledger.get_edge(a.id, b.id).id == edge.id

    def test_duplicate_edge_raises_already_liked(self, ledger, profiles, db_session):
        a, b = profiles[0], profiles[1]
        ledger.create_edge(a.id, b.id)

        # Bypass has_edge to hit the unique constraint directly
        with pytest.raises(AlreadyLiked):
            ledger.create_edge(a.id, b.id)

        # Session is still usable after the rollback
        assert len(ledger.edges_from(a.id)) == 1

    def test_edges_from_and_to(self, ledger, profiles):
        a, b, c, d = profiles
        ledger.create_edge(a.id, c.id)
        ledger.create_edge(a.id, b.id)
        ledger.create_edge(d.id, a.id)
        ledger.create_edge(b.id, a.id)

        assert [e.liked_id for e in ledger.edges_from(a.id)] == [c.id, b.id]
        assert [e.liker_id for e in ledger.edges_to(a.id)] == [d.id, b.id]
        assert ledger.edges_from(c.id) == []

    def test_reverse_edges_are_independent(self, ledger, profiles):
        a, b = profiles[0], profiles[1]
        ledger.create_edge(a.id, b.id)
        ledger.create_edge(b.id, a.id)

        assert ledger.has_edge(a.id, b.id)
        assert ledger.has_edge(b.id, a.id)
