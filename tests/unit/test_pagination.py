"""
Unit tests for pagination utilities.
"""

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from app.shared.pagination import PaginationParams, paginate
from models import Project
from tests.factories import ProjectFactory, persist


class TestPaginationParams:
    def test_defaults(self):
        params = PaginationParams()
        assert params.page == 1
        assert params.size == 20
        assert params.offset == 0

    def test_offset(self):
        assert PaginationParams(page=3, size=10).offset == 20

    @pytest.mark.parametrize("kwargs", [{"page": 0}, {"size": 0}, {"size": 101}])
    def test_bounds(self, kwargs):
        with pytest.raises(ValidationError):
            PaginationParams(**kwargs)


class TestPaginate:
    @pytest.mark.asyncio
    async def test_paginate_pages_through_ordered_query(self, test_db):
        await persist(test_db, *[ProjectFactory.build() for _ in range(5)])
        query = select(Project).order_by(Project.id)

        first = await paginate(test_db, query, PaginationParams(page=1, size=2))
        last = await paginate(test_db, query, PaginationParams(page=3, size=2))

        assert first["total"] == 5
        assert first["total_pages"] == 3
        assert first["has_next"] is True
        assert first["has_prev"] is False
        assert len(first["items"]) == 2
        assert len(last["items"]) == 1
        assert last["has_next"] is False
        assert last["has_prev"] is True

    @pytest.mark.asyncio
    async def test_paginate_empty(self, test_db):
        result = await paginate(test_db, select(Project), PaginationParams())
        assert result["items"] == []
        assert result["total"] == 0
        assert result["has_next"] is False
