"""Search screen state over a property store."""

import asyncio

import pytest

from babui.db.repository import PropertyRepository
from babui.search.filters import Filters
from babui.search.session import SearchSession
from babui.stores.property_store import PropertyStore


@pytest.fixture
def session(supabase, resolver):
    store = PropertyStore(PropertyRepository(supabase))
    asyncio.run(store.fetch())
    return SearchSession(store, resolver)


def test_options_cascade(session):
    assert session.options("district") == []
    session.select_location("division", "6")
    assert any(d.name == "Gazipur" for d in session.options("district"))

    session.select_location("district", "47")
    session.select_location("thana", "601")
    assert "Jigatola" in session.options("sub_area")

    session.select_location("division", "1")
    assert session.filters.district is None
    assert session.options("sub_area") == []


def test_edits_do_not_search_until_asked(session):
    session.update(type="room")
    assert len(session.results) == 3
    assert [p.id for p in session.search()] == ["2"]


def test_clear_filters_restores_everything(session):
    session.select_location("division", "6")
    session.update(max_price=10000)
    session.toggle_amenity("wifi", True)
    assert [p.id for p in session.search()] == ["2"]

    results = session.clear_filters()

    assert session.filters == Filters()
    assert [p.id for p in results] == ["1", "2", "3"]


def test_location_fields_only_via_select_location(session):
    with pytest.raises(ValueError):
        session.update(district="47")


def test_refresh_reloads_from_backend(session, supabase):
    supabase.tables["properties"].pop()
    results = asyncio.run(session.refresh())
    assert [p.id for p in results] == ["1", "2"]
