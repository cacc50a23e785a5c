"""Tests for keeping the URL, the search form and the result list in step."""

from __future__ import annotations

import asyncio

import pytest

from estatesearch.search.filter_state import PropertyType
from estatesearch.search.navigation import InMemoryHistory
from estatesearch.search.pagination import FetchStatus, PaginationController
from estatesearch.search.synchronizer import NO_RESULTS_MESSAGE, FilterStateSynchronizer
from tests.conftest import FakeFetcher, make_summaries


def make_synchronizer(fetcher, location="/search"):
    history = InMemoryHistory(location)
    controller = PaginationController(fetcher, page_size=9)
    return history, FilterStateSynchronizer(history, controller, search_path="/search")


class TestMount:
    @pytest.mark.asyncio
    async def test_mount_parses_url_and_loads(self):
        fetcher = FakeFetcher(make_summaries(9))
        _, sync = make_synchronizer(fetcher, "/search?searchTerm=villa&type=sale&offer=true")

        sync.mount()
        assert sync.view.is_loading is True
        await sync.wait_idle()

        view = sync.view
        assert view.status is FetchStatus.LOADED
        assert view.filters.search_term == "villa"
        assert view.filters.property_type is PropertyType.SALE
        assert view.filters.offer is True
        assert view.draft == view.filters
        assert len(view.listings) == 9
        assert view.show_more_visible is True

        filters, skip, limit = fetcher.calls[0]
        assert (filters.search_term, skip, limit) == ("villa", 0, 9)

    @pytest.mark.asyncio
    async def test_mount_twice_raises(self):
        _, sync = make_synchronizer(FakeFetcher())
        sync.mount()
        with pytest.raises(RuntimeError):
            sync.mount()
        await sync.wait_idle()

    @pytest.mark.asyncio
    async def test_empty_result(self):
        _, sync = make_synchronizer(FakeFetcher([]), "/search?searchTerm=castle")
        sync.mount()
        await sync.wait_idle()

        assert sync.view.is_empty is True
        assert sync.view.show_more_visible is False
        assert NO_RESULTS_MESSAGE == "No listing found!"

    @pytest.mark.asyncio
    async def test_initial_failure_surfaces_error(self):
        fetcher = FakeFetcher(make_summaries(9))
        fetcher.fail_next("store unavailable")
        _, sync = make_synchronizer(fetcher)

        sync.mount()
        await sync.wait_idle()

        view = sync.view
        assert view.status is FetchStatus.ERRORED
        assert view.error == "store unavailable"
        assert view.listings == ()
        assert view.is_empty is False


class TestForm:
    @pytest.mark.asyncio
    async def test_change_only_touches_draft(self):
        fetcher = FakeFetcher(make_summaries(3))
        _, sync = make_synchronizer(fetcher)
        sync.mount()
        await sync.wait_idle()

        sync.change("parking", True)
        sync.change("searchTerm", "loft")

        assert sync.draft.parking is True
        assert sync.draft.search_term == "loft"
        assert sync.filters.parking is False
        assert len(fetcher.calls) == 1

    @pytest.mark.asyncio
    async def test_submit_pushes_url_and_starts_session(self):
        fetcher = FakeFetcher(make_summaries(20))
        history, sync = make_synchronizer(fetcher)
        sync.mount()
        await sync.wait_idle()
        await sync.show_more()

        sync.change("searchTerm", "villa")
        sync.change("sale", True)
        sync.change("offer", True)
        sync.change("sort_order", "regularPrice_asc")
        location = sync.submit()
        await sync.wait_idle()

        assert location == (
            "/search?searchTerm=villa&type=sale&parking=false&furnished=false"
            "&offer=true&sort=regularPrice&order=asc"
        )
        assert history.current_location() == location
        assert sync.filters.search_term == "villa"
        assert len(sync.view.listings) == 9
        assert fetcher.calls[-1][1] == 0

    @pytest.mark.asyncio
    async def test_resubmitting_same_filters_does_not_refetch(self):
        fetcher = FakeFetcher(make_summaries(20))
        _, sync = make_synchronizer(fetcher, "/search?searchTerm=villa")
        sync.mount()
        await sync.wait_idle()
        await sync.show_more()

        sync.submit()
        await sync.wait_idle()

        assert len(fetcher.calls) == 2
        assert len(sync.view.listings) == 18

    @pytest.mark.asyncio
    async def test_resubmitting_after_failure_retries(self):
        fetcher = FakeFetcher(make_summaries(4))
        fetcher.fail_next()
        _, sync = make_synchronizer(fetcher)
        sync.mount()
        await sync.wait_idle()

        sync.submit()
        await sync.wait_idle()

        assert sync.view.status is FetchStatus.LOADED
        assert len(sync.view.listings) == 4
        assert sync.view.error is None

    @pytest.mark.asyncio
    async def test_show_more_does_not_touch_url(self):
        fetcher = FakeFetcher(make_summaries(20))
        history, sync = make_synchronizer(fetcher, "/search?searchTerm=a")
        sync.mount()
        await sync.wait_idle()

        assert await sync.show_more() is True

        assert history.entries == ("/search?searchTerm=a",)
        assert len(sync.view.listings) == 18
        assert sync.controller.cursor == 18


class TestNavigation:
    @pytest.mark.asyncio
    async def test_back_navigation_reloads_previous_search(self):
        fetcher = FakeFetcher(make_summaries(5))
        history, sync = make_synchronizer(fetcher, "/search?searchTerm=first")
        sync.mount()
        await sync.wait_idle()
        sync.change("searchTerm", "second")
        sync.submit()
        await sync.wait_idle()

        history.back()
        await sync.wait_idle()

        assert sync.filters.search_term == "first"
        assert sync.draft.search_term == "first"
        assert [f.search_term for f, _, _ in fetcher.calls] == ["first", "second", "first"]

    @pytest.mark.asyncio
    async def test_navigation_to_other_path_is_ignored(self):
        fetcher = FakeFetcher(make_summaries(5))
        history, sync = make_synchronizer(fetcher, "/search?searchTerm=a")
        sync.mount()
        await sync.wait_idle()

        history.push("/listing/abc123")
        await sync.wait_idle()

        assert len(fetcher.calls) == 1
        assert sync.filters.search_term == "a"

    @pytest.mark.asyncio
    async def test_stale_response_never_replaces_newer_results(self, gated_fetcher):
        history, sync = make_synchronizer(gated_fetcher, "/search?searchTerm=old")
        sync.mount()
        await asyncio.sleep(0)

        history.push("/search?searchTerm=new")
        await asyncio.sleep(0)
        assert len(gated_fetcher.pending) == 2

        gated_fetcher.resolve(1, make_summaries(2, prefix="new"))
        gated_fetcher.resolve(0, make_summaries(9, prefix="old"))
        await sync.wait_idle()

        assert [s.id for s in sync.view.listings] == ["new0", "new1"]
        assert sync.filters.search_term == "new"

    @pytest.mark.asyncio
    async def test_unmount_discards_in_flight_fetch(self, gated_fetcher):
        history, sync = make_synchronizer(gated_fetcher)
        task = sync.mount()
        await asyncio.sleep(0)

        sync.unmount()
        gated_fetcher.resolve(0, make_summaries(9))

        assert await task is False
        assert sync.is_mounted is False
        assert sync.view.status is FetchStatus.IDLE
        assert sync.view.listings == ()

        history.push("/search?searchTerm=x")
        await asyncio.sleep(0)
        assert len(gated_fetcher.pending) == 1
