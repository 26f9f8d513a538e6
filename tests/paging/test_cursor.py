"""
Unit tests for pagination cursors and result pages.
"""

import logging

import pytest

from musicbrainz_client.codec import browse_page_decoder
from musicbrainz_client.models import Artist
from musicbrainz_client.paging import (
    AnomalyKind,
    AsyncPagedQuery,
    CursorState,
    PagedQuery,
    ResultPage,
    inspect_page,
)
from musicbrainz_client.runtime.errors import ConfigurationError, InvalidStateError
from musicbrainz_client.transport.async_gate import AsyncRequestGate
from musicbrainz_client.transport.base import LogicalRequest
from musicbrainz_client.transport.executor import AsyncExecutor, Executor
from musicbrainz_client.transport.gate import RequestGate

from helpers import FakeAsyncResponse, FakeAsyncSession, FakeResponse, FakeSession, browse_body, paging_handler

REQUEST = LogicalRequest("GET", "/ws/2/artist", (("fmt", "json"), ("area", "x")))
DECODER = browse_page_decoder(Artist, "artist", "artists")


def make_cursor(config, session, **kwargs):
    return PagedQuery(Executor(RequestGate(config, session)), REQUEST, DECODER, **kwargs)


def offsets_sent(session):
    return [dict(call["params"]).get("offset") for call in session.calls]


class TestPagedQueryNavigation:
    """Tests for next()/previous() offset arithmetic."""

    def test_walks_collection_in_pages(self, config):
        """Test 25 items in pages of 10 come back as 10, 10, 5 at offsets 0, 10, 20."""
        session = FakeSession(handler=paging_handler(25))
        cursor = make_cursor(config, session, limit=10)
        assert cursor.state is CursorState.UNSTARTED
        sizes = []
        offsets = []
        for _ in range(3):
            page = cursor.next()
            sizes.append(len(page))
            offsets.append(page.offset)
        assert sizes == [10, 10, 5]
        assert offsets == [0, 10, 20]
        assert not cursor.has_more
        assert cursor.state is CursorState.POSITIONED
        assert offsets_sent(session) == [None, "10", "20"]
        assert all(dict(call["params"])["limit"] == "10" for call in session.calls)

    def test_next_past_end_returns_empty_page(self, config):
        """Test advancing past the end simply yields an empty page."""
        cursor = make_cursor(config, FakeSession(handler=paging_handler(5)), limit=10)
        cursor.next()
        page = cursor.next()
        assert page.is_empty
        assert page.offset == 5

    def test_previous_before_next(self, config):
        """Test previous() on an unstarted cursor is an invalid-state error."""
        cursor = make_cursor(config, FakeSession(handler=paging_handler(25)), limit=10)
        with pytest.raises(InvalidStateError):
            cursor.previous()

    def test_previous_clamps_at_zero(self, config):
        """Test previous() from offset 5 with limit 10 goes to offset 0."""
        session = FakeSession(handler=paging_handler(25))
        cursor = make_cursor(config, session, limit=10, offset=5)
        assert cursor.next().offset == 5
        page = cursor.previous()
        assert page.offset == 0
        assert offsets_sent(session) == ["5", None]

    def test_previous_steps_back(self, config):
        """Test previous() after two pages returns to the first."""
        cursor = make_cursor(config, FakeSession(handler=paging_handler(25)), limit=10)
        cursor.next()
        cursor.next()
        assert cursor.previous().offset == 0

    def test_previous_without_limit_uses_page_size(self, config):
        """Test previous() falls back to the size of the last page when no limit is pinned."""
        session = FakeSession(handler=paging_handler(100))
        cursor = make_cursor(config, session, offset=50)
        page = cursor.next()
        assert len(page) == 25
        assert cursor.previous().offset == 25
        assert all("limit" not in dict(call["params"]) for call in session.calls)

    def test_initial_offset_and_params(self, config):
        """Test the initial offset is sent and offset 0 is omitted."""
        session = FakeSession(handler=paging_handler(25))
        cursor = make_cursor(config, session, offset=3)
        cursor.next()
        params = session.calls[0]["params"]
        assert params[:2] == [("fmt", "json"), ("area", "x")]
        assert ("offset", "3") in params

    @pytest.mark.parametrize("kwargs", [{"limit": 0}, {"limit": 101}, {"offset": -1}])
    def test_invalid_arguments(self, config, kwargs):
        """Test out-of-range limit or offset is rejected up front."""
        with pytest.raises(ConfigurationError):
            make_cursor(config, FakeSession(), **kwargs)


class TestOffsetDrift:
    """Tests for server offset inconsistencies."""

    def test_offset_mismatch_recorded_and_adopted(self, config, caplog):
        """Test a server answering at offset 7 for a request of 10 is logged and followed."""
        responses = [
            FakeResponse(200, browse_body("artist", "artists", [{"id": "00000000-0000-0000-0000-00000000000%d" % i}
                                                                for i in range(5)], 0, 30)),
            FakeResponse(200, browse_body("artist", "artists", [{"id": "00000000-0000-0000-0000-00000000001%d" % i}
                                                                for i in range(5)], 7, 30)),
            FakeResponse(200, browse_body("artist", "artists", [], 12, 30)),
        ]
        session = FakeSession(responses)
        cursor = make_cursor(config, session, limit=5)
        cursor.next()
        with caplog.at_level(logging.WARNING, logger="musicbrainz_client.paging.page"):
            page = cursor.next()
        assert page.offset == 7
        assert page.requested_offset == 5
        assert page.anomaly.kind is AnomalyKind.OFFSET_MISMATCH
        assert page.anomaly.requested_offset == 5
        assert page.anomaly.reported_offset == 7
        assert len(cursor.anomalies) == 1
        assert "unexpected offset" in caplog.text
        cursor.next()
        assert offsets_sent(session)[-1] == "12"

    def test_drift_on_every_page(self, config):
        """Test a consistently shifted server still produces forward progress."""
        cursor = make_cursor(config, FakeSession(handler=paging_handler(40, drift=2)), limit=10)
        first = cursor.next()
        second = cursor.next()
        assert first.offset == 2
        assert second.offset == 14
        assert len(cursor.anomalies) == 2


class TestInspectPage:
    """Tests for the page consistency check."""

    def test_total_exceeded(self, caplog):
        """Test a page reaching past the declared total is flagged, not fatal."""
        page = ResultPage(items=(1, 2, 3), offset=9, total=10)
        with caplog.at_level(logging.WARNING):
            checked = inspect_page(page, 9, 3)
        assert checked.anomaly.kind is AnomalyKind.TOTAL_EXCEEDED
        assert checked.limit == 3
        assert checked.items == (1, 2, 3)
        assert "past reported total" in caplog.text

    def test_consistent_page(self):
        """Test a consistent page carries no anomaly."""
        checked = inspect_page(ResultPage(items=(1,), offset=0, total=1), 0, None)
        assert not checked.has_anomaly
        assert checked.end == 1


class TestIteration:
    """Tests for pages() and items()."""

    def test_items_flattens_all_pages(self, config):
        """Test items() yields every item once, in order."""
        session = FakeSession(handler=paging_handler(23))
        cursor = make_cursor(config, session, limit=10)
        names = [artist.name for artist in cursor.items()]
        assert names == [f"Artist {n}" for n in range(23)]
        assert len(session.calls) == 3

    def test_pages_stop_on_empty(self, config):
        """Test pages() stops after an empty page even if total claims more."""
        responses = [
            FakeResponse(200, browse_body("artist", "artists", [], 0, 50)),
        ]
        cursor = make_cursor(config, FakeSession(responses))
        pages = list(cursor.pages())
        assert len(pages) == 1

    def test_single_shot_variant(self, config):
        """Test a single-shot cursor sends no paging parameters and cannot go back."""
        session = FakeSession(handler=paging_handler(3, entity="artist"))
        cursor = make_cursor(config, session, single_shot=True)
        page = cursor.next()
        assert len(page) == 3
        assert not cursor.has_more
        assert session.calls[0]["params"] == [("fmt", "json"), ("area", "x")]
        with pytest.raises(InvalidStateError):
            cursor.previous()


class TestAsyncPagedQuery:
    """Tests for the asynchronous cursor."""

    @pytest.mark.asyncio
    async def test_async_items(self, config):
        """Test async iteration over two pages."""

        def handler(call):
            offset = int(dict(call["params"]).get("offset", 0))
            items = [{"id": f"00000000-0000-0000-0000-{n:012d}", "name": f"A{n}"}
                     for n in range(offset, min(offset + 2, 3))]
            return FakeAsyncResponse(200, browse_body("artist", "artists", items, offset, 3))

        session = FakeAsyncSession(handler=handler)
        cursor = AsyncPagedQuery(AsyncExecutor(AsyncRequestGate(config, session)), REQUEST, DECODER, limit=2)
        names = [artist.name async for artist in cursor]
        assert names == ["A0", "A1", "A2"]
        page = await cursor.previous()
        assert page.offset == 0
