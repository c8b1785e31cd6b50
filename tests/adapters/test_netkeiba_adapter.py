# tests/adapters/test_netkeiba_adapter.py
import httpx
import pytest
import respx

from harvest_service.adapters.netkeiba_adapter import NetkeibaAdapter
from harvest_service.core.exceptions import ClassificationReject
from harvest_service.core.exceptions import ExtractionReject
from harvest_service.models import FetchStatus
from tests.utils import heuristic_rows
from tests.utils import make_candidate
from tests.utils import race_page_html
from tests.utils import structured_rows

ENTRY_URL = "https://en.netkeiba.com/race/shutuba.html?race_id=202605050811"


@pytest.fixture
def adapter(test_settings):
    return NetkeibaAdapter(config=test_settings)


def test_build_url_uses_page_kind(test_settings):
    candidate = make_candidate()
    assert NetkeibaAdapter(config=test_settings).build_url(candidate) == ENTRY_URL

    result_settings = test_settings.model_copy(update={"PAGE_KIND": "result"})
    assert NetkeibaAdapter(config=result_settings).build_url(candidate).endswith(
        "/race/result.html?race_id=202605050811"
    )


def test_headers_look_like_a_browser(adapter):
    headers = adapter._get_headers()
    assert headers["User-Agent"].startswith("Mozilla/5.0")
    assert headers["Referer"] == "https://en.netkeiba.com/"


@pytest.mark.asyncio
@respx.mock
async def test_fetch_success(adapter):
    route = respx.get(ENTRY_URL).mock(return_value=httpx.Response(200, text=race_page_html()))

    async with httpx.AsyncClient() as client:
        adapter.http_client = client
        outcome = await adapter.fetch(make_candidate())

    assert route.called
    assert "Mozilla/5.0" in route.calls.last.request.headers["User-Agent"]
    assert outcome.status is FetchStatus.SUCCESS
    assert "Japan Cup" in outcome.body


@pytest.mark.asyncio
@pytest.mark.parametrize(
    "response,expected",
    [
        (httpx.Response(404), FetchStatus.NOT_FOUND),
        (httpx.Response(200, text="   "), FetchStatus.NOT_FOUND),
        (httpx.Response(503), FetchStatus.TRANSIENT_ERROR),
        (httpx.Response(403), FetchStatus.TRANSIENT_ERROR),
    ],
)
async def test_fetch_status_mapping(adapter, response, expected):
    with respx.mock:
        respx.get(ENTRY_URL).mock(return_value=response)
        async with httpx.AsyncClient() as client:
            adapter.http_client = client
            outcome = await adapter.fetch(make_candidate())

    assert outcome.status is expected


@pytest.mark.asyncio
@pytest.mark.parametrize("error", [httpx.ConnectError("refused"), httpx.ReadTimeout("slow")])
async def test_fetch_transport_errors_are_transient(adapter, error):
    with respx.mock:
        respx.get(ENTRY_URL).mock(side_effect=error)
        async with httpx.AsyncClient() as client:
            adapter.http_client = client
            outcome = await adapter.fetch(make_candidate())

    assert outcome.status is FetchStatus.TRANSIENT_ERROR
    assert outcome.error


def test_parse_document_builds_race_record(adapter, fixed_now):
    record = adapter.parse_document(race_page_html(), make_candidate(), fixed_now, source_url=ENTRY_URL)

    assert record.title == "Japan Cup (G1)"
    assert record.grade == "G1"
    assert record.venue == "Tokyo"
    assert record.distance == "2400m"
    assert [h.position for h in record.horses] == [1, 2, 3, 4]
    assert record.source_urls == [ENTRY_URL]


def test_parse_prefers_structured_rows(adapter, fixed_now):
    html = race_page_html(rows=structured_rows(5), row_class="HorseList")
    record = adapter.parse_document(html, make_candidate(), fixed_now)

    assert [(h.position, h.jockey) for h in record.horses][:2] == [(1, "M. Demuro"), (2, "C. Lemaire")]
    assert len(record.horses) == 5


def test_parse_rejects_three_horse_table(adapter, fixed_now):
    html = race_page_html(rows=heuristic_rows(3))
    with pytest.raises(ExtractionReject):
        adapter.parse_document(html, make_candidate(), fixed_now)


def test_parse_rejects_brand_only_page(adapter, fixed_now):
    with pytest.raises(ClassificationReject):
        adapter.parse_document(race_page_html(title="netkeiba"), make_candidate(), fixed_now)


def test_parse_is_idempotent(adapter, fixed_now):
    html = race_page_html()
    first = adapter.parse_document(html, make_candidate(), fixed_now)
    second = adapter.parse_document(html, make_candidate(), fixed_now)
    assert first == second
