"""Integration tests for the HTTP API."""

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi.testclient import TestClient

from startup_intel.api.app import app, get_catalog, get_pipeline
from startup_intel.config.settings import settings
from startup_intel.enrichment.enricher import StructuredEnricher
from startup_intel.enrichment.pipeline import EnrichmentPipeline
from startup_intel.extraction.llm_client import LLMClient
from startup_intel.ingestion.interfaces import UnreachableUrl


@pytest.fixture
def make_client(sample_catalog, extractor):
    """Build a TestClient whose pipeline uses the given fetcher and LLM client."""

    def _make(fetcher=None, llm_client=None):
        pipeline = EnrichmentPipeline(
            fetcher=fetcher,
            extractor=extractor,
            enricher=StructuredEnricher(llm_client=llm_client or MagicMock()),
            min_content_chars=50,
        )
        app.dependency_overrides[get_pipeline] = lambda: pipeline
        app.dependency_overrides[get_catalog] = lambda: sample_catalog
        return TestClient(app)

    yield _make
    app.dependency_overrides.clear()


class TestEnrichEndpoint:
    """POST /api/enrich."""

    def test_success(self, make_client, stub_fetcher, company_html, mock_llm_client):
        client = make_client(stub_fetcher(html=company_html), mock_llm_client)
        response = client.post("/api/enrich", json={"url": "https://acme.example.com"})

        assert response.status_code == 200
        body = response.json()
        assert set(body) == {"summary", "bullets", "keywords", "signals", "sources", "timestamp"}
        assert body["sources"] == ["https://acme.example.com"]

    def test_scheme_less_url_fetched_over_https(self, make_client, stub_fetcher, company_html, mock_llm_client):
        fetcher = stub_fetcher(html=company_html)
        client = make_client(fetcher, mock_llm_client)
        response = client.post("/api/enrich", json={"url": "example.com"})

        assert response.status_code == 200
        assert fetcher.requested == ["https://example.com"]

    @pytest.mark.parametrize("payload", [{}, {"url": ""}, {"url": "   "}, {"url": "not a url"}, {"url": 42}])
    def test_bad_input(self, make_client, stub_fetcher, payload):
        fetcher = stub_fetcher()
        response = make_client(fetcher).post("/api/enrich", json=payload)

        assert response.status_code == 400
        assert response.json()["error"]
        assert fetcher.requested == []

    def test_non_json_body(self, make_client, stub_fetcher):
        response = make_client(stub_fetcher()).post(
            "/api/enrich", content="url=example.com", headers={"Content-Type": "application/json"}
        )
        assert response.status_code == 400
        assert "error" in response.json()

    def test_unreachable_site(self, make_client, stub_fetcher):
        fetcher = stub_fetcher(error=UnreachableUrl("https://slow.example.com", "timed out after 10s"))
        response = make_client(fetcher).post("/api/enrich", json={"url": "slow.example.com"})

        assert response.status_code == 400
        assert "Could not reach the website URL to scrape." in response.json()["error"]

    def test_thin_content(self, make_client, stub_fetcher):
        fetcher = stub_fetcher(html="<body>Only thirty characters of text</body>")
        response = make_client(fetcher).post("/api/enrich", json={"url": "acme.example.com"})

        assert response.status_code == 400
        assert response.json() == {"error": "Failed to extract meaningful content from the website."}

    def test_short_model_reply_padded(self, make_client, stub_fetcher, company_html):
        llm = MagicMock()
        llm.complete = AsyncMock(
            return_value='{"summary":"X","bullets":["a","b"],"keywords":["k1"],"signals":[]}'
        )
        response = make_client(stub_fetcher(html=company_html), llm).post(
            "/api/enrich", json={"url": "acme.example.com"}
        )

        body = response.json()
        assert response.status_code == 200
        assert body["summary"] == "X"
        assert len(body["bullets"]) == 3
        assert len(body["keywords"]) == 5
        assert len(body["signals"]) == 2

    def test_prose_wrapped_model_reply(self, make_client, stub_fetcher, company_html):
        llm = MagicMock()
        llm.complete = AsyncMock(return_value='Here is the JSON: {"summary": "Embedded"} Done.')
        response = make_client(stub_fetcher(html=company_html), llm).post(
            "/api/enrich", json={"url": "acme.example.com"}
        )

        assert response.status_code == 200
        assert response.json()["summary"] == "Embedded"

    def test_missing_credential(self, make_client, stub_fetcher, company_html, monkeypatch):
        monkeypatch.setattr(settings, "openai_api_key", None)
        llm = LLMClient(provider="openai")
        llm.complete = AsyncMock()
        response = make_client(stub_fetcher(html=company_html), llm).post(
            "/api/enrich", json={"url": "acme.example.com"}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "OPENAI_API_KEY is not configured"}
        llm.complete.assert_not_awaited()

    def test_model_failure(self, make_client, stub_fetcher, company_html):
        llm = MagicMock()
        llm.complete = AsyncMock(side_effect=RuntimeError("upstream 502"))
        response = make_client(stub_fetcher(html=company_html), llm).post(
            "/api/enrich", json={"url": "acme.example.com"}
        )

        assert response.status_code == 500
        assert response.json() == {"error": "upstream 502"}

    def test_unexpected_error(self, make_client, stub_fetcher):
        fetcher = stub_fetcher(error=KeyError("surprise"))
        response = make_client(fetcher).post("/api/enrich", json={"url": "acme.example.com"})

        assert response.status_code == 500
        assert response.json() == {"error": "Failed to enrich company data"}


class TestCompanyEnrichEndpoint:
    """POST /api/companies/{id}/enrich."""

    def test_enriches_catalog_website(self, make_client, stub_fetcher, company_html, mock_llm_client):
        fetcher = stub_fetcher(html=company_html)
        response = make_client(fetcher, mock_llm_client).post("/api/companies/3/enrich")

        assert response.status_code == 200
        assert fetcher.requested == ["https://gamma.example.com"]
        assert response.json()["sources"] == ["https://gamma.example.com"]

    def test_unknown_company(self, make_client, stub_fetcher):
        response = make_client(stub_fetcher()).post("/api/companies/999/enrich")
        assert response.status_code == 404
        assert response.json() == {"error": "Company not found"}


class TestCatalogEndpoints:
    """Catalog browsing endpoints."""

    def test_health(self, make_client):
        response = make_client().get("/health")
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
        assert response.json()["companies"] == 5

    def test_list_defaults(self, make_client):
        body = make_client().get("/api/companies").json()
        assert body["total"] == 5
        assert body["page"] == 1
        assert body["totalPages"] == 1
        assert [c["id"] for c in body["items"]] == ["1", "2", "3", "4", "5"]

    def test_list_search_filter_sort(self, make_client):
        body = make_client().get(
            "/api/companies",
            params={"search": "saas", "industry": "SaaS", "sort": "name", "direction": "desc"},
        ).json()
        assert [c["name"] for c in body["items"]] == ["Epsilon Cloud", "Beta Analytics"]

    @pytest.mark.parametrize("params", [{"sort": "website"}, {"direction": "sideways"}, {"page": 0}, {"page": "x"}])
    def test_list_bad_params(self, make_client, params):
        response = make_client().get("/api/companies", params=params)
        assert response.status_code == 400
        assert "error" in response.json()

    def test_get_company(self, make_client):
        body = make_client().get("/api/companies/2").json()
        assert body["name"] == "alpha Health"
        assert body["shortDescription"] == "Remote patient monitoring."

    def test_get_unknown_company(self, make_client):
        response = make_client().get("/api/companies/nope")
        assert response.status_code == 404
        assert response.json() == {"error": "Company not found"}

    def test_industries(self, make_client):
        assert make_client().get("/api/industries").json() == {
            "industries": ["Fintech", "Healthcare", "Logistics", "SaaS"]
        }

    def test_export_list(self, make_client):
        response = make_client().post(
            "/api/lists/export", json={"name": "My Seed Picks", "companyIds": ["4", "1"]}
        )

        assert response.status_code == 200
        assert response.headers["content-type"].startswith("text/csv")
        assert 'filename="My-Seed-Picks.csv"' in response.headers["content-disposition"]
        lines = response.text.splitlines()
        assert len(lines) == 3
        assert lines[1].startswith('"Delta Logistics"')
