"""Pytest configuration and shared fixtures."""

import pytest
from unittest.mock import AsyncMock, MagicMock

from startup_intel.catalog.companies import Company, CompanyCatalog
from startup_intel.extraction.text_extractor import TextExtractor
from startup_intel.ingestion.interfaces import FetcherInterface


LONG_PARAGRAPH = (
    "Acme Robotics builds autonomous warehouse robots that pick, pack and sort "
    "inventory for mid-sized retailers. Our fleet management software schedules "
    "hundreds of robots across multiple sites and integrates with existing WMS tools."
)


class StubFetcher(FetcherInterface):
    """Fetcher that returns canned HTML or raises a canned error."""

    def __init__(self, html: str = "", error: Exception = None):
        self.html = html
        self.error = error
        self.requested = []

    async def fetch(self, url: str) -> str:
        self.requested.append(url)
        if self.error:
            raise self.error
        return self.html


@pytest.fixture
def company_html():
    """A realistic company landing page."""
    return f"""
    <html>
      <head><title>Acme Robotics</title><style>body {{ color: red; }}</style></head>
      <body>
        <header><a href="/">Home</a> <a href="/careers">Careers</a></header>
        <nav>Products Pricing About</nav>
        <main>
          <h1>Warehouse automation for everyone</h1>
          <p>{LONG_PARAGRAPH}</p>
        </main>
        <div class="ad">Buy cheap sunglasses now</div>
        <footer>Copyright 2024 Acme Robotics</footer>
        <script>window.analytics = {{}};</script>
      </body>
    </html>
    """


@pytest.fixture
def model_reply():
    """A complete, well-formed model reply."""
    return '''{
        "summary": "Acme Robotics builds autonomous warehouse robots for retailers.",
        "bullets": [
            "Autonomous picking and packing robots",
            "Fleet management software for multi-site operations",
            "Integrations with existing warehouse management systems"
        ],
        "keywords": ["Robotics", "Warehouse Automation", "Logistics", "Retail", "Fleet Management"],
        "signals": ["Careers page active", "New product line announced"]
    }'''


@pytest.fixture
def mock_llm_client(model_reply):
    """LLM client double returning the well-formed reply."""
    client = MagicMock()
    client.complete = AsyncMock(return_value=model_reply)
    return client


@pytest.fixture
def extractor():
    return TextExtractor(max_chars=4000, min_section_chars=100)


@pytest.fixture
def sample_catalog():
    """A small catalog with predictable contents."""
    return CompanyCatalog([
        Company(id="1", name="Beta Analytics", website="https://beta.example.com",
                industry="SaaS", stage="Seed", short_description="Product analytics for mobile apps."),
        Company(id="2", name="alpha Health", website="https://alpha.example.com",
                industry="Healthcare", stage="Series B", short_description="Remote patient monitoring."),
        Company(id="3", name="Gamma Pay", website="https://gamma.example.com",
                industry="Fintech", stage="Series A", short_description="Payments for SaaS platforms."),
        Company(id="4", name="Delta Logistics", website="https://delta.example.com",
                industry="Logistics", stage="Seed", short_description="Freight matching marketplace."),
        Company(id="5", name="Epsilon Cloud", website="https://epsilon.example.com",
                industry="SaaS", stage="Series C", short_description="Managed databases, \"serverless\" style."),
    ])


@pytest.fixture
def stub_fetcher():
    """The StubFetcher class, for building fetchers with canned responses."""
    return StubFetcher
