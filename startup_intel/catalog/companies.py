"""Read-only startup catalog with search, filtering, sorting and paging."""

import csv
import io
import json
import math
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional

import structlog

from ..config.settings import settings

logger = structlog.get_logger()

SORT_FIELDS = ("name", "industry", "stage")
ALL_INDUSTRIES = "all"
CSV_HEADERS = ["Name", "Website", "Industry", "Stage", "Description"]


@dataclass(frozen=True)
class Company:
    """A company record from the catalog."""
    id: str
    name: str
    website: str
    industry: str
    stage: str
    short_description: str = ""

    @classmethod
    def from_dict(cls, data: dict) -> "Company":
        return cls(
            id=str(data["id"]),
            name=data.get("name", ""),
            website=data.get("website", ""),
            industry=data.get("industry", ""),
            stage=data.get("stage", ""),
            short_description=data.get("shortDescription", ""),
        )

    def to_dict(self) -> dict:
        """Convert to the catalog's JSON shape."""
        return {
            "id": self.id,
            "name": self.name,
            "website": self.website,
            "industry": self.industry,
            "stage": self.stage,
            "shortDescription": self.short_description,
        }


@dataclass
class CompanyQuery:
    """Search, filter, sort and page parameters for the company table."""
    search: str = ""
    industry: str = ALL_INDUSTRIES
    sort_field: Optional[str] = None  # "name", "industry", "stage" or None
    sort_direction: str = "asc"
    page: int = 1


@dataclass
class CompanyPage:
    """One page of query results."""
    items: List[Company] = field(default_factory=list)
    total: int = 0
    page: int = 1
    page_size: int = 10

    @property
    def total_pages(self) -> int:
        return math.ceil(self.total / self.page_size) if self.page_size else 0

    def to_dict(self) -> dict:
        return {
            "items": [c.to_dict() for c in self.items],
            "total": self.total,
            "page": self.page,
            "pageSize": self.page_size,
            "totalPages": self.total_pages,
        }


class CompanyCatalog:
    """Immutable company reference data loaded from a JSON file."""

    def __init__(self, companies: Iterable[Company]):
        self._companies = list(companies)
        self._by_id = {c.id: c for c in self._companies}

    @classmethod
    def load(cls, path: Path = None) -> "CompanyCatalog":
        """Load the catalog from a JSON list of company records."""
        path = Path(path or settings.catalog_path)
        with open(path, encoding="utf-8") as f:
            data = json.load(f)

        catalog = cls(Company.from_dict(item) for item in data)
        logger.info("catalog_loaded", path=str(path), companies=len(catalog))
        return catalog

    def __len__(self) -> int:
        return len(self._companies)

    def all(self) -> List[Company]:
        return list(self._companies)

    def get(self, company_id: str) -> Optional[Company]:
        return self._by_id.get(company_id)

    def industries(self) -> List[str]:
        """Unique industries, sorted."""
        return sorted({c.industry for c in self._companies if c.industry})

    def filter(self, search: str = "", industry: str = ALL_INDUSTRIES) -> List[Company]:
        """Case-insensitive substring search plus exact industry match."""
        companies = self._companies

        query = (search or "").strip().lower()
        if query:
            companies = [
                c for c in companies
                if query in c.name.lower()
                or query in c.short_description.lower()
                or query in c.industry.lower()
            ]

        if industry and industry != ALL_INDUSTRIES:
            companies = [c for c in companies if c.industry == industry]

        return list(companies)

    def query(self, query: CompanyQuery, page_size: int = None) -> CompanyPage:
        """Filter, sort and page the catalog."""
        page_size = page_size or settings.page_size
        companies = self.filter(query.search, query.industry)

        if query.sort_field:
            if query.sort_field not in SORT_FIELDS:
                raise ValueError(f"Unknown sort field: {query.sort_field}")
            companies.sort(
                key=lambda c: (getattr(c, query.sort_field) or "").lower(),
                reverse=query.sort_direction == "desc",
            )

        page = max(query.page, 1)
        start = (page - 1) * page_size
        return CompanyPage(
            items=companies[start:start + page_size],
            total=len(companies),
            page=page,
            page_size=page_size,
        )

    def export_csv(self, company_ids: Iterable[str]) -> str:
        """Render the given companies as CSV, skipping unknown ids."""
        buffer = io.StringIO()
        buffer.write(",".join(CSV_HEADERS) + "\n")
        writer = csv.writer(buffer, quoting=csv.QUOTE_ALL, lineterminator="\n")

        for company_id in company_ids:
            company = self.get(company_id)
            if company is None:
                continue
            writer.writerow([
                company.name,
                company.website,
                company.industry,
                company.stage,
                company.short_description,
            ])

        return buffer.getvalue()
