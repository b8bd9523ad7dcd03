"""Company reference catalog."""

from .companies import Company, CompanyCatalog, CompanyPage, CompanyQuery

__all__ = ["Company", "CompanyCatalog", "CompanyPage", "CompanyQuery"]
