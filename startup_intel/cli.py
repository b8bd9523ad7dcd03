"""Command line entry point: serve the API, enrich a URL, or browse the catalog."""

import argparse
import asyncio
import json
import sys

import structlog

from .catalog.companies import ALL_INDUSTRIES, CompanyCatalog, CompanyQuery
from .config.settings import settings
from .enrichment.interfaces import PipelineError
from .enrichment.pipeline import GENERIC_ENRICH_ERROR, EnrichmentPipeline

logger = structlog.get_logger()


def cmd_serve(args):
    import uvicorn
    uvicorn.run("startup_intel.api.app:app", host=args.host, port=args.port, reload=args.reload)


def cmd_enrich(args) -> int:
    try:
        result = asyncio.run(EnrichmentPipeline().run(args.url))
    except PipelineError as e:
        print(f"Error ({e.status_code}): {e.message}", file=sys.stderr)
        return 1
    except Exception as e:
        logger.exception("enrich_unexpected_error", url=args.url, error=str(e))
        print(f"Error (500): {GENERIC_ENRICH_ERROR}", file=sys.stderr)
        return 1

    print(json.dumps(result.to_dict(), indent=2))
    return 0


def cmd_companies(args):
    catalog = CompanyCatalog.load()
    page = catalog.query(CompanyQuery(
        search=args.query,
        industry=args.industry,
        sort_field=args.sort,
        sort_direction="desc" if args.desc else "asc",
        page=args.page,
    ))

    print(f"\n=== COMPANIES (page {page.page}/{max(page.total_pages, 1)}, {page.total} total) ===\n")
    if not page.items:
        print("  No companies found")
        return

    for company in page.items:
        print(f"  [{company.id}] {company.name}  ({company.industry}, {company.stage})")
        print(f"      {company.website}")
        if company.short_description:
            print(f"      {company.short_description}")


def main(argv=None):
    parser = argparse.ArgumentParser(
        description="Startup Intel - company catalog and website enrichment"
    )
    subparsers = parser.add_subparsers(dest="command", help="Commands")

    # serve
    p = subparsers.add_parser("serve", help="Run the HTTP API")
    p.add_argument("--host", default=settings.host, help="Bind address")
    p.add_argument("--port", type=int, default=settings.port, help="Bind port")
    p.add_argument("--reload", action="store_true", help="Reload on code changes")

    # enrich
    p = subparsers.add_parser("enrich", help="Enrich a single website URL")
    p.add_argument("url", help="Website URL (scheme optional)")

    # companies
    p = subparsers.add_parser("companies", help="Search the company catalog")
    p.add_argument("--query", "-q", default="", help="Search name, description and industry")
    p.add_argument("--industry", "-i", default=ALL_INDUSTRIES, help="Exact industry filter")
    p.add_argument("--sort", "-s", choices=["name", "industry", "stage"], help="Sort field")
    p.add_argument("--desc", action="store_true", help="Sort descending")
    p.add_argument("--page", type=int, default=1, help="Page number (1-based)")

    args = parser.parse_args(argv)

    if args.command == "serve":
        cmd_serve(args)
    elif args.command == "enrich":
        return cmd_enrich(args)
    elif args.command == "companies":
        cmd_companies(args)
    else:
        parser.print_help()
    return 0


if __name__ == "__main__":
    sys.exit(main())
