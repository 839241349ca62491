#!/usr/bin/env python3
"""
Search listings from the command line.

Usage:
    python scripts/search_properties.py --district 47 --type apartment --max-price 20000
    python scripts/search_properties.py --near 23.78 90.41 --radius 3 --output results.json
"""

import argparse
import asyncio
import json
import sys
from pathlib import Path

project_root = Path(__file__).parent.parent

from dotenv import load_dotenv
load_dotenv(project_root / ".env")

from babui.config import get_settings
from babui.db.repository import PropertyRepository
from babui.logging import setup_logging
from babui.search.filters import Filters
from babui.stores.property_store import PropertyStore
from babui.utils.bangladesh import format_bdt


def parse_args(argv=None):
    parser = argparse.ArgumentParser(description="Search Babui listings")
    parser.add_argument("--division")
    parser.add_argument("--district")
    parser.add_argument("--thana")
    parser.add_argument("--area", dest="sub_area")
    parser.add_argument("--type")
    parser.add_argument("--min-price", type=float)
    parser.add_argument("--max-price", type=float)
    parser.add_argument("--bedrooms", type=int)
    parser.add_argument("--bathrooms", type=int)
    parser.add_argument("--amenity", action="append", dest="amenities", default=[])
    parser.add_argument("--near", nargs=2, type=float, metavar=("LAT", "LNG"))
    parser.add_argument("--radius", type=float, help="km, used with --near")
    parser.add_argument("--output", help="write results as JSON to this file")
    parser.add_argument("--bn", action="store_true", help="prices in Bengali digits")
    return parser.parse_args(argv)


async def run(args) -> int:
    settings = get_settings()
    setup_logging(settings.log_level, json=settings.log_json)

    filters = Filters(
        division=args.division,
        district=args.district,
        thana=args.thana,
        sub_area=args.sub_area,
        type=args.type,
        min_price=args.min_price,
        max_price=args.max_price,
        bedrooms=args.bedrooms,
        bathrooms=args.bathrooms,
        amenities=args.amenities,
    )

    store = PropertyStore(PropertyRepository())
    results = await store.fetch(filters) or []
    if args.near:
        results = store.near(args.near[0], args.near[1], args.radius or settings.nearby_radius_km)

    language = "bn" if args.bn else "en"
    for prop in results:
        where = ", ".join(filter(None, [prop.location.area, prop.location.thana, prop.location.district]))
        print(f"{prop.id:>8}  {format_bdt(prop.price, language):>12}  {prop.type:<10} {prop.title[:40]:<40} {where}")
    print("-" * 50)
    print(f"{len(results)} listings")

    if args.output:
        with open(args.output, "w") as f:
            json.dump([p.model_dump(mode="json") for p in results], f, indent=2, ensure_ascii=False)
        print(f"Saved to {args.output}")

    return 0


def main():
    sys.exit(asyncio.run(run(parse_args())))


if __name__ == "__main__":
    main()
