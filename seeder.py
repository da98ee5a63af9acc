"""
Load or wipe sample data.

Usage:
    python seeder.py import [--data-dir _data]
    python seeder.py destroy
"""

import argparse
import json
import sys
from pathlib import Path
from typing import Dict, List

from aggregates import recompute_average_cost, recompute_average_rating
from bootcamps import resolve_location, slugify
from database import Store, db, ensure_indexes, get_store, to_obj_id
from geocoder import Geocoder, get_geocoder
from logger import get_logger
from schemas import Bootcamp, Course, Review, User
from security import hash_password

logger = get_logger(__name__)

DEFAULT_DATA_DIR = Path(__file__).resolve().parent / "_data"


def _read(data_dir: Path, name: str) -> List[Dict]:
    path = data_dir / f"{name}.json"
    if not path.exists():
        return []
    with path.open(encoding="utf-8") as f:
        return json.load(f)


def _with_id(raw: Dict, doc: Dict) -> Dict:
    if raw.get("_id"):
        doc["_id"] = to_obj_id(raw["_id"])
    return doc


def import_data(store: Store, data_dir: Path, geocoder: Geocoder) -> Dict[str, int]:
    counts = {}

    users = []
    for raw in _read(data_dir, "users"):
        doc = User(
            name=raw["name"],
            email=raw["email"],
            password_hash=hash_password(raw["password"]),
            role=raw.get("role", "user"),
        ).model_dump()
        users.append(store.users.create(_with_id(raw, doc)))
    counts["users"] = len(users)

    bootcamp_ids = []
    for raw in _read(data_dir, "bootcamps"):
        fields = {k: v for k, v in raw.items() if k not in ("_id", "average_cost", "average_rating")}
        fields.setdefault("slug", slugify(fields["name"]))
        if not fields.get("location"):
            fields["location"] = resolve_location(geocoder, fields["address"]).to_point()
        doc = Bootcamp(**fields).model_dump(exclude_none=True)
        bootcamp_ids.append(store.bootcamps.create(_with_id(raw, doc))["id"])
    counts["bootcamps"] = len(bootcamp_ids)

    courses = [store.courses.create(_with_id(raw, Course(**{k: v for k, v in raw.items() if k != "_id"}).model_dump()))
               for raw in _read(data_dir, "courses")]
    counts["courses"] = len(courses)

    reviews = [store.reviews.create(_with_id(raw, Review(**{k: v for k, v in raw.items() if k != "_id"}).model_dump()))
               for raw in _read(data_dir, "reviews")]
    counts["reviews"] = len(reviews)

    for bootcamp_id in bootcamp_ids:
        recompute_average_cost(store, bootcamp_id)
        recompute_average_rating(store, bootcamp_id)
    return counts


def destroy_data(store: Store) -> Dict[str, int]:
    return {
        "bootcamps": store.bootcamps.delete_many(),
        "courses": store.courses.delete_many(),
        "reviews": store.reviews.delete_many(),
        "users": store.users.delete_many(),
    }


def _parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Seed the bootcamp directory database")
    parser.add_argument("command", choices=["import", "destroy"])
    parser.add_argument("--data-dir", type=Path, default=DEFAULT_DATA_DIR)
    return parser.parse_args(argv)


def main(argv=None) -> int:
    args = _parse_args(argv)
    store = get_store()
    if args.command == "import":
        ensure_indexes(db)
        counts = import_data(store, args.data_dir, get_geocoder())
        logger.info("data imported", **counts)
    else:
        counts = destroy_data(store)
        logger.info("data destroyed", **counts)
    return 0


if __name__ == "__main__":
    sys.exit(main())
