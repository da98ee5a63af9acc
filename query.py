"""
Filtering, projection, sorting and pagination for list endpoints.

Query strings follow the form ``?average_cost[lte]=10000&careers[in]=Business
&select=name,description&sort=-average_rating&page=2&limit=10``.
"""

import math
import re
from typing import Any, Dict, Iterable, List, Optional, Tuple

from config import DEFAULT_PAGE_LIMIT, MAX_PAGE_LIMIT
from database import Collection
from errors import ValidationError

RESERVED = {"select", "sort", "page", "limit"}
OPERATORS = {"gt", "gte", "lt", "lte", "in"}

_KEY_RE = re.compile(r"^(?P<field>[A-Za-z_][A-Za-z0-9_.]*)(\[(?P<op>[a-z]+)\])?$")
_NUMBER_RE = re.compile(r"^-?(0|[1-9]\d*)(\.\d+)?$")


def coerce(value: str) -> Any:
    if _NUMBER_RE.match(value):
        return float(value) if "." in value else int(value)
    if value in ("true", "false"):
        return value == "true"
    return value


def build_filter(params: Iterable[Tuple[str, str]], base: Optional[Dict] = None) -> Dict[str, Any]:
    q: Dict[str, Any] = {}
    for key, raw in params:
        if key in RESERVED:
            continue
        m = _KEY_RE.match(key)
        if not m or m.group("field").startswith("$"):
            raise ValidationError(f"Invalid filter: {key}")
        field, op = m.group("field"), m.group("op")
        if op is None:
            q[field] = coerce(raw)
            continue
        if op not in OPERATORS:
            raise ValidationError(f"Invalid filter operator: {op}")
        value = [coerce(v) for v in raw.split(",")] if op == "in" else coerce(raw)
        existing = q.get(field)
        if not isinstance(existing, dict):
            existing = {}
        existing[f"${op}"] = value
        q[field] = existing
    q.update(base or {})
    return q


def parse_sort(raw: Optional[str]) -> List[Tuple[str, int]]:
    if not raw:
        return [("created_at", -1)]
    spec = []
    for part in raw.split(","):
        part = part.strip()
        if not part:
            continue
        spec.append((part[1:], -1) if part.startswith("-") else (part, 1))
    return spec or [("created_at", -1)]


def _to_int(raw: Optional[str], default: int, name: str) -> int:
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError as exc:
        raise ValidationError(f"{name} must be an integer") from exc
    if value < 1:
        raise ValidationError(f"{name} must be at least 1")
    return value


def advanced_results(collection: Collection, params, base: Optional[Dict] = None) -> Dict[str, Any]:
    """Run a list query against `collection` and build the response envelope.

    `params` is a sequence of ``(key, value)`` pairs, e.g. ``request.query_params.multi_items()``.
    `base` holds filter clauses the caller fixes, such as a parent bootcamp id.
    """
    items = list(params)
    lookup = dict(items)
    q = build_filter(items, base)
    projection = [f.strip() for f in lookup["select"].split(",") if f.strip()] if lookup.get("select") else None
    page = _to_int(lookup.get("page"), 1, "page")
    limit = min(_to_int(lookup.get("limit"), DEFAULT_PAGE_LIMIT, "limit"), MAX_PAGE_LIMIT)
    total = collection.count(q)
    data = collection.find(q, projection=projection, sort=parse_sort(lookup.get("sort")), skip=(page - 1) * limit, limit=limit)

    pagination: Dict[str, Any] = {}
    if page * limit < total:
        pagination["next"] = {"page": page + 1, "limit": limit}
    if page > 1:
        pagination["prev"] = {"page": page - 1, "limit": limit}
    return {
        "success": True,
        "count": len(data),
        "total": total,
        "pages": math.ceil(total / limit) if total else 0,
        "pagination": pagination,
        "data": data,
    }
