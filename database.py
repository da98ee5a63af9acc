"""
MongoDB access for the bootcamp directory.

`Collection` is the narrow persistence interface the controllers use. It hides
ObjectId handling, exposes `_id` as a string `id`, and turns driver failures
into API errors (duplicate keys become validation errors, timeouts become
`PersistenceTimeout`).
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ASCENDING, GEOSPHERE, MongoClient, ReturnDocument
from pymongo.errors import (
    DuplicateKeyError,
    ExecutionTimeout,
    NetworkTimeout,
    ServerSelectionTimeoutError,
    WTimeoutError,
)

from config import DATABASE_NAME, DB_TIMEOUT_MS, MONGO_URI
from errors import NotFound, PersistenceTimeout, ValidationError
from logger import get_logger

logger = get_logger(__name__)

_TIMEOUT_ERRORS = (ExecutionTimeout, NetworkTimeout, ServerSelectionTimeoutError, WTimeoutError)

SortSpec = Sequence[Tuple[str, int]]


def to_obj_id(id_str: Any) -> Optional[ObjectId]:
    """Parse an id, returning None when it is not a valid ObjectId."""
    if id_str is None:
        return None
    if isinstance(id_str, ObjectId):
        return id_str
    try:
        return ObjectId(id_str)
    except (InvalidId, TypeError):
        return None


def sanitize(doc: Optional[Dict]) -> Optional[Dict]:
    if not doc:
        return doc
    d = {**doc}
    if "_id" in d:
        d["id"] = str(d.pop("_id"))
    return d


class Collection:
    """Persistence adapter over a single pymongo collection."""

    def __init__(self, collection, name: Optional[str] = None):
        self._col = collection
        self.name = name or collection.name

    def _run(self, op: str, fn, *args, **kwargs):
        try:
            return fn(*args, **kwargs)
        except DuplicateKeyError as exc:
            keys = ", ".join((exc.details or {}).get("keyValue", {}).keys()) or "key"
            raise ValidationError(f"Duplicate field value entered for {self.name}: {keys}") from exc
        except _TIMEOUT_ERRORS as exc:
            logger.error("database timeout", collection=self.name, op=op, error=str(exc))
            raise PersistenceTimeout(f"Database timed out during {op} on {self.name}") from exc

    def create(self, doc: Dict) -> Dict:
        d = {k: v for k, v in doc.items() if k != "id"}
        res = self._run("create", self._col.insert_one, d)
        d["_id"] = res.inserted_id
        return sanitize(d)

    def find_by_id(self, id_str: str) -> Optional[Dict]:
        _id = to_obj_id(id_str)
        if _id is None:
            return None
        return self.find_one({"_id": _id})

    def get_or_404(self, id_str: str, label: str) -> Dict:
        doc = self.find_by_id(id_str)
        if not doc:
            raise NotFound(f"{label} not found with id of {id_str}")
        return doc

    def find_one(self, filter: Dict) -> Optional[Dict]:
        return sanitize(self._run("find_one", self._col.find_one, filter))

    def find(
        self,
        filter: Optional[Dict] = None,
        *,
        projection: Optional[Iterable[str]] = None,
        sort: Optional[SortSpec] = None,
        skip: int = 0,
        limit: int = 0,
    ) -> List[Dict]:
        def _query():
            cursor = self._col.find(filter or {}, list(projection) if projection else None)
            if sort:
                cursor = cursor.sort(list(sort))
            if skip:
                cursor = cursor.skip(skip)
            if limit:
                cursor = cursor.limit(limit)
            return [sanitize(d) for d in cursor]

        return self._run("find", _query)

    def count(self, filter: Optional[Dict] = None) -> int:
        return self._run("count", self._col.count_documents, filter or {})

    def find_one_and_update(self, filter: Dict, update: Dict) -> Optional[Dict]:
        doc = self._run(
            "find_one_and_update",
            self._col.find_one_and_update,
            filter,
            update,
            return_document=ReturnDocument.AFTER,
        )
        return sanitize(doc)

    def update_by_id(self, id_str: str, update: Dict) -> Optional[Dict]:
        _id = to_obj_id(id_str)
        if _id is None:
            return None
        return self.find_one_and_update({"_id": _id}, update)

    def delete(self, id_str: str) -> bool:
        _id = to_obj_id(id_str)
        if _id is None:
            return False
        return self._run("delete", self._col.delete_one, {"_id": _id}).deleted_count == 1

    def delete_many(self, filter: Optional[Dict] = None) -> int:
        return self._run("delete_many", self._col.delete_many, filter or {}).deleted_count

    def aggregate(self, pipeline: List[Dict]) -> List[Dict]:
        return self._run("aggregate", lambda: list(self._col.aggregate(pipeline)))


class Store:
    """The four collections of the directory."""

    def __init__(self, bootcamps: Collection, courses: Collection, reviews: Collection, users: Collection):
        self.bootcamps = bootcamps
        self.courses = courses
        self.reviews = reviews
        self.users = users

    @classmethod
    def from_database(cls, database) -> "Store":
        return cls(
            bootcamps=Collection(database["bootcamp"]),
            courses=Collection(database["course"]),
            reviews=Collection(database["review"]),
            users=Collection(database["user"]),
        )


def ensure_indexes(database) -> None:
    database["user"].create_index([("email", ASCENDING)], unique=True)
    database["bootcamp"].create_index([("name", ASCENDING)], unique=True)
    database["bootcamp"].create_index([("location", GEOSPHERE)])
    database["bootcamp"].create_index([("user_id", ASCENDING)])
    database["course"].create_index([("bootcamp_id", ASCENDING)])
    # One review per user per bootcamp
    database["review"].create_index([("bootcamp_id", ASCENDING), ("user_id", ASCENDING)], unique=True)
    logger.info("database indexes ensured", database=database.name)


client = MongoClient(
    MONGO_URI,
    serverSelectionTimeoutMS=DB_TIMEOUT_MS,
    connectTimeoutMS=DB_TIMEOUT_MS,
    socketTimeoutMS=DB_TIMEOUT_MS,
    connect=False,
)
db = client[DATABASE_NAME]

_store: Optional[Store] = None


def get_store() -> Store:
    global _store
    if _store is None:
        _store = Store.from_database(db)
    return _store
