"""
MongoDB Service - CRUD operations for the portal collections.

Collections in this database:
1. users         - students, companies and admins
2. drives        - job postings with embedded test questions
3. applications  - one document per (student, drive) pair

The stores here only talk to MongoDB. Business rules (eligibility, status
transitions, ownership) live in the feature services that use them.
"""

from datetime import datetime, timezone
from typing import Optional, List, Dict, Any, Iterable
from bson import ObjectId
from bson.errors import InvalidId
from pymongo import ReturnDocument
from pymongo.collection import Collection
from pymongo.errors import DuplicateKeyError

from skillgate.core.errors import ConflictError
from skillgate.db.mongodb import get_collection, COLLECTIONS


# ============================================================
# HELPERS: ids, timestamps and JSON-friendly documents
# ============================================================

def utcnow() -> datetime:
    """Current UTC time as a naive datetime (how BSON dates come back)."""
    return datetime.now(timezone.utc).replace(tzinfo=None)


def to_naive_utc(value: Optional[datetime]) -> Optional[datetime]:
    if value is None or value.tzinfo is None:
        return value
    return value.astimezone(timezone.utc).replace(tzinfo=None)


def parse_object_id(value: Any) -> Optional[ObjectId]:
    """ObjectId for a client-supplied id, or None when it cannot be one."""
    if isinstance(value, ObjectId):
        return value
    try:
        return ObjectId(str(value))
    except (InvalidId, TypeError):
        return None


def serialize_doc(doc: dict) -> dict:
    """Convert MongoDB document to JSON-serializable dict (_id -> id)."""
    if doc is None:
        return None
    doc = dict(doc)
    if "_id" in doc:
        doc["id"] = str(doc.pop("_id"))
    for key, value in doc.items():
        if isinstance(value, ObjectId):
            doc[key] = str(value)
    return doc


def serialize_docs(docs: Iterable[dict]) -> list:
    """Convert list of MongoDB documents to JSON-serializable list."""
    return [serialize_doc(doc) for doc in docs]


def public_user(doc: dict) -> dict:
    """Serialized user without the password hash."""
    user = serialize_doc(doc)
    if user is not None:
        user.pop("password", None)
    return user


# ============================================================
# USERS COLLECTION
# ============================================================

class UserStore:
    """
    Handles user documents (the user directory).
    Email uniqueness is backed by a unique index.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["users"])

    def insert(self, doc: dict) -> dict:
        """Insert a user and return the stored document."""
        now = utcnow()
        doc = {**doc, "createdAt": now, "updatedAt": now}
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("User already exists")
        doc["_id"] = result.inserted_id
        return doc

    def get_by_id(self, user_id: Any) -> Optional[dict]:
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def get_by_email(self, email: str) -> Optional[dict]:
        """Raw document including the password hash."""
        return self.collection.find_one({"email": email})

    def update(self, user_id: Any, fields: Dict[str, Any]) -> Optional[dict]:
        """$set the given fields and return the updated document."""
        oid = parse_object_id(user_id)
        if oid is None:
            return None
        return self.collection.find_one_and_update(
            {"_id": oid},
            {"$set": {**fields, "updatedAt": utcnow()}},
            return_document=ReturnDocument.AFTER
        )

    def count(self, query: Dict[str, Any]) -> int:
        return self.collection.count_documents(query)

    def find_pending(self, roles: List[str]) -> List[dict]:
        cursor = self.collection.find(
            {"status": "pending", "role": {"$in": roles}},
            projection={"password": 0},
            sort=[("createdAt", -1)]
        )
        return list(cursor)


# ============================================================
# DRIVES COLLECTION
# ============================================================

class DriveStore:
    """
    Handles drive documents (the drive catalog).
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["drives"])

    def insert(self, doc: dict) -> dict:
        now = utcnow()
        doc = {**doc, "createdAt": now, "updatedAt": now}
        result = self.collection.insert_one(doc)
        doc["_id"] = result.inserted_id
        return doc

    def get_by_id(self, drive_id: Any) -> Optional[dict]:
        oid = parse_object_id(drive_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def find_active(self, now: datetime) -> List[dict]:
        """Open drives whose deadline has not passed, newest first."""
        cursor = self.collection.find(
            {"status": "active", "deadline": {"$gte": now}},
            sort=[("createdAt", -1)]
        )
        return list(cursor)

    def find_by_company(self, company_id: Any) -> List[dict]:
        cursor = self.collection.find(
            {"companyId": parse_object_id(company_id)},
            sort=[("createdAt", -1)]
        )
        return list(cursor)

    def set_status(self, drive_id: Any, status: str) -> Optional[dict]:
        return self.collection.find_one_and_update(
            {"_id": parse_object_id(drive_id)},
            {"$set": {"status": status, "updatedAt": utcnow()}},
            return_document=ReturnDocument.AFTER
        )


# ============================================================
# APPLICATIONS COLLECTION
# The ledger. One document per (studentId, driveId), unique index backed.
# ============================================================

class ApplicationStore:
    """
    Handles application documents.
    """

    def __init__(self):
        self.collection: Collection = get_collection(COLLECTIONS["applications"])

    def insert(self, student_id: Any, drive_id: Any, status: str = "pending") -> dict:
        """
        Create an application.

        Raises ConflictError if one already exists for the pair; the unique
        index catches the case where a concurrent request won the race.
        """
        now = utcnow()
        doc = {
            "studentId": parse_object_id(student_id),
            "driveId": parse_object_id(drive_id),
            "status": status,
            "appliedAt": now,
            "updatedAt": now,
        }
        try:
            result = self.collection.insert_one(doc)
        except DuplicateKeyError:
            raise ConflictError("Already applied to this drive")
        doc["_id"] = result.inserted_id
        return doc

    def get_by_id(self, application_id: Any) -> Optional[dict]:
        oid = parse_object_id(application_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def find_one(self, student_id: Any, drive_id: Any) -> Optional[dict]:
        return self.collection.find_one({
            "studentId": parse_object_id(student_id),
            "driveId": parse_object_id(drive_id)
        })

    def find_by_student(self, student_id: Any) -> List[dict]:
        cursor = self.collection.find(
            {"studentId": parse_object_id(student_id)},
            sort=[("appliedAt", -1)]
        )
        return list(cursor)

    def find_by_drive(self, drive_id: Any) -> List[dict]:
        cursor = self.collection.find(
            {"driveId": parse_object_id(drive_id)},
            sort=[("appliedAt", -1)]
        )
        return list(cursor)

    def count_for_drives(self, drive_ids: List[Any]) -> int:
        ids = [parse_object_id(d) for d in drive_ids]
        return self.collection.count_documents({"driveId": {"$in": ids}})

    def count_by_drive(self, drive_ids: List[Any]) -> Dict[str, int]:
        """Applicant count per drive id (as strings); drives with none are absent."""
        ids = [parse_object_id(d) for d in drive_ids]
        pipeline = [
            {"$match": {"driveId": {"$in": ids}}},
            {"$group": {"_id": "$driveId", "count": {"$sum": 1}}},
        ]
        return {str(row["_id"]): row["count"] for row in self.collection.aggregate(pipeline)}

    def update(self, application_id: Any, fields: Dict[str, Any]) -> Optional[dict]:
        return self.collection.find_one_and_update(
            {"_id": parse_object_id(application_id)},
            {"$set": {**fields, "updatedAt": utcnow()}},
            return_document=ReturnDocument.AFTER
        )

    def record_test(self, application_id: Any, answers: List[dict]) -> Optional[dict]:
        """
        Store test answers once. Returns None if a submission already exists
        (the filter only matches applications without testSubmittedAt).
        """
        now = utcnow()
        return self.collection.find_one_and_update(
            {"_id": parse_object_id(application_id), "testSubmittedAt": None},
            {"$set": {"answers": answers, "testSubmittedAt": now, "updatedAt": now}},
            return_document=ReturnDocument.AFTER
        )

