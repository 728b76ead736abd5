"""Collection access for admins, permissions and experts"""
from typing import Any, Iterable, List, Optional

from bson import ObjectId
from bson.errors import InvalidId

from zenovia.models import Admin, Expert, Permission
from zenovia.utils.passwords import hash_password


def normalize_email(email: str) -> str:
    return email.strip().lower()


class AdminStore:
    """Admins, unique by email"""

    collection_name = "admins"

    def __init__(self, collection: Any) -> None:
        self.collection = collection

    async def ensure_indexes(self) -> None:
        await self.collection.create_index("email", unique=True)

    async def find_by_email(self, email: str) -> Optional[Admin]:
        document = await self.collection.find_one({"email": normalize_email(email)})
        return Admin.from_document(document) if document else None

    async def email_exists(self, email: str) -> bool:
        document = await self.collection.find_one(
            {"email": normalize_email(email)}, projection={"_id": 1}
        )
        return document is not None

    async def find_by_id(self, admin_id: str) -> Optional[Admin]:
        try:
            object_id = ObjectId(admin_id)
        except (InvalidId, TypeError):
            return None
        document = await self.collection.find_one({"_id": object_id})
        return Admin.from_document(document) if document else None

    async def create(
        self,
        name: str,
        email: str,
        password: str,
        role: str = "admin",
        is_primary: bool = False,
        permissions: Iterable[str] = (),
    ) -> Admin:
        """Insert a new admin, hashing the raw password.

        Raises ``pymongo.errors.DuplicateKeyError`` when the email is taken.
        """
        admin = Admin(
            name=name,
            email=normalize_email(email),
            password=hash_password(password),
            role=role,
            is_primary=is_primary,
            permissions=list(permissions),
        )
        result = await self.collection.insert_one(admin.to_document())
        admin.id = str(result.inserted_id)
        return admin

    async def list_all(self) -> List[Admin]:
        documents = await self.collection.find({}).to_list(length=None)
        admins = [Admin.from_document(document) for document in documents]
        return sorted(admins, key=lambda admin: admin.created_at)


class PermissionStore:
    """Permission records, unique by key"""

    collection_name = "permissions"

    def __init__(self, collection: Any) -> None:
        self.collection = collection

    async def ensure_indexes(self) -> None:
        await self.collection.create_index("key", unique=True)

    async def key_exists(self, key: str) -> bool:
        document = await self.collection.find_one({"key": key}, projection={"_id": 1})
        return document is not None

    async def create(self, key: str, label: str) -> Permission:
        permission = Permission(key=key, label=label)
        result = await self.collection.insert_one(permission.to_document())
        permission.id = str(result.inserted_id)
        return permission

    async def list_all(self) -> List[Permission]:
        documents = await self.collection.find({}).to_list(length=None)
        return [Permission.from_document(document) for document in documents]

    async def count(self) -> int:
        return await self.collection.count_documents({})


class ExpertStore:
    """Expert profiles"""

    collection_name = "experts"

    def __init__(self, collection: Any) -> None:
        self.collection = collection

    async def list_active(self) -> List[Expert]:
        documents = await self.collection.find({"isActive": True}).to_list(length=None)
        experts = [Expert.from_document(document) for document in documents]
        return sorted(experts, key=lambda expert: expert.name)

    async def find_by_id(self, expert_id: str) -> Optional[Expert]:
        try:
            object_id = ObjectId(expert_id)
        except (InvalidId, TypeError):
            return None
        document = await self.collection.find_one({"_id": object_id, "isActive": True})
        return Expert.from_document(document) if document else None
