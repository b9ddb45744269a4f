"""
Collection wrappers for accounts, profiles and posts.

Ids coming from URLs or tokens are parsed with ``to_object_id``; a malformed
id is treated like an id that matches nothing. None of the read-then-write
sequences here are atomic.
"""

from typing import List, Optional

from fastapi import Depends
from pymongo import DESCENDING, ReturnDocument
from pymongo.database import Database

from database import POSTS, PROFILES, USERS, create_document, get_db, get_documents, to_object_id
from schemas import Account, Post


OWNER_FIELDS = ("name", "username", "avatar")


def serialize_account(doc: dict) -> dict:
    """Public view of an account. Never includes the password hash."""
    return {
        "id": str(doc["_id"]),
        "name": doc.get("name") or "",
        "username": doc.get("username") or "",
        "email": doc.get("email") or "",
        "avatar": doc.get("avatar"),
        "date": doc.get("date"),
    }


class AccountStore:
    def __init__(self, db: Database):
        self.db = db
        self.collection = db[USERS]

    def get(self, account_id) -> Optional[dict]:
        oid = to_object_id(account_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def find_by_username(self, username: str) -> Optional[dict]:
        return self.collection.find_one({"username": username})

    def find_by_username_or_email(self, username: str, email: str) -> Optional[dict]:
        return self.collection.find_one({"$or": [{"username": username}, {"email": email}]})

    def create(self, account: Account) -> dict:
        return create_document(self.db, USERS, account)

    def list(self) -> List[dict]:
        return get_documents(self.db, USERS)

    def delete(self, account_id) -> bool:
        oid = to_object_id(account_id)
        if oid is None:
            return False
        return self.collection.delete_one({"_id": oid}).deleted_count == 1


class ProfileStore:
    def __init__(self, db: Database):
        self.db = db
        self.collection = db[PROFILES]
        self.accounts = AccountStore(db)

    def get_by_owner(self, account_id) -> Optional[dict]:
        oid = to_object_id(account_id)
        if oid is None:
            return None
        return self.collection.find_one({"user": oid})

    def list(self) -> List[dict]:
        return get_documents(self.db, PROFILES)

    def upsert(self, account_id: str, fields: dict) -> dict:
        """Create the owner's profile or overwrite its fields. ``user`` never changes."""
        oid = to_object_id(account_id)
        fields = {k: v for k, v in fields.items() if k not in ("_id", "user")}

        existing = self.collection.find_one({"user": oid})
        if existing:
            return self.collection.find_one_and_update(
                {"user": oid},
                {"$set": fields},
                return_document=ReturnDocument.AFTER,
            )

        return create_document(self.db, PROFILES,
                               dict(fields, user=oid, blogpost=[]))

    def save_blog_entries(self, profile: dict, entries: List[dict]) -> dict:
        return self.collection.find_one_and_update(
            {"_id": profile["_id"]},
            {"$set": {"blogpost": entries}},
            return_document=ReturnDocument.AFTER,
        )

    def delete_by_owner(self, account_id) -> bool:
        oid = to_object_id(account_id)
        if oid is None:
            return False
        return self.collection.delete_one({"user": oid}).deleted_count == 1

    def with_owner(self, profile: dict) -> dict:
        """Attach the owner's id, name, username and avatar under ``user``."""
        account = self.accounts.get(profile.get("user"))
        owner = {"_id": profile.get("user")}
        if account is not None:
            owner.update({k: account.get(k) for k in OWNER_FIELDS})
        return dict(profile, user=owner)


class PostStore:
    def __init__(self, db: Database):
        self.db = db
        self.collection = db[POSTS]

    def get(self, post_id) -> Optional[dict]:
        oid = to_object_id(post_id)
        if oid is None:
            return None
        return self.collection.find_one({"_id": oid})

    def list(self) -> List[dict]:
        return get_documents(self.db, POSTS, sort=[("date", DESCENDING)])

    def create(self, owner: dict, content: str) -> dict:
        post = Post(
            user=owner["_id"],
            name=owner.get("name") or "",
            username=owner.get("username") or "",
            avatar=owner.get("avatar"),
            content=content,
        )
        return create_document(self.db, POSTS, post)

    def save_likes(self, post: dict, likes: List[dict]) -> List[dict]:
        self.collection.update_one({"_id": post["_id"]}, {"$set": {"likes": likes}})
        return likes

    def delete(self, post: dict) -> None:
        self.collection.delete_one({"_id": post["_id"]})

    def delete_by_owner(self, account_id) -> int:
        oid = to_object_id(account_id)
        if oid is None:
            return 0
        return self.collection.delete_many({"user": oid}).deleted_count


def get_accounts(db: Database = Depends(get_db)) -> AccountStore:
    return AccountStore(db)


def get_profiles(db: Database = Depends(get_db)) -> ProfileStore:
    return ProfileStore(db)


def get_posts(db: Database = Depends(get_db)) -> PostStore:
    return PostStore(db)
