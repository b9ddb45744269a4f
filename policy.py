"""
Ownership rules for mutating shared documents.

Profiles are always addressed by the authenticated account id, so no
route can ever name another account's profile and there is nothing to
check for them beyond using that id. Posts are shared: anyone signed in
may like or unlike one, only its owner may delete it.
"""

import enum
import logging
from typing import List, Optional

from errors import Conflict, Unauthorized

log = logging.getLogger(__name__)


class Decision(enum.Enum):
    ALLOWED = "allowed"
    DENIED = "denied"
    ALREADY_LIKED = "already_liked"
    NOT_LIKED = "not_liked"


def _same(stored, account_id: str) -> bool:
    return stored is not None and str(stored) == account_id


def check_post_delete(account_id: str, post: dict) -> Decision:
    if _same(post.get("user"), account_id):
        return Decision.ALLOWED
    log.info("Account %s may not delete post %s", account_id, post.get("_id"))
    return Decision.DENIED


def like_index(likes: List[dict], account_id: str) -> Optional[int]:
    """Position of ``account_id`` in ``likes`` or None."""
    for i, like in enumerate(likes):
        if _same(like.get("user"), account_id):
            return i
    return None


def check_like(account_id: str, post: dict) -> Decision:
    if like_index(post.get("likes", []), account_id) is not None:
        return Decision.ALREADY_LIKED
    return Decision.ALLOWED


def check_unlike(account_id: str, post: dict) -> Decision:
    if like_index(post.get("likes", []), account_id) is None:
        return Decision.NOT_LIKED
    return Decision.ALLOWED


def add_like(likes: List[dict], account_id) -> List[dict]:
    # newest first
    return [{"user": account_id}] + list(likes)


def remove_like(likes: List[dict], account_id: str) -> List[dict]:
    index = like_index(likes, account_id)
    if index is None:
        return list(likes)
    return likes[:index] + likes[index + 1:]


def find_blog_entry(profile: dict, blog_id: str) -> Optional[int]:
    """Index of the blog entry ``blog_id`` inside this one profile."""
    for i, entry in enumerate(profile.get("blogpost", [])):
        if str(entry.get("_id")) == blog_id:
            return i
    return None


def enforce(decision: Decision) -> None:
    if decision is Decision.ALLOWED:
        return
    if decision is Decision.DENIED:
        raise Unauthorized("User not authorized")
    if decision is Decision.ALREADY_LIKED:
        raise Conflict("Post already liked")
    if decision is Decision.NOT_LIKED:
        raise Conflict("Post has not yet been liked")
