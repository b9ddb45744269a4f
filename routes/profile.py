import logging

from fastapi import APIRouter, Depends, Request

from auth import current_account, current_account_id
from database import to_public
from errors import NotFound
from policy import find_blog_entry
from schemas import BlogPostRequest, ProfileRequest
from stores import (AccountStore, PostStore, ProfileStore, get_accounts, get_posts,
                    get_profiles)

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/profile", tags=["profile"])


def own_profile(account_id: str, profiles: ProfileStore) -> dict:
    profile = profiles.get_by_owner(account_id)
    if profile is None:
        raise NotFound("There is no profile for this user")
    return profile


@router.get("/me")
def my_profile(account_id: str = Depends(current_account_id),
               profiles: ProfileStore = Depends(get_profiles)):
    return to_public(profiles.with_owner(own_profile(account_id, profiles)))


@router.post("")
def upsert_profile(payload: ProfileRequest,
                   account: dict = Depends(current_account),
                   profiles: ProfileStore = Depends(get_profiles)):
    # always keyed by the authenticated id, never by anything in the body
    profile = profiles.upsert(str(account["_id"]), payload.to_document())
    return to_public(profile)


@router.get("")
def list_profiles(profiles: ProfileStore = Depends(get_profiles)):
    return [to_public(profiles.with_owner(p)) for p in profiles.list()]


@router.delete("")
def delete_account(account_id: str = Depends(current_account_id),
                   accounts: AccountStore = Depends(get_accounts),
                   profiles: ProfileStore = Depends(get_profiles),
                   posts: PostStore = Depends(get_posts)):
    """Delete the caller's posts, profile and account, in that order."""
    removed = posts.delete_by_owner(account_id)
    profiles.delete_by_owner(account_id)
    accounts.delete(account_id)
    log.info("Deleted account %s with %d posts", account_id, removed)
    return {"msg": "User deleted"}


@router.put("/blogpost")
def add_blog_entry(payload: BlogPostRequest,
                   account_id: str = Depends(current_account_id),
                   profiles: ProfileStore = Depends(get_profiles)):
    profile = own_profile(account_id, profiles)
    entry = payload.to_entry().model_dump(by_alias=True)
    entries = [entry] + profile.get("blogpost", [])
    return to_public(profiles.save_blog_entries(profile, entries))


@router.delete("/blogpost/{blog_id}")
def delete_blog_entry(blog_id: str,
                      account_id: str = Depends(current_account_id),
                      profiles: ProfileStore = Depends(get_profiles)):
    profile = own_profile(account_id, profiles)
    entries = list(profile.get("blogpost", []))
    index = find_blog_entry(profile, blog_id)
    if index is None:
        raise NotFound("Blog post not found")
    del entries[index]
    return to_public(profiles.save_blog_entries(profile, entries))


@router.get("/github/{username}")
def github_repos(username: str, request: Request):
    return request.app.state.github.list_repos(username)


@router.get("/user/{user_id}")
@router.get("/{user_id}")
def profile_by_user(user_id: str, profiles: ProfileStore = Depends(get_profiles)):
    profile = profiles.get_by_owner(user_id)
    if profile is None:
        raise NotFound("Profile not found")
    return to_public(profiles.with_owner(profile))
