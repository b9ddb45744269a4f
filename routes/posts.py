import logging

from fastapi import APIRouter, Depends

import policy
from auth import current_account, current_account_id
from database import to_public
from errors import NotFound
from schemas import PostRequest
from stores import PostStore, get_posts

log = logging.getLogger(__name__)

router = APIRouter(prefix="/api/posts", tags=["posts"])


def find_post(post_id: str, posts: PostStore) -> dict:
    post = posts.get(post_id)
    if post is None:
        raise NotFound("Post not found")
    return post


@router.post("")
def create_post(payload: PostRequest,
                owner: dict = Depends(current_account),
                posts: PostStore = Depends(get_posts)):
    return to_public(posts.create(owner, payload.content))


@router.get("", dependencies=[Depends(current_account_id)])
def list_posts(posts: PostStore = Depends(get_posts)):
    return [to_public(p) for p in posts.list()]


@router.get("/{post_id}", dependencies=[Depends(current_account_id)])
def get_post(post_id: str, posts: PostStore = Depends(get_posts)):
    return to_public(find_post(post_id, posts))


@router.delete("/{post_id}")
def delete_post(post_id: str,
                account: dict = Depends(current_account),
                posts: PostStore = Depends(get_posts)):
    post = find_post(post_id, posts)
    policy.enforce(policy.check_post_delete(str(account["_id"]), post))
    posts.delete(post)
    log.info("Account %s deleted post %s", account["_id"], post_id)
    return {"msg": "Post deletion was successful"}


@router.put("/like/{post_id}")
def like_post(post_id: str,
              account: dict = Depends(current_account),
              posts: PostStore = Depends(get_posts)):
    # TODO: read and write are separate calls, two concurrent likes from one
    # account can both pass the check; move to a conditional $push.
    post = find_post(post_id, posts)
    policy.enforce(policy.check_like(str(account["_id"]), post))
    likes = policy.add_like(post.get("likes", []), account["_id"])
    return to_public(posts.save_likes(post, likes))


@router.put("/unlike/{post_id}")
def unlike_post(post_id: str,
                account: dict = Depends(current_account),
                posts: PostStore = Depends(get_posts)):
    post = find_post(post_id, posts)
    account_id = str(account["_id"])
    policy.enforce(policy.check_unlike(account_id, post))
    likes = policy.remove_like(post.get("likes", []), account_id)
    return to_public(posts.save_likes(post, likes))
