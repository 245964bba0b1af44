# src/threadline/api/v1/endpoints/posts.py
"""Post-related endpoints for the Threadline API."""

from fastapi import APIRouter, Query, status

from threadline.core.errors import ThreadlineError
from threadline.core.settings import settings
from threadline.repositories.post_repo import PostRepository
from threadline.schemas.post import PaginatedPosts, PostCreate, PostOut, PostUpdate
from threadline.services import feed, post_service

from ..dependencies import CurrentUserIdDep, SessionDep, ViewerIdDep, to_http_error

router = APIRouter(prefix="/posts", tags=["posts"])


@router.get("/", response_model=PaginatedPosts)
async def list_posts(
    db: SessionDep,
    viewer_id: ViewerIdDep,
    limit: int = Query(
        10,
        description=f"Page size; values above {settings.feed_max_limit} are clamped",
    ),
    cursor: str | None = Query(
        None,
        description="nextCursor from the previous page; omit for the first page",
    ),
) -> PaginatedPosts:
    """List posts newest first with keyset pagination.

    Args:
        db: Database session
        viewer_id: Signed-in user, if any; their own votes are attached
        limit: Maximum number of posts to return
        cursor: Position after the last post of the previous page

    Returns:
        A page of posts and whether more remain

    Raises:
        HTTPException: 400 with field errors if the cursor is malformed
    """
    try:
        page = feed.list_posts(
            PostRepository(db),
            limit=limit,
            cursor=cursor,
            viewer_id=viewer_id,
        )
    except ThreadlineError as exc:
        raise to_http_error(exc) from exc

    return PaginatedPosts(
        posts=[PostOut.model_validate(post) for post in page.posts],
        has_more=page.has_more,
        next_cursor=page.next_cursor,
    )


@router.get("/{post_id}", response_model=PostOut | None)
async def get_post(post_id: int, db: SessionDep, viewer_id: ViewerIdDep) -> PostOut | None:
    """Get a specific post by ID, or null if it does not exist."""
    post = post_service.get_post(db, post_id=post_id, viewer_id=viewer_id)
    return PostOut.model_validate(post) if post is not None else None


@router.post("/", response_model=PostOut, status_code=status.HTTP_201_CREATED)
async def create_post(
    post_data: PostCreate,
    user_id: CurrentUserIdDep,
    db: SessionDep,
) -> PostOut:
    """Create a new post owned by the signed-in user."""
    post = post_service.create_post(
        db,
        creator_id=user_id,
        title=post_data.title,
        text=post_data.text,
    )
    return PostOut.model_validate(post)


@router.patch("/{post_id}", response_model=PostOut | None)
async def update_post(
    post_id: int,
    post_data: PostUpdate,
    user_id: CurrentUserIdDep,
    db: SessionDep,
) -> PostOut | None:
    """Edit the title and/or text of one of the caller's posts.

    Returns null if the post does not exist.

    Raises:
        HTTPException: 403 if the caller did not create the post
    """
    try:
        post = post_service.update_post(
            db,
            actor_id=user_id,
            post_id=post_id,
            title=post_data.title,
            text=post_data.text,
        )
    except ThreadlineError as exc:
        raise to_http_error(exc) from exc
    return PostOut.model_validate(post) if post is not None else None


@router.delete("/{post_id}")
async def delete_post(post_id: int, user_id: CurrentUserIdDep, db: SessionDep) -> bool:
    """Delete one of the caller's posts along with its votes.

    Raises:
        HTTPException: 404 if the post is absent, 403 if the caller is not its creator
    """
    try:
        return post_service.delete_post(db, actor_id=user_id, post_id=post_id)
    except ThreadlineError as exc:
        raise to_http_error(exc) from exc
