"""Category Routes — HTTP surface for category lifecycle and ordering.

Invariants:
    - All routes are scoped to /api/v1/teams/{team_id}/categories and the X-User-ID caller
    - Routes only translate HTTP <-> services; domain errors surface through the
      global BoardsError handler
    - /reorder is registered before /{category_id} so it is not captured as an ID
"""

import logging

from fastapi import APIRouter, Depends, status

from board_categories.api.dependencies import get_lifecycle, get_order, get_user_id
from board_categories.core.category import Category
from board_categories.core.enforce_category import check_update_preconditions
from board_categories.core.errors import CategoryPermissionDeniedError, ErrorContext
from board_categories.schemas.category import (
    CategoryBoardsResponse,
    CategoryCreate,
    CategoryResponse,
    CategoryUpdate,
    ReorderRequest,
    ReorderResponse,
)
from board_categories.services.category_lifecycle import CategoryLifecycle
from board_categories.services.category_order import CategoryOrder

logger = logging.getLogger(__name__)
router = APIRouter(prefix="/api/v1/teams/{team_id}/categories", tags=["categories"])


@router.get("", response_model=list[CategoryBoardsResponse])
async def list_categories(
    team_id: str,
    user_id: str = Depends(get_user_id),
    lifecycle: CategoryLifecycle = Depends(get_lifecycle),
):
    """List the caller's categories with their boards, in sort order."""
    return await lifecycle.get_user_category_boards(user_id, team_id)


@router.post(
    "", response_model=CategoryResponse, status_code=status.HTTP_201_CREATED,
)
async def create_category(
    team_id: str,
    body: CategoryCreate,
    user_id: str = Depends(get_user_id),
    lifecycle: CategoryLifecycle = Depends(get_lifecycle),
):
    """Create a custom category for the caller."""
    return await lifecycle.create_category(Category(
        name=body.name,
        user_id=user_id,
        team_id=team_id,
        collapsed=body.collapsed,
        sort_order=body.sort_order,
        sorting=body.sorting,
    ))


@router.put("/reorder", response_model=ReorderResponse)
async def reorder_categories(
    team_id: str,
    body: ReorderRequest,
    user_id: str = Depends(get_user_id),
    order: CategoryOrder = Depends(get_order),
):
    """Replace the caller's category order with a full permutation."""
    new_order = await order.reorder_categories(user_id, team_id, body.order)
    return ReorderResponse(order=new_order)


@router.get("/{category_id}", response_model=CategoryResponse)
async def get_category(
    team_id: str,
    category_id: str,
    user_id: str = Depends(get_user_id),
    lifecycle: CategoryLifecycle = Depends(get_lifecycle),
):
    category = await lifecycle.get_category(category_id)
    if category.user_id != user_id or category.team_id != team_id:
        raise CategoryPermissionDeniedError(ErrorContext(
            user_id=user_id, team_id=team_id, category_id=category_id,
        ))
    return category


@router.put("/{category_id}", response_model=CategoryResponse)
async def update_category(
    team_id: str,
    category_id: str,
    body: CategoryUpdate,
    user_id: str = Depends(get_user_id),
    lifecycle: CategoryLifecycle = Depends(get_lifecycle),
):
    return await lifecycle.update_category(Category(
        id=category_id,
        name=body.name,
        user_id=user_id,
        team_id=team_id,
        collapsed=body.collapsed,
        sort_order=body.sort_order,
        sorting=body.sorting,
    ))


@router.delete("/{category_id}", response_model=CategoryResponse)
async def delete_category(
    team_id: str,
    category_id: str,
    user_id: str = Depends(get_user_id),
    lifecycle: CategoryLifecycle = Depends(get_lifecycle),
):
    """Soft-delete a category; its boards move to the default category."""
    return await lifecycle.delete_category(category_id, user_id, team_id)


@router.put("/{category_id}/boards/reorder", response_model=ReorderResponse)
async def reorder_category_boards(
    team_id: str,
    category_id: str,
    body: ReorderRequest,
    user_id: str = Depends(get_user_id),
    order: CategoryOrder = Depends(get_order),
):
    new_order = await order.reorder_category_boards(
        user_id, team_id, category_id, body.order,
    )
    return ReorderResponse(order=new_order)


@router.post(
    "/{category_id}/boards/{board_id}", status_code=status.HTTP_204_NO_CONTENT,
)
async def add_board_to_category(
    team_id: str,
    category_id: str,
    board_id: str,
    user_id: str = Depends(get_user_id),
    lifecycle: CategoryLifecycle = Depends(get_lifecycle),
):
    """Move a board into one of the caller's active categories."""
    category = await lifecycle.get_category(category_id)
    check_update_preconditions(
        category, Category(id=category_id, user_id=user_id, team_id=team_id),
    )
    await lifecycle.add_update_user_category_board(
        team_id, user_id, category_id, [board_id],
    )
