"""Category Schemas — Pydantic models for the category API boundary.

Invariants:
    - CategoryCreate/CategoryUpdate.name: 1-100 chars, stripped, non-empty
    - Clients never choose id, user_id, team_id, type or timestamps
    - Reorder bodies are lists of non-empty IDs; an empty list reaches the
      permutation check and fails as a length mismatch

Design Decisions:
    - from_attributes on responses: built straight from core dataclasses
"""

from pydantic import BaseModel, ConfigDict, Field, field_validator


class _CategoryFields(BaseModel):
    name: str = Field(min_length=1, max_length=100)
    collapsed: bool = False
    sort_order: int = Field(0, ge=0)
    sorting: str = Field("", max_length=50)

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("name cannot be empty or whitespace")
        return v


class CategoryCreate(_CategoryFields):
    """Category creation — always a custom category owned by the caller."""


class CategoryUpdate(_CategoryFields):
    """Category update — name is ignored for system categories."""


class CategoryResponse(BaseModel):
    """Category response — public-facing category data."""
    model_config = ConfigDict(from_attributes=True)

    id: str
    name: str
    user_id: str
    team_id: str
    create_at: int
    update_at: int
    delete_at: int
    collapsed: bool
    sort_order: int
    sorting: str
    type: str


class CategoryBoardMetadataResponse(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    board_id: str
    hidden: bool


class CategoryBoardsResponse(CategoryResponse):
    """Category with its ordered board memberships."""
    board_metadata: list[CategoryBoardMetadataResponse]


class ReorderRequest(BaseModel):
    """Full new order of IDs (categories, or boards in one category)."""
    order: list[str]

    @field_validator("order")
    @classmethod
    def reject_blank_ids(cls, v: list[str]) -> list[str]:
        if any(not item.strip() for item in v):
            raise ValueError("order cannot contain empty IDs")
        return v


class ReorderResponse(BaseModel):
    order: list[str]
