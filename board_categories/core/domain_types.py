"""Domain Types — enums and constants shared across the codebase.

Invariants:
    - CategoryType values match the `type` column in the categories table
    - DEFAULT_CATEGORY_NAME identifies the default category of a (user, team) scope
    - WebsocketAction values are the `action` field of every change message

Design Decisions:
    - str Enums: serialize to JSON without custom encoders
"""

from enum import Enum


# ─── Enums ───────────────────────────────────────────────────────

class CategoryType(str, Enum):
    """Category kinds — system categories cannot be renamed or deleted."""
    CUSTOM = "custom"
    SYSTEM = "system"


class WebsocketAction(str, Enum):
    """Actions sent to subscribed websocket clients."""
    UPDATE_CATEGORY = "UPDATE_CATEGORY"
    REORDER_CATEGORIES = "REORDER_CATEGORIES"
    UPDATE_BOARD_CATEGORY = "UPDATE_BOARD_CATEGORY"
    REORDER_CATEGORY_BOARDS = "REORDER_CATEGORY_BOARDS"


# ─── Constants ───────────────────────────────────────────────────

DEFAULT_CATEGORY_NAME = "Boards"
CATEGORY_PAGE_SIZE = 50
SORT_ORDER_STEP = 10
