"""Category Domain Model — pure dataclasses for categories and their board memberships.

Invariants:
    - hydrate() fills id, timestamps and type; it never overwrites caller-provided values
    - validate() raises InvalidCategoryError naming the first violated rule
    - delete_at == 0 means active; any other value is the soft-delete time in ms
    - is_default requires both the system type and the default name
    - CategoryBoards.board_metadata preserves the stored board order

Design Decisions:
    - CategoryBoards subclasses Category: a scan visitor can treat both the same way
    - type kept as plain str: the store may hand back values this code does not know,
      and validate() is the single place that rejects them
"""

import base64
import time
import uuid
from dataclasses import asdict, dataclass, field

from board_categories.core.domain_types import CategoryType, DEFAULT_CATEGORY_NAME
from board_categories.core.errors import ErrorContext, InvalidCategoryError


def new_id() -> str:
    """26-char lowercase base32 identifier."""
    return base64.b32encode(uuid.uuid4().bytes).decode("ascii").lower().rstrip("=")


def get_millis() -> int:
    return int(time.time() * 1000)


@dataclass
class Category:
    """A named grouping of boards for one user within one team."""
    id: str = ""
    name: str = ""
    user_id: str = ""
    team_id: str = ""
    create_at: int = 0
    update_at: int = 0
    delete_at: int = 0
    collapsed: bool = False
    sort_order: int = 0
    sorting: str = ""
    type: str = ""

    @property
    def is_deleted(self) -> bool:
        return self.delete_at != 0

    @property
    def is_system(self) -> bool:
        return self.type == CategoryType.SYSTEM.value

    @property
    def is_default(self) -> bool:
        """The scope's default category: the system category named DEFAULT_CATEGORY_NAME."""
        return self.is_system and self.name == DEFAULT_CATEGORY_NAME

    def hydrate(self) -> None:
        """Fill generated fields left empty by the caller."""
        if not self.id:
            self.id = new_id()
        if self.create_at == 0:
            self.create_at = get_millis()
        if self.update_at == 0:
            self.update_at = self.create_at
        if self.sort_order < 0:
            self.sort_order = 0
        if not self.type.strip():
            self.type = CategoryType.CUSTOM.value

    def validate(self) -> None:
        """Raise InvalidCategoryError if a required field is blank or type is unknown."""
        ctx = ErrorContext(
            user_id=self.user_id or None,
            team_id=self.team_id or None,
            category_id=self.id or None,
        )
        if not self.id.strip():
            raise InvalidCategoryError("category ID cannot be empty", ctx)
        if not self.name.strip():
            raise InvalidCategoryError("category name cannot be empty", ctx)
        if not self.user_id.strip():
            raise InvalidCategoryError("category user ID cannot be empty", ctx)
        if not self.team_id.strip():
            raise InvalidCategoryError("category team ID cannot be empty", ctx)
        allowed = (CategoryType.CUSTOM.value, CategoryType.SYSTEM.value)
        if self.type not in allowed:
            raise InvalidCategoryError(
                f"category type is invalid. Allowed types: {' and '.join(allowed)}",
                ctx,
            )

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "name": self.name,
            "user_id": self.user_id,
            "team_id": self.team_id,
            "create_at": self.create_at,
            "update_at": self.update_at,
            "delete_at": self.delete_at,
            "collapsed": self.collapsed,
            "sort_order": self.sort_order,
            "sorting": self.sorting,
            "type": self.type,
        }


@dataclass
class CategoryBoardMetadata:
    """One board membership inside a category."""
    board_id: str
    hidden: bool = False


@dataclass
class CategoryBoards(Category):
    """A category with its ordered board memberships."""
    board_metadata: list[CategoryBoardMetadata] = field(default_factory=list)

    @property
    def board_ids(self) -> list[str]:
        return [m.board_id for m in self.board_metadata]

    def to_dict(self) -> dict:
        data = super().to_dict()
        data["board_metadata"] = [asdict(m) for m in self.board_metadata]
        return data


@dataclass
class BoardCategoryChange:
    """Board moved into a category — payload of a board-category notification."""
    board_id: str
    category_id: str
