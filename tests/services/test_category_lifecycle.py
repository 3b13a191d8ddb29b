"""Category Lifecycle — tests for create, update, delete and the default category.

Tests cover:
    - create hydrates, validates, persists and notifies the stored copy
    - update keeps type, heals system categories, rejects foreign or deleted targets
    - update loses a compare-and-set race with ConcurrencyError
    - delete is idempotent, protects system categories and moves boards to the default
    - only the system "Boards" category is a board destination, never the deleted one
    - get_user_category_boards creates exactly one default category, reusing one
      created concurrently

Invariants:
    - A rejected operation leaves the store untouched and sends no notification
"""

import pytest

from board_categories.core.category import Category
from board_categories.core.errors import (
    CannotDeleteSystemCategoryError,
    CategoryDeletedError,
    CategoryNotFoundError,
    CategoryPermissionDeniedError,
    ConcurrencyError,
    DatabaseError,
    InvalidCategoryError,
    NoDefaultCategoryError,
)
from board_categories.services.category_lifecycle import CategoryLifecycle
from board_categories.services.category_order import CategoryOrder


def _make_lifecycle(store, notifier) -> CategoryLifecycle:
    return CategoryLifecycle(store, notifier, per_page=2)


def _seed_default(store, user_id="u1", team_id="t1", board_ids=None) -> Category:
    return store.seed(
        Category(
            id="default", name="Boards", user_id=user_id, team_id=team_id,
            type="system",
        ),
        board_ids,
    )


def _seed_custom(store, category_id="work", board_ids=None, **overrides) -> Category:
    fields = {"id": category_id, "name": "Work", "user_id": "u1", "team_id": "t1",
              "sort_order": 10}
    fields.update(overrides)
    return store.seed(Category(**fields), board_ids)


def _writes(store) -> list[str]:
    return [c for c in store.calls if c not in ("get_category", "get_user_categories")]


# ─── create_category ─────────────────────────────────────────────

async def test_create_persists_hydrated_category(memory_store, notifier, broadcaster):
    lifecycle = _make_lifecycle(memory_store, notifier)

    created = await lifecycle.create_category(
        Category(name="Work", user_id="u1", team_id="t1"),
    )
    await notifier.drain()

    assert created.id
    assert created.type == "custom"
    assert created.create_at == created.update_at > 0
    assert memory_store.categories[created.id].name == "Work"
    assert broadcaster.of("category_change") == [(created,)]


async def test_create_rejects_blank_name(memory_store, notifier, broadcaster):
    lifecycle = _make_lifecycle(memory_store, notifier)

    with pytest.raises(InvalidCategoryError):
        await lifecycle.create_category(Category(name=" ", user_id="u1", team_id="t1"))
    await notifier.drain()

    assert memory_store.calls == []
    assert broadcaster.events == []


async def test_create_rejects_default_name_for_custom_category(
    memory_store, notifier, broadcaster,
):
    lifecycle = _make_lifecycle(memory_store, notifier)

    with pytest.raises(InvalidCategoryError) as exc:
        await lifecycle.create_category(Category(name="Boards", user_id="u1", team_id="t1"))
    await notifier.drain()

    assert "reserved" in exc.value.message
    assert memory_store.calls == []
    assert broadcaster.events == []


async def test_create_fails_when_reread_fails(memory_store, notifier, broadcaster):
    lifecycle = _make_lifecycle(memory_store, notifier)
    memory_store.fail_on["get_category"] = DatabaseError("gone", "select")

    with pytest.raises(DatabaseError):
        await lifecycle.create_category(Category(name="Work", user_id="u1", team_id="t1"))
    await notifier.drain()

    assert broadcaster.events == []


# ─── update_category ─────────────────────────────────────────────

async def test_update_changes_presentation_fields(memory_store, notifier, broadcaster):
    existing = _seed_custom(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)

    updated = await lifecycle.update_category(Category(
        id="work", name="Projects", user_id="u1", team_id="t1",
        collapsed=True, sorting="manual", sort_order=20,
    ))
    await notifier.drain()

    assert updated.name == "Projects"
    assert updated.collapsed is True
    assert updated.sort_order == 20
    assert updated.create_at == existing.create_at
    assert updated.update_at >= existing.update_at
    assert broadcaster.of("category_change") == [(updated,)]


async def test_update_cannot_change_type(memory_store, notifier):
    _seed_custom(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)

    updated = await lifecycle.update_category(Category(
        id="work", name="Work", user_id="u1", team_id="t1", type="system",
    ))

    assert updated.type == "custom"


async def test_update_system_category_keeps_name_and_stays_active(memory_store, notifier):
    _seed_default(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)

    updated = await lifecycle.update_category(Category(
        id="default", name="Renamed", user_id="u1", team_id="t1",
        type="custom", delete_at=123, collapsed=True,
    ))

    assert updated.name == "Boards"
    assert updated.type == "system"
    assert updated.delete_at == 0
    assert updated.collapsed is True


async def test_update_cannot_rename_custom_category_to_default_name(
    memory_store, notifier,
):
    _seed_custom(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)

    with pytest.raises(InvalidCategoryError):
        await lifecycle.update_category(Category(
            id="work", name="Boards", user_id="u1", team_id="t1", type="system",
        ))

    assert "update_category" not in memory_store.calls
    assert memory_store.categories["work"].name == "Work"


async def test_update_rejects_other_users_category(memory_store, notifier, broadcaster):
    _seed_custom(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)

    with pytest.raises(CategoryPermissionDeniedError):
        await lifecycle.update_category(Category(
            id="work", name="Mine", user_id="u2", team_id="t1",
        ))
    await notifier.drain()

    assert "update_category" not in memory_store.calls
    assert broadcaster.events == []


async def test_update_rejects_deleted_category(memory_store, notifier):
    _seed_custom(memory_store, delete_at=99)
    lifecycle = _make_lifecycle(memory_store, notifier)

    with pytest.raises(CategoryDeletedError):
        await lifecycle.update_category(Category(
            id="work", name="Work", user_id="u1", team_id="t1",
        ))


async def test_update_unknown_category_is_not_found(memory_store, notifier):
    lifecycle = _make_lifecycle(memory_store, notifier)
    with pytest.raises(CategoryNotFoundError):
        await lifecycle.update_category(Category(
            id="missing", name="Work", user_id="u1", team_id="t1",
        ))


async def test_update_loses_race_to_concurrent_writer(memory_store, notifier, broadcaster):
    _seed_custom(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)
    original_get = memory_store.get_category

    async def get_then_concurrent_write(category_id):
        category = await original_get(category_id)
        memory_store.categories[category_id].update_at += 1
        return category

    memory_store.get_category = get_then_concurrent_write

    with pytest.raises(ConcurrencyError) as exc:
        await lifecycle.update_category(Category(
            id="work", name="Projects", user_id="u1", team_id="t1",
        ))
    await notifier.drain()

    assert exc.value.http_status == 409
    assert memory_store.categories["work"].name == "Work"
    assert broadcaster.events == []


# ─── delete_category ─────────────────────────────────────────────

async def test_delete_moves_boards_to_default(memory_store, notifier, broadcaster):
    _seed_default(memory_store, board_ids=["b0"])
    _seed_custom(memory_store, board_ids=["b1", "b2"])
    lifecycle = _make_lifecycle(memory_store, notifier)

    deleted = await lifecycle.delete_category("work", "u1", "t1")
    await notifier.drain()

    assert deleted.delete_at > 0
    assert memory_store.boards["default"] == ["b0", "b1", "b2"]
    assert memory_store.boards["work"] == []
    # boards are moved before the soft delete
    assert _writes(memory_store) == ["add_update_user_category_board", "delete_category"]

    (team_id, user_id, changes), = broadcaster.of("category_board_change")
    assert (team_id, user_id) == ("t1", "u1")
    assert [(c.board_id, c.category_id) for c in changes] == [
        ("b1", "default"), ("b2", "default"),
    ]
    assert broadcaster.of("category_change") == [(deleted,)]


async def test_reorder_after_delete_keeps_default_first(memory_store, notifier):
    _seed_default(memory_store)
    _seed_custom(memory_store, board_ids=["b1", "b2"])
    lifecycle = _make_lifecycle(memory_store, notifier)
    order = CategoryOrder(memory_store, notifier, per_page=2)

    await lifecycle.delete_category("work", "u1", "t1")

    assert await order.reorder_categories("u1", "t1", ["default"]) == ["default"]
    remaining = await lifecycle.get_user_category_boards("u1", "t1")
    assert [c.id for c in remaining] == ["default"]
    assert remaining[0].board_ids == ["b1", "b2"]


async def test_delete_custom_category_named_like_default(memory_store, notifier):
    # legacy row: a custom category carrying the default name, listed first
    _seed_custom(memory_store, category_id="legacy", name="Boards", sort_order=0,
                 board_ids=["b1", "b2"])
    memory_store.seed(Category(
        id="default", name="Boards", user_id="u1", team_id="t1",
        type="system", sort_order=10,
    ))
    lifecycle = _make_lifecycle(memory_store, notifier)

    await lifecycle.delete_category("legacy", "u1", "t1")

    assert memory_store.boards["default"] == ["b1", "b2"]
    assert memory_store.boards["legacy"] == []
    assert memory_store.categories["legacy"].delete_at > 0


async def test_deleted_category_is_never_its_own_destination(memory_store, notifier):
    _seed_custom(memory_store, category_id="legacy", name="Boards", board_ids=["b1"])
    lifecycle = _make_lifecycle(memory_store, notifier)

    with pytest.raises(NoDefaultCategoryError):
        await lifecycle.delete_category("legacy", "u1", "t1")

    assert memory_store.categories["legacy"].delete_at == 0
    assert memory_store.boards["legacy"] == ["b1"]


async def test_delete_empty_category_skips_board_move(memory_store, notifier, broadcaster):
    _seed_default(memory_store)
    _seed_custom(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)

    await lifecycle.delete_category("work", "u1", "t1")
    await notifier.drain()

    assert _writes(memory_store) == ["delete_category"]
    assert broadcaster.of("category_board_change") == []


async def test_delete_is_idempotent(memory_store, notifier, broadcaster):
    _seed_default(memory_store)
    _seed_custom(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)

    first = await lifecycle.delete_category("work", "u1", "t1")
    await notifier.drain()
    events_after_first = len(broadcaster.events)

    second = await lifecycle.delete_category("work", "u1", "t1")
    await notifier.drain()

    assert second == first
    assert memory_store.calls.count("delete_category") == 1
    assert len(broadcaster.events) == events_after_first


async def test_delete_system_category_is_rejected(memory_store, notifier, broadcaster):
    _seed_default(memory_store, board_ids=["b1"])
    lifecycle = _make_lifecycle(memory_store, notifier)

    with pytest.raises(CannotDeleteSystemCategoryError):
        await lifecycle.delete_category("default", "u1", "t1")
    await notifier.drain()

    assert "delete_category" not in memory_store.calls
    assert memory_store.categories["default"].delete_at == 0
    assert broadcaster.events == []


async def test_delete_other_users_category_is_forbidden(memory_store, notifier):
    _seed_custom(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)

    with pytest.raises(CategoryPermissionDeniedError):
        await lifecycle.delete_category("work", "u2", "t1")
    assert "delete_category" not in memory_store.calls


async def test_delete_from_other_team_is_invalid(memory_store, notifier):
    _seed_custom(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)

    with pytest.raises(InvalidCategoryError):
        await lifecycle.delete_category("work", "u1", "t2")


async def test_delete_without_default_category_fails(memory_store, notifier, broadcaster):
    _seed_custom(memory_store, board_ids=["b1"])
    lifecycle = _make_lifecycle(memory_store, notifier)

    with pytest.raises(NoDefaultCategoryError) as exc:
        await lifecycle.delete_category("work", "u1", "t1")
    await notifier.drain()

    assert exc.value.http_status == 500
    assert memory_store.categories["work"].delete_at == 0
    assert _writes(memory_store) == []
    assert broadcaster.events == []


async def test_failed_board_move_aborts_delete(memory_store, notifier):
    _seed_default(memory_store)
    _seed_custom(memory_store, board_ids=["b1"])
    memory_store.fail_on["add_update_user_category_board"] = DatabaseError(
        "locked", "upsert",
    )
    lifecycle = _make_lifecycle(memory_store, notifier)

    with pytest.raises(DatabaseError) as exc:
        await lifecycle.delete_category("work", "u1", "t1")

    assert exc.value.operation == "move_boards_to_default_category"
    assert "delete_category" not in memory_store.calls


async def test_delete_finds_default_on_later_page(memory_store, notifier):
    for i in range(4):
        _seed_custom(
            memory_store, category_id=f"c{i}", name=f"A{i}", sort_order=i,
            board_ids=["b1"] if i == 0 else None,
        )
    memory_store.seed(Category(
        id="default", name="Boards", user_id="u1", team_id="t1",
        type="system", sort_order=100,
    ))
    lifecycle = _make_lifecycle(memory_store, notifier)

    await lifecycle.delete_category("c0", "u1", "t1")

    assert memory_store.boards["default"] == ["b1"]


# ─── add_update_user_category_board ──────────────────────────────

async def test_add_empty_board_list_is_noop(memory_store, notifier, broadcaster):
    _seed_custom(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)

    await lifecycle.add_update_user_category_board("t1", "u1", "work", [])
    await notifier.drain()

    assert memory_store.calls == []
    assert broadcaster.events == []


async def test_add_boards_moves_them_from_other_category(memory_store, notifier):
    _seed_default(memory_store, board_ids=["b1", "b2"])
    _seed_custom(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)

    await lifecycle.add_update_user_category_board("t1", "u1", "work", ["b2"])

    assert memory_store.boards["default"] == ["b1"]
    assert memory_store.boards["work"] == ["b2"]


# ─── get_user_category_boards ────────────────────────────────────

async def test_default_category_created_once(memory_store, notifier):
    _seed_custom(memory_store, board_ids=["b1"])
    lifecycle = _make_lifecycle(memory_store, notifier)

    first = await lifecycle.get_user_category_boards("u1", "t1")
    second = await lifecycle.get_user_category_boards("u1", "t1")

    assert first[0].name == "Boards"
    assert first[0].type == "system"
    assert first[0].sort_order == 0
    assert [c.id for c in first[1:]] == ["work"]
    assert memory_store.calls.count("create_category") == 1
    assert sorted(c.name for c in second) == ["Boards", "Work"]


async def test_custom_category_named_boards_does_not_count_as_default(
    memory_store, notifier,
):
    _seed_custom(memory_store, category_id="legacy", name="Boards")
    lifecycle = _make_lifecycle(memory_store, notifier)

    categories = await lifecycle.get_user_category_boards("u1", "t1")

    assert sum(c.is_default for c in categories) == 1
    assert memory_store.calls.count("create_category") == 1


async def test_default_created_concurrently_is_reused(memory_store, notifier):
    winner = _seed_default(memory_store)
    lifecycle = _make_lifecycle(memory_store, notifier)
    original_list = memory_store.get_user_categories
    reads = []

    async def list_missing_default_once(user_id, team_id, page, per_page):
        reads.append(page)
        if len(reads) == 1:
            return []
        return await original_list(user_id, team_id, page, per_page)

    memory_store.get_user_categories = list_missing_default_once

    categories = await lifecycle.get_user_category_boards("u1", "t1")

    assert [c.id for c in categories] == [winner.id]
    assert memory_store.calls.count("create_category") == 1
    assert sum(c.is_system for c in memory_store.categories.values()) == 1


async def test_existing_default_is_not_recreated(memory_store, notifier):
    _seed_default(memory_store, board_ids=["b1"])
    lifecycle = _make_lifecycle(memory_store, notifier)

    categories = await lifecycle.get_user_category_boards("u1", "t1")

    assert [c.id for c in categories] == ["default"]
    assert categories[0].board_ids == ["b1"]
    assert "create_category" not in memory_store.calls
