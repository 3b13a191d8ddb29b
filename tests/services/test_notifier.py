"""Change Notifier — tests for bounded, best-effort broadcast delivery.

Tests cover:
    - queued notifications reach the broadcaster
    - a full queue drops instead of blocking or raising
    - a failing broadcast is logged and later jobs still run
"""

import logging

from board_categories.core.category import BoardCategoryChange, Category
from board_categories.services.notifier import ChangeNotifier


async def test_notifications_are_delivered(notifier, broadcaster):
    category = Category(id="c1", name="Work", user_id="u1", team_id="t1")

    assert notifier.category_changed(category)
    assert notifier.categories_reordered("t1", "u1", ["c1"])
    assert notifier.boards_categorized(
        "t1", "u1", [BoardCategoryChange(board_id="b1", category_id="c1")],
    )
    assert notifier.category_boards_reordered("t1", "u1", "c1", ["b1"])
    await notifier.drain()

    assert [name for name, _ in broadcaster.events] == [
        "category_change",
        "category_reorder",
        "category_board_change",
        "category_boards_reorder",
    ]
    assert broadcaster.of("category_change") == [(category,)]
    assert notifier.pending == 0


async def test_full_queue_drops_notification(broadcaster, caplog):
    notifier = ChangeNotifier(broadcaster, max_pending=1)
    # Fill the queue before the worker gets a chance to run
    notifier._queue.put_nowait(("filler", broadcaster.broadcast_category_change))

    with caplog.at_level(logging.WARNING):
        accepted = notifier.categories_reordered("t1", "u1", ["c1"])

    assert accepted is False
    assert notifier.dropped == 1
    assert "dropping category_reorder" in caplog.text
    assert broadcaster.of("category_reorder") == []
    await notifier.stop()


async def test_failing_broadcast_does_not_stop_worker(notifier, broadcaster, caplog):
    async def failing():
        raise RuntimeError("socket gone")

    with caplog.at_level(logging.ERROR):
        notifier.enqueue("category_change", failing)
        notifier.categories_reordered("t1", "u1", ["c1"])
        await notifier.drain()

    assert "Broadcast category_change failed: socket gone" in caplog.text
    assert broadcaster.of("category_reorder") == [("t1", "u1", ["c1"])]


async def test_stop_without_start_is_noop(broadcaster):
    notifier = ChangeNotifier(broadcaster)
    await notifier.stop()
    assert notifier.pending == 0
