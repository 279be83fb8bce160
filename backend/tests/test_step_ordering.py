"""
Tests for step ordering: contiguous order numbers across insert, delete and reorder.
"""

import pytest

from guideforge.services.exceptions import InvalidArgumentError
from guideforge.services.manuals.exceptions import InvalidStepOrder, StepNotInManual
from guideforge.services.manuals.step_ordering import StepOrder


async def _orders(manual_service, manual_id: int) -> list[tuple[str, int]]:
    steps = await manual_service.steps.list_by_manual(manual_id)
    return [(step.title, step.order_number) for step in steps]


async def _add_steps(manual_service, manual, owner, *titles: str):
    return [await manual_service.create_step(manual.id, owner.id, title=title) for title in titles]


class TestInsert:
    """Appending and inserting steps."""

    async def test_first_step_gets_order_zero(self, manual_service, manual, owner):
        step = await manual_service.create_step(manual.id, owner.id, title="Unpack")
        assert step.order_number == 0
        assert step.images == []

    async def test_append_assigns_next_order(self, manual_service, manual, owner):
        await _add_steps(manual_service, manual, owner, "A", "B", "C")

        assert await _orders(manual_service, manual.id) == [("A", 0), ("B", 1), ("C", 2)]

    async def test_insert_at_position_shifts_later_steps(self, manual_service, manual, owner):
        await _add_steps(manual_service, manual, owner, "A", "B", "C")

        step = await manual_service.create_step(manual.id, owner.id, title="X", order_number=1)

        assert step.order_number == 1
        assert await _orders(manual_service, manual.id) == [("A", 0), ("X", 1), ("B", 2), ("C", 3)]

    async def test_insert_at_end_position_is_allowed(self, manual_service, manual, owner):
        await _add_steps(manual_service, manual, owner, "A", "B")

        await manual_service.create_step(manual.id, owner.id, title="Z", order_number=2)

        assert await _orders(manual_service, manual.id) == [("A", 0), ("B", 1), ("Z", 2)]

    @pytest.mark.parametrize("position", [-1, 3, 10])
    async def test_insert_out_of_range_is_rejected(self, manual_service, manual, owner, position):
        manual_id, owner_id = manual.id, owner.id
        await _add_steps(manual_service, manual, owner, "A", "B")

        with pytest.raises(InvalidStepOrder):
            await manual_service.create_step(manual_id, owner_id, title="X", order_number=position)

        assert await _orders(manual_service, manual_id) == [("A", 0), ("B", 1)]


class TestRemove:
    """Deleting steps closes the gap."""

    async def test_delete_middle_step_compacts_order(self, manual_service, manual, owner):
        steps = await _add_steps(manual_service, manual, owner, "A", "B", "C", "D")

        await manual_service.delete_step(steps[1].id, owner.id)

        assert await _orders(manual_service, manual.id) == [("A", 0), ("C", 1), ("D", 2)]

    async def test_delete_last_step_leaves_others_untouched(self, manual_service, manual, owner):
        steps = await _add_steps(manual_service, manual, owner, "A", "B", "C")

        await manual_service.delete_step(steps[2].id, owner.id)

        assert await _orders(manual_service, manual.id) == [("A", 0), ("B", 1)]

    async def test_append_after_delete_keeps_contiguity(self, manual_service, manual, owner):
        steps = await _add_steps(manual_service, manual, owner, "A", "B", "C")
        await manual_service.delete_step(steps[0].id, owner.id)

        step = await manual_service.create_step(manual.id, owner.id, title="D")

        assert step.order_number == 2
        assert await _orders(manual_service, manual.id) == [("B", 0), ("C", 1), ("D", 2)]


class TestReorder:
    """Bulk reorder is all-or-nothing."""

    async def test_swap_two_steps(self, manual_service, manual, owner):
        a, b, c = await _add_steps(manual_service, manual, owner, "A", "B", "C")

        steps = await manual_service.reorder_steps(
            manual.id,
            owner.id,
            [StepOrder(step_id=a.id, order_number=2), StepOrder(step_id=c.id, order_number=0)],
        )

        assert [(s.title, s.order_number) for s in steps] == [("C", 0), ("B", 1), ("A", 2)]

    async def test_full_permutation(self, manual_service, manual, owner):
        a, b, c = await _add_steps(manual_service, manual, owner, "A", "B", "C")

        await manual_service.reorder_steps(
            manual.id,
            owner.id,
            [
                StepOrder(step_id=a.id, order_number=1),
                StepOrder(step_id=b.id, order_number=2),
                StepOrder(step_id=c.id, order_number=0),
            ],
        )

        assert await _orders(manual_service, manual.id) == [("C", 0), ("A", 1), ("B", 2)]

    async def test_foreign_step_id_rejects_whole_batch(self, manual_service, manual, owner):
        manual_id, owner_id = manual.id, owner.id
        a, b = await _add_steps(manual_service, manual, owner, "A", "B")
        other_manual = await manual_service.create_manual(owner_id, title="Other")
        foreign = await manual_service.create_step(other_manual.id, owner_id, title="F")
        a_id, foreign_id = a.id, foreign.id

        with pytest.raises(StepNotInManual) as exc_info:
            await manual_service.reorder_steps(
                manual_id,
                owner_id,
                [StepOrder(step_id=a_id, order_number=1), StepOrder(step_id=foreign_id, order_number=0)],
            )

        assert exc_info.value.step_id == foreign_id
        assert isinstance(exc_info.value, InvalidArgumentError)
        assert await _orders(manual_service, manual_id) == [("A", 0), ("B", 1)]

    async def test_duplicate_step_id_is_rejected(self, manual_service, manual, owner):
        manual_id, owner_id = manual.id, owner.id
        a, b = await _add_steps(manual_service, manual, owner, "A", "B")

        with pytest.raises(InvalidStepOrder):
            await manual_service.reorder_steps(
                manual_id,
                owner_id,
                [StepOrder(step_id=a.id, order_number=1), StepOrder(step_id=a.id, order_number=0)],
            )

    async def test_result_with_duplicate_order_is_rejected(self, manual_service, manual, owner):
        manual_id, owner_id = manual.id, owner.id
        a, b, c = await _add_steps(manual_service, manual, owner, "A", "B", "C")

        with pytest.raises(InvalidStepOrder):
            await manual_service.reorder_steps(manual_id, owner_id, [StepOrder(step_id=a.id, order_number=1)])

        assert await _orders(manual_service, manual_id) == [("A", 0), ("B", 1), ("C", 2)]

    async def test_result_with_gap_is_rejected(self, manual_service, manual, owner):
        manual_id, owner_id = manual.id, owner.id
        a, b = await _add_steps(manual_service, manual, owner, "A", "B")

        with pytest.raises(InvalidStepOrder):
            await manual_service.reorder_steps(manual_id, owner_id, [StepOrder(step_id=b.id, order_number=5)])

        assert await _orders(manual_service, manual_id) == [("A", 0), ("B", 1)]
