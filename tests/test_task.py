# tests/test_task.py

from __future__ import annotations

import asyncio
from datetime import datetime

import pytest

from mere import ArgCheck, ArgCheckPolicy, ArityError, InvalidTaskError, NotBoundError, Task
from mere.task.core import TaskRef, infer_arity

from .conftest import CallCounter


class TestConstruction:
    def test_arity_is_inferred_from_required_positional_parameters(self) -> None:
        def f(a, b, c=3, *rest, key=None):
            return a

        assert Task(f).arity == 2
        assert Task(lambda: 1).arity == 0
        assert Task(lambda *args: args).arity == 0

    def test_explicit_arity_wins(self) -> None:
        assert Task(lambda *args: args, 3).arity == 3
        assert Task(lambda a, b: a, 0).arity == 0

    def test_callable_without_signature_gets_zero_arity(self) -> None:
        class Opaque:
            @property
            def __signature__(self):
                raise ValueError("no signature")

            def __call__(self):
                return 1

        assert infer_arity(Opaque()) == 0

    def test_new_task_is_not_memoized(self) -> None:
        assert Task(lambda x: x).memoized is False

    def test_task_property_returns_itself(self) -> None:
        task = Task(lambda x: x)
        assert task.task is task

    def test_task_ref_requires_a_task_property(self) -> None:
        class Incomplete(TaskRef):
            pass

        with pytest.raises(TypeError):
            Incomplete()


class TestMake:
    def test_missing_arguments_are_padded_with_none(self) -> None:
        counter = CallCounter(lambda a, b, c: (a, b, c))
        task = Task(counter, 3)

        assert task.make(1) == (1, None, None)
        assert counter.calls == [(1, None, None)]

    def test_extra_arguments_rejected_by_default(self) -> None:
        task = Task(lambda x: x)

        with pytest.raises(ArityError, match="too many arguments"):
            task.make(1, 2)

    def test_task_arguments_are_resolved_before_the_call(self) -> None:
        five = Task(lambda: 5)
        add = Task(lambda a, b: a + b)

        assert add.make(five, 10) == 15

    def test_unbound_task_raises(self) -> None:
        with pytest.raises(NotBoundError, match="not bound to a function"):
            Task(None).make()

    def test_unbound_task_reported_before_arity(self) -> None:
        unbound = Task(None, 1, policy=ArgCheckPolicy(ArgCheck.MUST_EQUAL))

        with pytest.raises(NotBoundError):
            unbound.make()

    def test_unbound_second_stage_raises_when_chained(self) -> None:
        chained = Task(lambda x: x).then(Task(None))

        with pytest.raises(NotBoundError):
            chained.make(1)

    def test_errors_from_the_function_propagate(self) -> None:
        def boom(x):
            raise ZeroDivisionError(x)

        with pytest.raises(ZeroDivisionError):
            Task(boom).make(1)


class TestMemoize:
    def test_identical_arguments_hit_the_cache(self) -> None:
        counter = CallCounter(lambda a, b: a + b)
        task = Task(counter, 2).memoize()

        assert task.make(1, 2) == 3
        assert task.make(1, 2) == 3
        assert len(counter.calls) == 1

        assert task.make(2, 1) == 3
        assert len(counter.calls) == 2

    def test_structurally_equal_arguments_share_an_entry(self) -> None:
        counter = CallCounter(lambda data: sorted(data))
        task = Task(counter, 1).memoize()

        first = task.make({"b": 1, "a": 2})
        second = task.make({"a": 2, "b": 1})

        assert first is second
        assert len(counter.calls) == 1

    def test_padded_call_matches_explicit_none(self) -> None:
        counter = CallCounter(lambda a, b: (a, b))
        task = Task(counter, 2).memoize()

        task.make(1)
        task.make(1, None)

        assert len(counter.calls) == 1

    def test_none_results_are_cached(self) -> None:
        counter = CallCounter(lambda x: None)
        task = Task(counter, 1).memoize()

        task.make(1)
        task.make(1)

        assert len(counter.calls) == 1

    def test_memoize_twice_keeps_entries(self) -> None:
        counter = CallCounter(lambda x: x * 2)
        task = Task(counter, 1).memoize()
        task.make(4)

        assert task.memoize() is task
        task.make(4)

        assert len(counter.calls) == 1

    def test_non_canonical_arguments_skip_the_cache(self) -> None:
        counter = CallCounter(lambda obj: id(obj))
        task = Task(counter, 1).memoize()
        marker = object()

        task.make(marker)
        task.make(marker)

        assert len(counter.calls) == 2

    def test_circular_arguments_skip_the_cache(self) -> None:
        counter = CallCounter(lambda data: len(data))
        task = Task(counter, 1).memoize()
        data: list = []
        data.append(data)

        assert task.make(data) == 1
        assert task.make(data) == 1
        assert len(counter.calls) == 2

    @pytest.mark.parametrize(
        ("first", "second"),
        [
            ({1: "x"}, {"1": "x"}),
            ((1, 2), [1, 2]),
            (datetime(2024, 1, 2), {"__datetime__": "2024-01-02T00:00:00"}),
        ],
    )
    def test_differently_typed_arguments_do_not_share_an_entry(self, first, second) -> None:
        counter = CallCounter(lambda value: type(value).__name__)
        task = Task(counter, 1).memoize()

        assert task.make(first) == type(first).__name__
        assert task.make(second) == type(second).__name__
        assert len(counter.calls) == 2


class TestPartial:
    def test_partial_then_make_equals_full_make(self) -> None:
        pair = Task(lambda a, b: (a, b))

        assert pair.partial("a").make("b") == pair.make("a", "b")

    def test_partial_arity_is_reduced(self) -> None:
        triple = Task(lambda a, b, c: (a, b, c))

        assert triple.partial(1).arity == 2
        assert triple.partial(1, 2, 3).arity == 0

    def test_partial_does_not_modify_the_original(self) -> None:
        pair = Task(lambda a, b: (a, b))
        pair.partial(1)

        assert pair.arity == 2
        assert pair.make(3, 4) == (3, 4)

    def test_too_many_bound_arguments_rejected(self) -> None:
        with pytest.raises(ArityError, match="too many arguments: given 2, expected 1"):
            Task(lambda a: a).partial(1, 2)

    def test_too_many_bound_arguments_allowed_without_check(self) -> None:
        task = Task(lambda a: a, policy=ArgCheckPolicy(ArgCheck.NO_CHECK))
        bound = task.partial(1, 2)

        assert bound.arity == 0
        assert bound.make() == 1

    def test_missing_arguments_are_padded_against_original_arity(self) -> None:
        triple = Task(lambda a, b, c: (a, b, c))

        assert triple.partial(1).make() == (1, None, None)

    def test_bound_task_arguments_resolve_at_call_time(self) -> None:
        values = iter([1, 2])
        source = Task(lambda: next(values))
        add = Task(lambda a, b: a + b)

        bound = add.partial(source)

        assert bound.make(10) == 11
        assert bound.make(10) == 12

    def test_derived_task_shares_the_policy(self) -> None:
        policy = ArgCheckPolicy()
        bound = Task(lambda a, b: (a, b), policy=policy).partial(1)

        policy.mode = ArgCheck.MUST_EQUAL

        with pytest.raises(ArityError):
            bound.make()


class TestThen:
    def test_result_becomes_first_argument(self) -> None:
        inc = Task(lambda x: x + 1)
        square = Task(lambda x: x * x)

        assert inc.then(square).make(3) == square.make(inc.make(3)) == 16

    def test_suffix_arguments_follow_the_result(self) -> None:
        inc = Task(lambda x: x + 1)
        scale = Task(lambda x, factor: x * factor)

        assert inc.then(scale, 10).make(1) == 20

    def test_none_result_is_not_forwarded(self) -> None:
        counter = CallCounter(lambda *args: args)
        nothing = Task(lambda x: None)
        second = Task(counter, 2)

        assert nothing.then(second, "fixed").make(1) == ("fixed", None)
        assert nothing.then(second).make(1) == (None, None)

    def test_chained_task_keeps_first_arity(self) -> None:
        pair = Task(lambda a, b: a + b)
        inc = Task(lambda x: x + 1)

        assert pair.then(inc).arity == 2

    def test_invalid_second_task_raises(self) -> None:
        inc = Task(lambda x: x + 1)

        with pytest.raises(InvalidTaskError):
            inc.then(42)
        with pytest.raises(InvalidTaskError):
            inc.then(None)

    def test_label_without_registry_is_invalid(self) -> None:
        with pytest.raises(InvalidTaskError):
            Task(lambda x: x).then("square")

    def test_suffix_is_checked_against_second_arity(self) -> None:
        inc = Task(lambda x: x + 1)
        single = Task(lambda x: x)

        with pytest.raises(ArityError):
            inc.then(single, 1, 2)

    def test_list_is_folded_into_second_task(self) -> None:
        inc = Task(lambda x: x + 1)
        double = Task(lambda x: x * 2)

        assert inc.then([double, inc]).make(1) == 5


class TestPromise:
    @pytest.mark.asyncio
    async def test_promise_resolves_with_the_result(self) -> None:
        double = Task(lambda x: x * 2)

        future = double.promise(5)

        assert isinstance(future, asyncio.Future)
        assert await future == 10

    @pytest.mark.asyncio
    async def test_promise_rejects_on_arity_error(self) -> None:
        double = Task(lambda x: x * 2)

        future = double.promise(1, 2)

        assert future.done()
        with pytest.raises(ArityError):
            await future

    @pytest.mark.asyncio
    async def test_promise_rejects_on_function_error(self) -> None:
        def fail(x):
            raise ValueError(f"bad {x}")

        with pytest.raises(ValueError, match="bad 1"):
            await Task(fail).promise(1)

    @pytest.mark.asyncio
    async def test_promise_rejects_unbound_task(self) -> None:
        with pytest.raises(NotBoundError):
            await Task(None).promise()

    @pytest.mark.asyncio
    async def test_promise_rejects_when_function_raises_stop_iteration(self) -> None:
        exhausted = Task(lambda: next(iter([])))

        future = exhausted.promise()

        assert future.done()
        with pytest.raises(RuntimeError, match="raised StopIteration") as error:
            await future
        assert isinstance(error.value.__cause__, StopIteration)

    def test_promise_requires_running_loop(self) -> None:
        with pytest.raises(RuntimeError):
            Task(lambda: 1).promise()
