import pytest

from lazyhydration import (
    ABSENT,
    CursorClosedError,
    HydrationError,
    IteratorState,
    LazyHydrationIterator,
    ModelDescriptor,
    Present,
    QueryExecutionError,
    RowReadError,
)
from support import FakeQuery, FalsyRecord, Record

ROWS = [{"id": 1, "name": "A"}, {"id": 2, "name": "B"}, {"id": 3, "name": "C"}]
SESSION = object()


def make_iterator(rows=ROWS, model=Record, **kwargs):
    query = FakeQuery(rows, **kwargs)
    return LazyHydrationIterator(model, {"any": "criteria"}, SESSION, query_executor=query), query


def record(**fields):
    r = Record()
    r.__dict__.update(fields)
    return r


def test_query_runs_once_at_construction_without_hydrating():
    it, query = make_iterator()
    assert query.calls == [(Record, {"any": "criteria"}, SESSION)]
    assert Record.created == 0
    assert query.cursor.row_reads == 0


def test_full_traversal_builds_one_instance_per_row_in_order():
    it, _ = make_iterator()
    seen = []
    item = it.current()
    while item:
        seen.append(item.unwrap())
        item = it.advance()

    assert [r.id for r in seen] == [1, 2, 3]
    assert Record.created == 3


def test_keys_follow_cursor_order():
    it, _ = make_iterator()
    keys = [it.key()]
    while it.advance():
        keys.append(it.key())
    assert keys == [0, 1, 2]


def test_reset_replays_same_order():
    it, _ = make_iterator()
    first = list(it)
    it.reset()
    second = []
    item = it.current()
    while item:
        second.append(item.value)
        item = it.advance()
    assert first == second


def test_current_is_not_memoized():
    it, query = make_iterator()
    a = it.current().unwrap()
    b = it.current().unwrap()
    assert a is not b
    assert a == b
    assert Record.created == 2
    assert query.cursor.row_reads == 2


def test_advance_past_end_is_terminal():
    it, _ = make_iterator(rows=ROWS[:1])
    assert it.advance() is ABSENT
    assert it.is_valid() is False
    assert it.state is IteratorState.EXHAUSTED
    assert it.advance() is ABSENT
    assert it.advance() is ABSENT
    assert it.current() is ABSENT
    assert Record.created == 0


def test_empty_result_constructs_nothing():
    it, _ = make_iterator(rows=[])
    assert it.is_valid() is False
    assert it.has_current() is False
    assert it.current() is ABSENT
    assert list(it) == []
    assert Record.created == 0


def test_two_row_scenario():
    it, _ = make_iterator(rows=ROWS[:2])
    assert it.state is IteratorState.POSITIONED
    assert it.key() == 0
    assert it.current() == Present(record(id=1, name="A"))
    assert it.advance() == Present(record(id=2, name="B"))
    assert it.key() == 1
    assert it.advance() is ABSENT
    assert it.state is IteratorState.EXHAUSTED


def test_hydration_error_stops_at_failing_row():
    def hydrate(instance, row):
        if row["id"] == 2:
            raise ValueError("bad name")
        instance.__dict__.update(row)

    query = FakeQuery(ROWS)
    it = LazyHydrationIterator(Record, None, SESSION, hydrator=hydrate, query_executor=query)

    observed = []
    with pytest.raises(HydrationError) as exc_info:
        for r in it:
            observed.append(r)

    assert [r.id for r in observed] == [1]
    assert exc_info.value.key == 1
    assert exc_info.value.details["model"] == "Record"
    assert isinstance(exc_info.value.__cause__, ValueError)
    # row 1 and the failed row 2 were allocated, row 3 never was
    assert Record.created == 2
    assert query.cursor.row_reads == 2


def test_iterator_is_aborted_after_hydration_error():
    def hydrate(instance, row):
        raise KeyError("id")

    it = LazyHydrationIterator(Record, None, SESSION, hydrator=hydrate, query_executor=FakeQuery(ROWS))
    with pytest.raises(HydrationError) as first:
        it.current()
    with pytest.raises(HydrationError) as again:
        it.advance()
    assert again.value is first.value
    with pytest.raises(HydrationError):
        it.reset()


def test_cursor_failure_becomes_row_read_error():
    it, _ = make_iterator(fail_on_advance_to=1)
    with pytest.raises(RowReadError) as exc_info:
        it.advance()
    assert isinstance(exc_info.value.cause, OSError)
    with pytest.raises(RowReadError):
        it.current()


def test_query_failure_becomes_query_execution_error():
    def broken(model_class, criteria, session):
        raise RuntimeError("syntax error")

    with pytest.raises(QueryExecutionError) as exc_info:
        LazyHydrationIterator(Record, None, SESSION, query_executor=broken)
    assert isinstance(exc_info.value.__cause__, RuntimeError)
    assert exc_info.value.details == {"model": "Record"}


def test_falsy_instance_is_still_present():
    it, _ = make_iterator(model=FalsyRecord)
    item = it.current()
    assert item.is_present()
    assert not item.value
    assert isinstance(item.value, FalsyRecord)


def test_items_yields_keys_and_instances():
    it, _ = make_iterator()
    it.advance()
    assert [(k, r.name) for k, r in it.items()] == [(0, "A"), (1, "B"), (2, "C")]


def test_for_loop_restarts_from_first_row():
    it, _ = make_iterator()
    it.advance()
    it.advance()
    assert [r.id for r in it] == [1, 2, 3]
    assert [r.id for r in it] == [1, 2, 3]


def test_close_releases_cursor_and_blocks_use():
    with make_iterator()[0] as it:
        cursor = it.cursor
        assert it.current()
    assert cursor.closed
    assert it.closed
    assert it.is_valid() is False
    with pytest.raises(CursorClosedError):
        it.current()
    it.close()


def test_descriptor_capabilities_and_overrides():
    query = FakeQuery(ROWS[:1])
    built = []

    def factory():
        r = Record()
        built.append(r)
        return r

    descriptor = ModelDescriptor.for_model(Record, query_executor=query, factory=factory)
    it = LazyHydrationIterator(descriptor, None, SESSION)
    assert it.current().value is built[0]

    renamed = LazyHydrationIterator(
        descriptor,
        None,
        SESSION,
        hydrator=lambda instance, row: setattr(instance, "label", row["name"]),
    )
    assert vars(renamed.current().value) == {"label": "A"}
