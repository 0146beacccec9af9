"""Unit tests for simpdb.query.SelectView.

Covers predicate composition, materialization (`all`, `items`), unordered
traversal with early stop, counting, and the mutating operations `delete` and
`update`, including the aliasing between a table and its views.
"""

from __future__ import annotations

from dataclasses import replace

from simpdb import SelectView, Table
from tests.fixtures.records import User, memory_storage


def older_than(n: int):
    """Predicate factory: age strictly greater than `n`."""
    return lambda _, u: u.age > n


# ============================================================================
#                              Composition
# ============================================================================


def test_where_returns_new_view_and_keeps_original(users):
    """where() never narrows the view it is called on."""
    adults = users.where(older_than(20))
    seniors = adults.where(older_than(26))

    assert isinstance(seniors, SelectView)
    assert sorted(adults.all()) == ["Bob", "Carol"]
    assert sorted(seniors.all()) == ["Carol"]


def test_where_chain_is_conjunctive(users):
    """Chained predicates combine with logical AND."""
    chained = users.where(older_than(20)).where(lambda _, u: not u.gender).all()
    combined = users.where(lambda _, u: u.age > 20 and not u.gender).all()
    assert chained == combined == {"Carol": users.get("Carol").unwrap()}


def test_filter_is_alias_of_where(users):
    """filter() composes exactly like where()."""
    assert users.filter(older_than(20)).all() == users.where(older_than(20)).all()


def test_predicate_receives_record_id(users):
    """Predicates get the map key as first argument."""
    assert list(users.where(lambda record_id, _: record_id == "Bob").all()) == ["Bob"]


# ============================================================================
#                              Materialization
# ============================================================================


def test_all_is_a_detached_copy(users):
    """Mutating the table while iterating all() is safe and not reflected."""
    snapshot = users.all()
    for record_id in snapshot:
        users.delete_by_id(record_id)

    assert len(snapshot) == 3
    assert len(users) == 0


def test_all_twice_is_identical(users):
    """Materializing twice without mutation yields the same content."""
    view = users.where(older_than(20))
    assert view.all() == view.all()


def test_views_see_later_table_mutations(users, make_user):
    """Views are lenses, not copies: later inserts show up."""
    view = users.where(older_than(20))
    users.insert(make_user("Dave", age=50))
    assert "Dave" in view.all()


def test_items_returns_pairs(users):
    """items() yields (id, record) pairs for matching records."""
    pairs = users.where(older_than(26)).items()
    assert pairs == [("Carol", users.get("Carol").unwrap())]


def test_count_and_len(users):
    """count() traverses the current state each time."""
    view = users.where(older_than(20))
    assert view.count() == len(view) == 2
    users.delete_by_id("Bob")
    assert view.count() == 1


# ============================================================================
#                              Iteration
# ============================================================================


def test_iter_visits_every_match(users):
    """iter() visits exactly the matching records."""
    seen: dict[str, User] = {}
    users.where(older_than(20)).iter(lambda k, u: seen.__setitem__(k, u))
    assert seen == users.where(older_than(20)).all()


def test_iter_stops_when_visitor_returns_false(users):
    """Returning False from the visitor ends the traversal."""
    visited = []

    def visit(record_id, _):
        visited.append(record_id)
        return False

    users.view().iter(visit)
    assert len(visited) == 1


def test_iter_visitor_may_mutate_table(users):
    """The visitor can delete records without breaking the traversal."""

    def visit(record_id, _):
        users.delete_by_id(record_id)

    users.view().iter(visit)
    assert len(users) == 0


# ============================================================================
#                              Delete
# ============================================================================


def test_delete_removes_and_returns_matches(users):
    """delete() returns the removed records and they leave the table."""
    removed = users.where(lambda _, u: not u.gender).delete()

    assert sorted(u.name for u in removed) == ["Alice", "Carol"]
    assert list(users.all()) == ["Bob"]


def test_delete_is_visible_to_sibling_views(users):
    """A delete through one view is seen by every other view on the table."""
    everyone = users.view()
    users.where(older_than(20)).delete()
    assert list(everyone.all()) == ["Alice"]


def test_delete_nothing_matches(users):
    """Deleting an empty selection returns an empty list."""
    assert users.where(older_than(100)).delete() == []
    assert len(users) == 3


# ============================================================================
#                              Update
# ============================================================================


def test_update_transforms_only_matches(users):
    """update() replaces matching records and reports how many."""
    count = users.where(older_than(20)).update(lambda u: replace(u, age=u.age + 1))

    assert count == 2
    assert users.get("Alice").unwrap().age == 18
    assert users.get("Bob").unwrap().age == 26
    assert users.get("Carol").unwrap().age == 31


def test_update_rekeys_when_id_changes(users):
    """A transform that changes the id moves the record to the new key."""
    users.where(lambda k, _: k == "Bob").update(lambda u: replace(u, name="Robert"))

    assert "Bob" not in users
    assert users.get("Robert").unwrap().age == 25
    assert all(k == u.id() for k, u in users.all().items())


def test_update_uses_matches_snapshotted_before_transforming(users):
    """Records moved during update() are not matched again in the same call."""
    calls = []

    def rename(u: User) -> User:
        calls.append(u.name)
        return replace(u, name=u.name + "!")

    assert users.where(lambda k, _: not k.endswith("!!")).update(rename) == 3
    assert sorted(calls) == ["Alice", "Bob", "Carol"]
    assert sorted(users.all()) == ["Alice!", "Bob!", "Carol!"]


def test_update_chain_of_renames_keeps_both_records():
    """A -> B while B -> C in the same call keeps both moved records."""
    table = _table_of(User("A", 1), User("B", 2))
    renames = {"A": "B", "B": "C"}

    table.update(lambda u: replace(u, name=renames[u.name]))

    assert table.get("B").unwrap().age == 1
    assert table.get("C").unwrap().age == 2
    assert "A" not in table


def _table_of(*records: User) -> Table[User]:
    table = Table.open(memory_storage())
    table.upsert(*records)
    return table
