# tests/test_traversal.py

from __future__ import annotations

from tasknest.domain.task import (
    Task,
    collect_categories,
    count_completed_descendants,
    count_descendants,
    depth_of,
    filter_nodes,
    find_by_id,
    matches_query,
    walk,
    walk_with_depth,
)


def _forest() -> list[Task]:
    a = Task.create("a", categories=["Work"])
    b = Task.create("b")
    c = Task.create("c", categories=["School"])
    a.add_subtask(b)
    b.add_subtask(c)
    d = Task.create("d", categories=["Work", "Hobby"])
    return [a, d]


def test_walk_is_depth_first_preorder() -> None:
    forest = _forest()
    assert [t.name for t in walk(forest)] == ["a", "b", "c", "d"]
    assert [(t.name, depth) for t, depth in walk_with_depth(forest)] == [
        ("a", 0),
        ("b", 1),
        ("c", 2),
        ("d", 0),
    ]


def test_deep_tree_does_not_recurse() -> None:
    root = Task.create("root")
    node = root
    for i in range(3000):
        child = Task.create(f"n{i}")
        node.subtasks.append(child)
        node = child

    assert count_descendants(root) == 3000
    assert find_by_id([root], node.id) is node


def test_find_and_filter() -> None:
    forest = _forest()
    c = forest[0].subtasks[0].subtasks[0]

    assert find_by_id(forest, c.id) is c
    assert find_by_id(forest, "missing") is None
    assert depth_of(forest, c.id) == 2
    assert depth_of(forest, "missing") is None
    assert [t.name for t in filter_nodes(forest, lambda t: "Work" in t.categories)] == ["a", "d"]


def test_query_matches_name_or_notes_case_insensitively() -> None:
    task = Task.create("Groceries")
    task.notes = "Buy MILK"
    predicate = matches_query("milk")

    assert predicate(task)
    assert matches_query("GROC")(task)
    assert not matches_query("bread")(task)


def test_descendant_counts() -> None:
    a = _forest()[0]
    a.subtasks[0].subtasks[0].is_completed = True

    assert count_descendants(a) == 2
    assert count_completed_descendants(a) == 1


def test_collect_categories_in_first_seen_order() -> None:
    assert collect_categories(_forest()) == ["Work", "Personal", "School", "Hobby"]
