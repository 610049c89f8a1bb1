import pytest
from education import models
from education.utils import ordering


class Shelf:
    """Minimal in-memory container, independent of the ORM."""

    def __init__(self):
        self.books = []

    def ordered_items(self):
        return self.books


class Book:
    def __init__(self, title, order_number=None, shelf=None):
        self.title = title
        self.order_number = order_number
        self.shelf = shelf

    def ordered_container(self):
        return self.shelf


def make_shelf(*positions):
    shelf = Shelf()
    for i, pos in enumerate(positions):
        ordering.append(shelf, Book(f"b{i}", pos, shelf))
    return shelf


def test_empty_container_has_no_edges():
    shelf = Shelf()
    assert ordering.first(shelf) is None
    assert ordering.last(shelf) is None
    assert ordering.ordered(shelf) == []


def test_sequential_appends_are_numbered_in_insertion_order():
    shelf = make_shelf(None, None, None)
    assert [b.order_number for b in shelf.books] == [1, 2, 3]


def test_explicit_position_is_preserved():
    shelf = Shelf()
    a = ordering.append(shelf, Book("a", shelf=shelf))
    b = ordering.append(shelf, Book("b", 5, shelf))
    assert (a.order_number, b.order_number) == (1, 5)
    c = ordering.append(shelf, Book("c", shelf=shelf))
    assert c.order_number == 3
    d = ordering.append(shelf, Book("d", shelf=shelf))
    assert d.order_number == 4
    # count + 1 is 5, already used by b
    e = ordering.append(shelf, Book("e", shelf=shelf))
    assert e.order_number == 6
    assert [x.title for x in ordering.ordered(shelf)] == ["a", "c", "d", "b", "e"]


def test_non_positive_position_is_auto_assigned():
    shelf = make_shelf(None)
    book = ordering.append(shelf, Book("zero", 0, shelf))
    assert book.order_number == 2
    book = ordering.append(shelf, Book("negative", -4, shelf))
    assert book.order_number == 3


def test_appending_a_member_twice_is_a_noop():
    shelf = make_shelf(None)
    book = shelf.books[0]
    ordering.append(shelf, book)
    assert shelf.books == [book]


def test_scenario_three_items():
    shelf = Shelf()
    a = ordering.append(shelf, Book("A", 1, shelf))
    c = ordering.append(shelf, Book("C", 3, shelf))
    b = ordering.append(shelf, Book("B", 2, shelf))
    assert ordering.next(shelf, b) is c
    assert ordering.previous(shelf, b) is a
    assert ordering.first(shelf) is a
    assert ordering.last(shelf) is c
    assert ordering.is_start(a)
    assert ordering.is_end(c)
    assert not ordering.is_end(a)
    assert ordering.ordered(shelf) == [a, b, c]


def test_adjacent_pairs_link_both_ways():
    shelf = make_shelf(7, 2, 9, 4)
    items = ordering.ordered(shelf)
    assert [b.order_number for b in items] == [2, 4, 7, 9]
    for left, right in zip(items, items[1:]):
        assert ordering.next(shelf, left) is right
        assert ordering.previous(shelf, right) is left
    assert ordering.previous(shelf, items[0]) is None
    assert ordering.next(shelf, items[-1]) is None
    assert [ordering.is_start(b) for b in items] == [True, False, False, False]
    assert [ordering.is_end(b) for b in items] == [False, False, False, True]


def test_single_item_is_both_start_and_end():
    shelf = make_shelf(None)
    only = shelf.books[0]
    assert ordering.is_start(only) and ordering.is_end(only)
    assert ordering.previous(shelf, only) is None
    assert ordering.next(shelf, only) is None


def test_remove_keeps_gaps_and_avoids_duplicates():
    shelf = make_shelf(None, None, None)
    middle = shelf.books[1]
    ordering.remove(shelf, middle)
    assert [b.order_number for b in shelf.books] == [1, 3]
    assert ordering.next(shelf, shelf.books[0]) is shelf.books[1]
    appended = ordering.append(shelf, Book("new", shelf=shelf))
    assert appended.order_number == 4


def test_position_taken():
    shelf = make_shelf(1, 2)
    assert ordering.position_taken(shelf, 2)
    assert not ordering.position_taken(shelf, 2, exclude=shelf.books[1])
    assert not ordering.position_taken(shelf, 3)


def test_foreign_item_is_rejected():
    shelf = make_shelf(None, None)
    stranger = Book("stranger", 1)
    with pytest.raises(ValueError):
        ordering.next(shelf, stranger)
    with pytest.raises(ValueError):
        ordering.previous(shelf, stranger)
    assert not ordering.is_start(stranger)


def test_orm_models_act_as_containers():
    test = models.Test(name="Intake", activity_id=None)
    stages = [ordering.append(test, models.Stage(name=f"s{i}")) for i in range(3)]
    assert [s.order_number for s in stages] == [1, 2, 3]
    assert all(s.test is test for s in stages)
    assert ordering.is_start(stages[0]) and ordering.is_end(stages[2])

    stage = stages[1]
    q1 = ordering.append(stage, models.Question(name="q1", description="d", answer="a"))
    q2 = ordering.append(stage, models.Question(name="q2", description="d", answer="b"))
    assert ordering.next(stage, q1) is q2
    assert ordering.previous(stage, q2) is q1
    assert q2.stage is stage
    assert ordering.is_end(q2) and not ordering.is_start(q2)
