from searchui.pagination import Paginator


def test_next_stops_at_last_page():
    p = Paginator(rows=10, total=45)
    offsets = []
    for _ in range(5):
        p.next()
        offsets.append(p.offset)
    assert offsets == [10, 20, 30, 40, 40]
    assert not p.has_next


def test_previous_floors_at_zero():
    p = Paginator(rows=10, offset=10, total=45)
    assert p.previous()
    assert p.offset == 0
    assert not p.has_previous
    assert not p.previous()
    assert p.offset == 0


def test_exact_multiple_disables_next():
    p = Paginator(rows=10, offset=30, total=40)
    assert not p.has_next


def test_clamp_moves_to_last_page():
    p = Paginator(rows=10, offset=40, total=45)
    assert p.clamp(12)
    assert p.offset == 10
    assert not p.clamp(12)


def test_clamp_empty_index():
    p = Paginator(rows=10, offset=20)
    assert p.clamp(0)
    assert p.offset == 0
    assert not p.has_previous and not p.has_next
