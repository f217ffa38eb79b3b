import pytest

from flowedit.graph_editor.graph_model import GraphConnection
from flowedit.graph_editor.routing import Rect, route, route_all, source_anchor, target_anchor


def test_anchors():
    box = Rect(100, 200, 150, 50)
    assert source_anchor(box) == (250, 225)
    assert target_anchor(box) == (100, 225)


def test_route_s_curve():
    path = route("c1", Rect(0, 0, 100, 40), Rect(300, 100, 100, 40))
    assert (path.sx, path.sy, path.tx, path.ty) == (100, 20, 300, 120)
    assert path.mid_x == 200
    assert path.segments() == [
        ((100, 20), (200, 20), (200, 70)),
        ((200, 70), (200, 120), (300, 120)),
    ]


def test_svg_description():
    path = route("c1", Rect(0, 0, 100, 40), Rect(300, 100, 100, 40))
    assert path.to_svg() == "M 100 20 Q 200 20 200 70 Q 200 120 300 120"


def test_point_at_endpoints_and_join():
    path = route("c1", Rect(0, 0, 100, 40), Rect(300, 100, 100, 40))
    assert path.point_at(0) == (100, 20)
    assert path.point_at(0.5) == (200, 70)
    assert path.point_at(1) == pytest.approx((300, 120))


def test_distance_to():
    path = route("c1", Rect(0, 0, 100, 40), Rect(300, 100, 100, 40))
    assert path.distance_to(200, 70) == pytest.approx(0)
    assert path.distance_to(200, 400) > 100


def test_route_all_skips_unresolved():
    boxes = {"a": Rect(0, 0, 10, 10), "b": Rect(50, 0, 10, 10)}
    conns = [
        GraphConnection("c1", "a", "b"),
        GraphConnection("c2", "a", "ghost"),
        GraphConnection("c3", "ghost", "b"),
    ]
    paths = route_all(conns, boxes.get)
    assert [p.conn_id for p in paths] == ["c1"]


def test_route_all_uses_latest_boxes():
    boxes = {"a": Rect(0, 0, 10, 10), "b": Rect(50, 0, 10, 10)}
    conns = [GraphConnection("c1", "a", "b")]
    route_all(conns, boxes.get)
    boxes["a"] = Rect(500, 300, 10, 10)
    (path,) = route_all(conns, boxes.get)
    assert (path.sx, path.sy) == (510, 305)
