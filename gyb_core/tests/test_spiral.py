import itertools
import math

import numpy as np
import pytest

from gyb_core.models import SponsorRecord, Variant
from gyb_core.spiral import SpiralPlacer, SpiralSettings, boxes_collide, center_y_percent


def _text_sponsors(count, font_size=16):
    return [
        SponsorRecord(id=f"s{i}", name=f"Sponsor {i}", amount=count - i, calculated_font_size=font_size)
        for i in range(count)
    ]


def _assert_no_padded_overlap(placed, padding):
    for first, second in itertools.combinations(placed, 2):
        assert not first.box.overlaps(second.box, padding), (first.sponsor.id, second.sponsor.id)


@pytest.mark.parametrize(
    "sizes,expected",
    [
        ([], 0.31),
        ([16, 16, 18], 0.31),
        ([12, 28], 0.35),
        ([12, 24], 0.35),
        ([12, 20], 0.33),
        ([10, 18], 0.31),
    ],
)
def test_center_y_percent(sizes, expected):
    assert center_y_percent(sizes) == expected


def test_boxes_collide_uses_padding():
    placed = np.array([[0.0, 0.0, 10.0, 10.0]])
    # 5px gap is inside the 6px padding
    assert boxes_collide((15.0, 0.0, 10.0, 10.0), placed, 6.0)[0]
    assert not boxes_collide((17.0, 0.0, 10.0, 10.0), placed, 6.0)[0]
    assert not boxes_collide((15.0, 0.0, 10.0, 10.0), placed, 0.0)[0]


def test_boxes_collide_is_symmetric():
    a = (3.0, 4.0, 20.0, 8.0)
    b = (25.0, 10.0, 5.0, 5.0)
    ab = boxes_collide(a, np.array([b]), 6.0)[0]
    ba = boxes_collide(b, np.array([a]), 6.0)[0]
    assert ab == ba


def test_boxes_collide_vectorized_candidates():
    placed = np.array([[0.0, 0.0, 10.0, 10.0], [100.0, 100.0, 10.0, 10.0]])
    xs = np.array([[0.0], [50.0], [100.0]])
    ys = np.array([[0.0], [50.0], [100.0]])
    result = boxes_collide((xs, ys, 10.0, 10.0), placed, 6.0)
    assert result.shape == (3, 2)
    assert result.any(axis=1).tolist() == [True, False, True]


def test_container_size_grows_with_sponsor_count():
    placer = SpiralPlacer()
    assert placer.container_size(3) == (600.0, 800.0)
    assert placer.container_size(20, 900) == (900.0, 1200.0)
    assert placer.container_size(2, 500, 1000) == (500.0, 1000.0)


def test_first_sponsor_is_centred():
    sponsor = SponsorRecord(id="a", name="Acme", calculated_font_size=20)
    [placed] = SpiralPlacer().place([sponsor], "text-only", 600, 800)
    assert placed.x == pytest.approx(300 - placed.width / 2)
    assert placed.y == pytest.approx(800 * 0.31 - placed.height / 2)
    assert placed.rank == 1
    assert not placed.fallback


def test_placement_order_is_largest_first():
    small = SponsorRecord(id="small", name="Small", calculated_font_size=12)
    large = SponsorRecord(id="large", name="Large", calculated_font_size=28)
    medium = SponsorRecord(id="medium", name="Medium", calculated_font_size=20)
    placed = SpiralPlacer().place([small, large, medium], "text-only", 600, 800)
    assert [p.sponsor.id for p in placed] == ["large", "medium", "small"]
    assert [p.rank for p in placed] == [1, 2, 3]


def test_no_overlap_for_mixed_sponsors():
    sponsors = _text_sponsors(15, font_size=14) + [
        SponsorRecord(
            id=f"logo{i}",
            name=f"Logo {i}",
            sponsor_type="logo",
            logo_url=f"logo{i}.png",
            logo_approval_status="approved",
            display_name=f"Logo {i}",
            calculated_logo_width=60 + 10 * i,
        )
        for i in range(5)
    ]
    placer = SpiralPlacer()
    width, height = placer.container_size(len(sponsors))
    placed = placer.place(sponsors, "both", width, height)

    assert len(placed) == len(sponsors)
    assert not any(p.fallback for p in placed)
    assert {p.variant for p in placed} == {Variant.TEXT_ONLY, Variant.LOGO_WITH_NAME}
    _assert_no_padded_overlap(placed, placer.settings.collision_padding)


def test_boxes_stay_inside_margins():
    placer = SpiralPlacer()
    placed = placer.place(_text_sponsors(30), "text-only", 600, 1800)
    for p in placed:
        assert 10 <= p.x <= 600 - p.width - 10
        assert 20 <= p.y <= 1800 - p.height - 20


def test_terminates_for_hundred_sponsors_in_small_container():
    placer = SpiralPlacer()
    sponsors = _text_sponsors(100)
    placed = placer.place(sponsors, "text-only", 600, 800)

    assert len(placed) == 100
    assert {p.sponsor.id for p in placed} == {s.id for s in sponsors}
    assert all(p.x is not None and p.y is not None for p in placed)
    non_fallback = [p for p in placed if not p.fallback]
    _assert_no_padded_overlap(non_fallback, placer.settings.collision_padding)


def test_placement_is_deterministic():
    sponsors = _text_sponsors(25)
    first = SpiralPlacer().place(sponsors, "text-only", 600, 1500)
    second = SpiralPlacer().place(sponsors, "text-only", 600, 1500)
    assert [(p.sponsor.id, p.x, p.y) for p in first] == [(p.sponsor.id, p.x, p.y) for p in second]


def test_fallback_used_when_attempts_exhausted():
    settings = SpiralSettings(max_attempts=1)
    placer = SpiralPlacer(settings)
    sponsors = _text_sponsors(3)
    placed = placer.place(sponsors, "text-only", 600, 800)

    assert len(placed) == 3
    assert not placed[0].fallback
    assert placed[1].fallback and placed[2].fallback

    center_x = 300
    center_y = 800 * 0.31
    angle = 1 * settings.fallback_angle_step
    radius = settings.fallback_base_radius + settings.fallback_radius_step
    assert placed[1].x == pytest.approx(center_x + radius * math.cos(angle) - placed[1].width / 2)
    assert placed[1].y == pytest.approx(center_y + radius * math.sin(angle) * 0.6 - placed[1].height / 2)


def test_custom_settings_change_layout():
    sponsors = _text_sponsors(6)
    default = SpiralPlacer().place(sponsors, "text-only", 600, 800)
    wider = SpiralPlacer(SpiralSettings(angle_step=0.9, radius_step=7)).place(sponsors, "text-only", 600, 800)
    assert [(p.x, p.y) for p in default] != [(p.x, p.y) for p in wider]


def test_empty_input():
    assert SpiralPlacer().place([], "both", 600, 800) == []
