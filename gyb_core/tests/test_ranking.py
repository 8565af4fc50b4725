import pytest

from gyb_core.models import SponsorRecord
from gyb_core.ranking import rank_sponsors


def _sponsor(sponsor_id, amount=0, **kwargs):
    return SponsorRecord(id=sponsor_id, name=f"Sponsor {sponsor_id}", amount=amount, **kwargs)


def test_amount_ordered_descending():
    sponsors = [_sponsor("a", 300), _sponsor("b", 100), _sponsor("c", 200)]
    ranked = rank_sponsors(sponsors, "pay-what-you-want", "amount-ordered")
    assert [s.amount for s in ranked] == [300, 200, 100]


def test_amount_ordered_ties_keep_input_order():
    sponsors = [_sponsor("a", 50), _sponsor("b", 75), _sponsor("c", 50), _sponsor("d", 75), _sponsor("e", 10)]
    ranked = rank_sponsors(sponsors, "fixed", "amount-ordered")
    assert [s.id for s in ranked] == ["b", "d", "a", "c", "e"]


def test_amount_ordered_missing_amount_ranks_as_zero():
    sponsors = [_sponsor("none", None), _sponsor("some", 5), _sponsor("bad", float("nan"))]
    ranked = rank_sponsors(sponsors, "pay-what-you-want", "amount-ordered")
    assert [s.id for s in ranked] == ["some", "none", "bad"]


def test_size_ordered_fixed_ascending_position():
    sponsors = [_sponsor("x", position_id="3"), _sponsor("y", position_id="1"), _sponsor("z", position_id="2")]
    ranked = rank_sponsors(sponsors, "fixed", "size-ordered")
    assert [s.position_id for s in ranked] == ["1", "2", "3"]


def test_size_ordered_positional_descending_position():
    sponsors = [_sponsor("x", position_id="3"), _sponsor("y", position_id="10"), _sponsor("z", position_id="2")]
    ranked = rank_sponsors(sponsors, "positional", "size-ordered")
    assert [s.position_id for s in ranked] == ["10", "3", "2"]


def test_size_ordered_pwyw_by_display_size():
    sponsors = [
        _sponsor("s", display_size="small"),
        _sponsor("x", display_size="xlarge"),
        _sponsor("m", display_size="medium"),
        _sponsor("l", display_size="large"),
        _sponsor("m2", display_size="medium"),
    ]
    ranked = rank_sponsors(sponsors, "pay-what-you-want", "size-ordered")
    assert [s.id for s in ranked] == ["x", "l", "m", "m2", "s"]


def test_word_cloud_orders_by_base_size():
    sponsors = [
        _sponsor("small", calculated_font_size=12),
        _sponsor("logo", sponsor_type="logo", calculated_logo_width=120),
        _sponsor("plain"),
    ]
    ranked = rank_sponsors(sponsors, "pay-what-you-want", "word-cloud")
    assert [s.id for s in ranked] == ["logo", "plain", "small"]


@pytest.mark.parametrize("style", ["mystery", "", "grid"])
def test_other_styles_rank_by_amount(style):
    sponsors = [_sponsor("a", 1), _sponsor("b", 3), _sponsor("c", 2)]
    assert [s.id for s in rank_sponsors(sponsors, "fixed", style)] == ["b", "c", "a"]


def test_rank_does_not_mutate_input():
    sponsors = [_sponsor("a", 1), _sponsor("b", 3)]
    rank_sponsors(sponsors, "fixed", "amount-ordered")
    assert [s.id for s in sponsors] == ["a", "b"]
