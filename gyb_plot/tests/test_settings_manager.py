import pytest

from gyb_plot.settings_manager import SettingsManager

SETTINGS = {
    'page': {'dpi': 144, 'background_colour': '#1a1a1a'},
    'text': {
        'font_scale': {'default': 1.0, 60: 0.95, 120: 0.9},
        'only_thresholds': {10: 'ten', 20: 'twenty'},
    },
    'logo': {'face_colour': '#2a2a2a'},
}


def test_plain_values():
    mgr = SettingsManager(SETTINGS)
    assert mgr.get('page.dpi') == 144
    assert mgr.get('logo.face_colour') == '#2a2a2a'


def test_missing_paths_return_default():
    mgr = SettingsManager(SETTINGS)
    assert mgr.get('page.width') is None
    assert mgr.get('page.width', 600) == 600
    assert mgr.get('nothing.here', 'x') == 'x'
    assert mgr.get('page.dpi.extra', 1) == 1


@pytest.mark.parametrize(
    "num_items,expected",
    [
        (0, 1.0),
        (59, 1.0),
        (60, 0.95),
        (119, 0.95),
        (500, 0.9),
    ],
)
def test_count_based_selection(num_items, expected):
    assert SettingsManager(SETTINGS, num_items=num_items).get('text.font_scale') == expected


def test_threshold_only_values_fall_back_to_default_argument():
    assert SettingsManager(SETTINGS, num_items=5).get('text.only_thresholds', 'none') == 'none'
    assert SettingsManager(SETTINGS, num_items=25).get('text.only_thresholds') == 'twenty'
