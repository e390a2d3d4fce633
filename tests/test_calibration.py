"""Tests for the intensity calibration sweep."""

from glitchart.effects._calibration import (
    LEVELS,
    calibrate_all,
    check_visible_change,
    print_report,
)
from glitchart.effects.registry import effect_ids


def test_calibration_covers_every_effect_and_level():
    results = calibrate_all()
    assert len(results) == len(effect_ids()) * len(LEVELS)
    assert [r["effect_id"] for r in results[:: len(LEVELS)]] == effect_ids()


def test_every_effect_visible_above_zero():
    assert check_visible_change(calibrate_all()) == []


def test_check_flags_invisible_levels():
    fake = [
        {"effect_id": "scanLines", "level_pct": 0, "mean_pixel_diff": 1.5},
        {"effect_id": "scanLines", "level_pct": 50, "mean_pixel_diff": 0.0},
    ]
    errors = check_visible_change(fake)
    assert len(errors) == 2


def test_print_report(capsys):
    print_report(calibrate_all())
    out = capsys.readouterr().out
    assert "rgbSplit" in out
    assert "bitCrush" in out
