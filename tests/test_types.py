import pytest

from ghosthand.config import GhostRenderSettings
from ghosthand.errors import ConfigurationError, GhostHandError
from ghosthand.types import Handedness, HandLandmarks, NormalizedPoint, TrackingResult


@pytest.mark.parametrize(
    "label, expected",
    [
        ("Left", Handedness.LEFT),
        (" left ", Handedness.LEFT),
        ("LEFT", Handedness.LEFT),
        ("right", Handedness.RIGHT),
        ("Right\n", Handedness.RIGHT),
        ("", Handedness.UNKNOWN),
        (None, Handedness.UNKNOWN),
        ("ambidextrous", Handedness.UNKNOWN),
    ],
)
def test_handedness_parse(label, expected):
    assert Handedness.parse(label) is expected


def test_hand_landmarks_from_label_accepts_tuples_and_points():
    hand = HandLandmarks.from_label(" right", [(0.1, 0.2), NormalizedPoint(0.3, 0.4)])

    assert hand.handedness is Handedness.RIGHT
    assert hand.points == (NormalizedPoint(0.1, 0.2), NormalizedPoint(0.3, 0.4))
    assert hand.display_label == "right"


def test_display_label_falls_back_to_handedness():
    assert HandLandmarks.from_label(None, []).display_label == "Unknown"


def test_empty_tracking_result():
    assert len(TrackingResult.empty()) == 0


def test_settings_defaults():
    s = GhostRenderSettings()
    assert s.enable_ghost_style is True
    assert s.show_landmarks is False
    assert s.show_handedness_label is False
    assert 0.3 <= s.body_opacity <= 0.9
    assert 0.1 <= s.halo_opacity <= 0.3
    assert 3.0 <= s.blur_sigma <= 5.5
    assert 0 <= s.landmark_size <= 4
    assert 0.45 <= s.smoothing_alpha <= 0.5


def test_sanitized_clamps_out_of_domain_values():
    s = GhostRenderSettings(
        body_opacity=1.7,
        halo_opacity=-0.2,
        blur_sigma=-3.0,
        landmark_size=-1,
        smoothing_alpha=0.0,
    ).sanitized()

    assert s.body_opacity == 1.0
    assert s.halo_opacity == 0.0
    assert s.blur_sigma == 0.5
    assert s.landmark_size == 0
    assert 0.0 < s.smoothing_alpha <= 1.0


def test_sanitized_keeps_valid_values():
    s = GhostRenderSettings(body_opacity=0.5, blur_sigma=4.0, smoothing_alpha=0.5)
    assert s.sanitized() == s


def test_from_mapping_accepts_camel_and_snake_case():
    s = GhostRenderSettings.from_mapping({"enableGhostStyle": False, "blurSigma": 4.5, "halo_opacity": 0.2})

    assert s.enable_ghost_style is False
    assert s.blur_sigma == 4.5
    assert s.halo_opacity == 0.2


def test_from_mapping_rejects_unknown_keys():
    with pytest.raises(ConfigurationError) as excinfo:
        GhostRenderSettings.from_mapping({"glowColor": "red"})
    assert "config_key=glowColor" in str(excinfo.value)
    assert isinstance(excinfo.value, RuntimeError)


def test_replace_returns_new_snapshot():
    s = GhostRenderSettings()
    t = s.replace(show_landmarks=True)
    assert t.show_landmarks is True
    assert s.show_landmarks is False


def test_error_context_is_rendered():
    err = GhostHandError("boom", context={"a": 1})
    assert str(err) == "boom [a=1]"
    assert str(GhostHandError("plain")) == "plain"
