import pytest

from softraster.color import Color
from softraster.math3d import Vec3


def test_from_vec3_truncates():
    assert Color.from_vec3(Vec3(0.4, 0.6, 1.0)) == Color(102, 153, 255)
    assert Color.from_vec3(Vec3(0.999, 0.5, 0.0)) == Color(254, 127, 0)


def test_from_vec3_saturates_out_of_range():
    assert Color.from_vec3(Vec3(-0.5, 1.5, float("nan"))) == Color(0, 255, 0)
    assert Color.from_vec3(Vec3(float("inf"), float("-inf"), 2.0)) == Color(255, 0, 255)


def test_channels_are_validated():
    with pytest.raises(ValueError):
        Color(256, 0, 0)
    with pytest.raises(ValueError):
        Color(0, -1, 0)


def test_text_form():
    assert str(Color(1, 22, 255)) == "1 22 255"
    assert tuple(Color(1, 2, 3)) == (1, 2, 3)
