import math

import pytest

from softraster.math3d import Mat4, Vec3, Vec4, perspective, rotate, scale, translate


def flat(m: Mat4):
    return [v for row in m.m for v in row]


def test_vector_arithmetic():
    a = Vec3(2.0, 3.0, 4.0)
    b = Vec3(1.0, 2.0, 3.0)
    assert a + b == Vec3(3.0, 5.0, 7.0)
    assert a - b == Vec3(1.0, 1.0, 1.0)
    assert a * 11.0 == Vec3(22.0, 33.0, 44.0)
    assert 22.0 * a == Vec3(44.0, 66.0, 88.0)
    assert a / 2.0 == Vec3(1.0, 1.5, 2.0)
    assert -a == Vec3(-2.0, -3.0, -4.0)


def test_dot_and_cross():
    a = Vec3(2.0, 3.0, 4.0)
    b = Vec3(1.0, 2.0, 3.0)
    assert a.dot(b) == 20.0
    assert b.dot(a) == 20.0
    assert a.cross(b) == Vec3(1.0, -2.0, 1.0)
    assert a.cross(b) == -(b.cross(a))
    assert a.cross(a) == Vec3(0.0, 0.0, 0.0)
    # right-hand rule
    assert Vec3(1.0, 0.0, 0.0).cross(Vec3(0.0, 1.0, 0.0)) == Vec3(0.0, 0.0, 1.0)


def test_length_and_normalize():
    v = Vec3(4.0, 8.0, 1.0)
    assert v.length_squared() == 81.0
    assert v.length() == 9.0
    assert tuple(v.normalize()) == pytest.approx((4 / 9, 8 / 9, 1 / 9))
    assert v.normalize().length() == pytest.approx(1.0)


def test_normalize_zero_vector_stays_zero():
    assert Vec3(0.0, 0.0, 0.0).normalize() == Vec3(0.0, 0.0, 0.0)


def test_divide_by_zero_raises():
    with pytest.raises(ZeroDivisionError):
        Vec3(1.0, 2.0, 3.0) / 0.0


def test_identity_is_neutral():
    m = translate(Vec3(1.0, -2.0, 3.5)) @ rotate(Vec3(1.0, 2.0, 3.0), 0.7) @ scale(Vec3(2.0, 3.0, 4.0))
    i = Mat4.identity()
    assert flat(i @ m) == pytest.approx(flat(m))
    assert flat(m @ i) == pytest.approx(flat(m))


def test_identity_transform_point():
    p = Vec3(1.5, -2.0, 7.25)
    assert Mat4.identity().transform_point(p) == p


def test_translation_and_scaling():
    assert translate(Vec3(1.0, 2.0, 3.0)).transform_point(Vec3(1.0, 1.0, 1.0)) == Vec3(2.0, 3.0, 4.0)
    s = scale(Vec3(2.0, 3.0, 4.0))
    assert [s.m[i][i] for i in range(4)] == [2.0, 3.0, 4.0, 1.0]


def test_composition_applies_right_to_left():
    t = translate(Vec3(1.0, 0.0, 0.0))
    s = scale(Vec3(2.0, 2.0, 2.0))
    p = Vec3(1.0, 1.0, 1.0)
    assert (t @ s).transform_point(p) == Vec3(3.0, 2.0, 2.0)
    assert (s @ t).transform_point(p) == Vec3(4.0, 2.0, 2.0)


def test_rotation_about_z_is_counter_clockwise():
    p = rotate(Vec3(0.0, 0.0, 5.0), math.pi / 2).transform_point(Vec3(1.0, 0.0, 0.0))
    assert tuple(p) == pytest.approx((0.0, 1.0, 0.0), abs=1e-12)


def test_rotation_about_diagonal_cycles_axes():
    r = rotate(Vec3(1.0, 1.0, 1.0), math.radians(120.0))
    assert tuple(r.transform_point(Vec3(1.0, 0.0, 0.0))) == pytest.approx((0.0, 1.0, 0.0), abs=1e-12)
    assert tuple(r.transform_point(Vec3(0.0, 1.0, 0.0))) == pytest.approx((0.0, 0.0, 1.0), abs=1e-12)


def test_rotation_preserves_length():
    r = rotate(Vec3(0.3, -1.0, 2.0), 1.234)
    p = Vec3(3.0, -4.0, 12.0)
    assert r.transform_point(p).length() == pytest.approx(13.0)


def test_perspective_layout():
    n, f = 0.1, 100.0
    p = perspective(math.radians(45.0), 4 / 3, n, f)
    assert p.m[2][2] == pytest.approx(-f / (f - n))
    assert p.m[2][3] == pytest.approx(-f * n / (f - n))
    assert p.m[3][2] == -1.0
    assert p.m[3][3] == 0.0
    assert p.mul_vec4(Vec4(0.0, 0.0, -5.0, 1.0)).w == 5.0


def test_perspective_divides_by_minus_z():
    p = perspective(math.radians(90.0), 1.0, 1.0, 10.0)
    assert tuple(p.transform_point(Vec3(1.0, 1.0, -2.0)))[:2] == pytest.approx((0.5, 0.5))
    assert p.transform_point(Vec3(0.0, 0.0, -1.0)).z == pytest.approx(0.0, abs=1e-12)
    assert p.transform_point(Vec3(0.0, 0.0, -10.0)).z == pytest.approx(1.0)


def test_transform_point_with_zero_w_raises():
    p = perspective(math.radians(60.0), 1.0, 0.1, 100.0)
    with pytest.raises(ZeroDivisionError):
        p.transform_point(Vec3(1.0, 1.0, 0.0))
