"""背景变换的仿射几何.

变换列表按书写顺序组合（与 CSS transform 语义一致），并以元素中心为原点：
``p' = C + M · (p - C)``，其中 ``M = op1 · op2 · …``。
平移操作位于旋转、缩放之后时，其位移在旋转缩放后的坐标系中生效。
"""

from __future__ import annotations

import math
from typing import Iterable, Optional, Sequence

from thumbnail_studio.models.layers import RotateOp, ScaleOp, TransformOp, TranslateOp

# (a, b, c, d, e, f): x' = a·x + b·y + c, y' = d·x + e·y + f
Affine = tuple[float, float, float, float, float, float]

IDENTITY: Affine = (1.0, 0.0, 0.0, 0.0, 1.0, 0.0)

# 行列式小于该值视为不可逆
_SINGULAR_EPSILON = 1e-12


def multiply(m: Affine, n: Affine) -> Affine:
    """矩阵乘法 m · n（先应用 n，再应用 m）."""
    a1, b1, c1, d1, e1, f1 = m
    a2, b2, c2, d2, e2, f2 = n
    return (
        a1 * a2 + b1 * d2,
        a1 * b2 + b1 * e2,
        a1 * c2 + b1 * f2 + c1,
        d1 * a2 + e1 * d2,
        d1 * b2 + e1 * e2,
        d1 * c2 + e1 * f2 + f1,
    )


def translation(x: float, y: float) -> Affine:
    return (1.0, 0.0, x, 0.0, 1.0, y)


def op_matrix(op: TransformOp, unit: float = 1.0) -> Affine:
    """单个变换操作的矩阵.

    Args:
        op: 变换操作
        unit: 像素缩放系数（平移量乘以该系数）
    """
    if isinstance(op, ScaleOp):
        return (op.factor, 0.0, 0.0, 0.0, op.factor, 0.0)
    if isinstance(op, RotateOp):
        rad = math.radians(op.degrees)
        cos, sin = math.cos(rad), math.sin(rad)
        # y 轴向下，正角度为顺时针
        return (cos, -sin, 0.0, sin, cos, 0.0)
    if isinstance(op, TranslateOp):
        return translation(op.x * unit, op.y * unit)
    raise TypeError(f"未知变换操作: {op!r}")


def compose(
    ops: Iterable[TransformOp],
    center: tuple[float, float],
    unit: float = 1.0,
) -> Affine:
    """组合变换列表为绕中心的正向仿射矩阵."""
    m = IDENTITY
    for op in ops:
        m = multiply(m, op_matrix(op, unit))
    cx, cy = center
    return multiply(translation(cx, cy), multiply(m, translation(-cx, -cy)))


def invert(m: Affine) -> Optional[Affine]:
    """求逆矩阵，不可逆时返回 None."""
    a, b, c, d, e, f = m
    det = a * e - b * d
    if abs(det) < _SINGULAR_EPSILON:
        return None
    ia = e / det
    ib = -b / det
    id_ = -d / det
    ie = a / det
    return (ia, ib, -(ia * c + ib * f), id_, ie, -(id_ * c + ie * f))


def apply(m: Affine, point: tuple[float, float]) -> tuple[float, float]:
    """对点应用仿射矩阵."""
    a, b, c, d, e, f = m
    x, y = point
    return (a * x + b * y + c, d * x + e * y + f)


def pillow_coefficients(
    ops: Sequence[TransformOp],
    size: tuple[int, int],
    unit: float = 1.0,
) -> Optional[Affine]:
    """计算 ``Image.transform(AFFINE)`` 所需的逆映射系数.

    Pillow 的仿射变换把输出像素映射回输入像素，因此需要正向矩阵的逆。

    Args:
        ops: 变换操作列表
        size: 画布尺寸（像素）
        unit: 像素缩放系数

    Returns:
        6 元组系数；变换退化（如缩放为 0）时返回 None
    """
    center = (size[0] / 2, size[1] / 2)
    return invert(compose(ops, center, unit))
