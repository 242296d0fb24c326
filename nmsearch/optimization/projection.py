"""
可行域投影函数

投影函数原地修改传入的点，把不可行的坐标映射到最近的可行坐标。
"""
from typing import Callable, Union, Sequence

import numpy as np

Bound = Union[float, Sequence[float], np.ndarray]


def clamp_to_box(point: np.ndarray, lower: Bound, upper: Bound) -> None:
    """
    把点原地截断到盒子 [lower, upper] 内

    Args:
        point: 需要投影的点，会被原地修改
        lower: 下界，标量或逐坐标的数组
        upper: 上界，标量或逐坐标的数组
    """
    np.clip(point, lower, upper, out=point)


def make_box_projector(lower: Bound, upper: Bound) -> Callable[[np.ndarray], None]:
    """
    构造一个盒约束投影函数，可直接传给 NelderMead 的 projector 参数

    Args:
        lower: 下界，标量或逐坐标的数组
        upper: 上界，标量或逐坐标的数组

    Returns:
        原地截断的投影函数
    """
    lower = np.asarray(lower, dtype=float)
    upper = np.asarray(upper, dtype=float)
    if np.any(lower > upper):
        raise ValueError("下界不能大于上界")

    def project(point: np.ndarray) -> None:
        clamp_to_box(point, lower, upper)

    return project
