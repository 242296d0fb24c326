"""
示例目标函数，用于演示和测试
"""
import math

import numpy as np

# coupled_parabola 的常数
COUPLED_A = -1.23456
COUPLED_B = 6.54321


def coupled_parabola(x) -> float:
    """
    两个耦合抛物线残差的欧氏范数，最小值为0

    v1 = b^2 - a, v2 = x^2 - y, w1 = a^2 - b, w2 = y^2 - x
    f(x, y) = sqrt((v1 - v2)^2 + (w1 - w2)^2)
    """
    a = COUPLED_A
    b = COUPLED_B

    v1 = b * b - a
    v2 = x[0] * x[0] - x[1]

    w1 = a * a - b
    w2 = x[1] * x[1] - x[0]

    return math.sqrt((v1 - v2) * (v1 - v2) + (w1 - w2) * (w1 - w2))


def sphere(x) -> float:
    """平方和，最小值在原点"""
    x = np.asarray(x, dtype=float)
    return float(np.sum(x * x))


def shifted_quadratic(center):
    """构造以 center 为最小点、最小值为0的二次函数"""
    center = np.asarray(center, dtype=float)

    def func(x) -> float:
        offset = np.asarray(x, dtype=float) - center
        return float(np.sum(offset * offset))

    return func


def rosenbrock(x) -> float:
    """Rosenbrock函数，最小值在 (1, ..., 1)"""
    x = np.asarray(x, dtype=float)
    return float(np.sum(100.0 * (x[1:] - x[:-1] ** 2) ** 2 + (1.0 - x[:-1]) ** 2))
