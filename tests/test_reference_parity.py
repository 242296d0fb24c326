"""
与逐坐标的纯Python参考实现逐位比较

参考实现按最直接的方式写成：列表存储、逐坐标循环、三个不互斥的 if 判断。
"""
import math

import numpy as np
import pytest

from nmsearch.optimization.benchmarks import coupled_parabola, rosenbrock, shifted_quadratic
from nmsearch.optimization.nelder_mead import NelderMead
from nmsearch.utils.search_trace import SearchTracer


def reference_search(func, start, tolerance, scale, max_iter=1000,
                     alpha=1.0, gamma=2.0, beta=0.5):
    n = len(start)
    evals = 0

    def evaluate(x):
        nonlocal evals
        evals += 1
        return func(x)

    pn = scale * (math.sqrt(n + 1) - 1 + n) / (n * math.sqrt(2))
    qn = scale * (math.sqrt(n + 1) - 1) / (n * math.sqrt(2))
    v = [list(map(float, start))]
    for i in range(1, n + 1):
        v.append([(pn if i - 1 == j else qn) + start[j] for j in range(n)])
    f = [evaluate(x) for x in v]

    idx = {'vs': 0, 'vh': 0, 'vg': 0}

    def indexes():
        for j in range(n + 1):
            if f[j] > f[idx['vg']]:
                idx['vg'] = j
            if f[j] < f[idx['vs']]:
                idx['vs'] = j
        idx['vh'] = idx['vs']
        for j in range(n + 1):
            if f[j] > f[idx['vh']] and f[j] < f[idx['vg']]:
                idx['vh'] = j

    iterations = 0
    for iterations in range(1, max_iter + 1):
        indexes()
        vs, vh, vg = idx['vs'], idx['vh'], idx['vg']

        vm = []
        for j in range(n):
            cent = 0.0
            for m in range(n + 1):
                if m != vg:
                    cent += v[m][j]
            vm.append(cent / n)

        vr = [vm[j] + alpha * (vm[j] - v[vg][j]) for j in range(n)]
        fr = evaluate(vr)
        if fr < f[vh] and fr >= f[vs]:
            v[vg] = list(vr)
            f[vg] = fr

        if fr < f[vs]:
            ve = [vm[j] + gamma * (vr[j] - vm[j]) for j in range(n)]
            fe = evaluate(ve)
            if fe < fr:
                v[vg] = ve
                f[vg] = fe
            else:
                v[vg] = list(vr)
                f[vg] = fr

        if fr >= f[vh]:
            if fr < f[vg] and fr >= f[vh]:
                vc = [vm[j] + beta * (vr[j] - vm[j]) for j in range(n)]
            else:
                vc = [vm[j] - beta * (vm[j] - v[vg][j]) for j in range(n)]
            fc = evaluate(vc)
            if fc < f[vg]:
                v[vg] = vc
                f[vg] = fc
            else:
                for row in range(n + 1):
                    if row != vs:
                        v[row] = [v[vs][j] + (v[row][j] - v[vs][j]) / 2.0 for j in range(n)]
                for j in range(n + 1):
                    f[j] = evaluate(v[j])
                indexes()
                f[idx['vg']] = evaluate(v[idx['vg']])
                f[idx['vh']] = evaluate(v[idx['vh']])

        favg = sum_in_order(f) / (n + 1)
        s = 0.0
        for j in range(n + 1):
            s += (f[j] - favg) ** 2 / n
        if math.sqrt(s) < tolerance:
            break

    indexes()
    best = v[idx['vs']]
    fmin = evaluate(best)
    return iterations, evals, best, fmin


def sum_in_order(values):
    total = 0.0
    for value in values:
        total += value
    return total


def staircase(x):
    return float(math.floor(2.0 * x[0]) + math.floor(3.0 * x[1]))


def plateau(x):
    """初始单纯形（从原点出发、尺度1）全部落在值为1的平台上，反射点和扩展点落在值为0的区域"""
    return 0.0 if x[0] + x[1] > 2.2 else 1.0


@pytest.mark.parametrize("func,start,tolerance,scale,max_iter", [
    (coupled_parabola, [1.0, 1.0], 1e-6, 1.0, 100000),
    (coupled_parabola, [1.0, 1.0], 1e-12, 1.0, 100000),
    (rosenbrock, [-1.2, 1.0], 1e-10, 0.5, 2000),
    (rosenbrock, [0.0, 0.0, 0.0, 0.0], 1e-8, 1.0, 3000),
    (shifted_quadratic([1.0, -2.0, 0.5]), [0.0, 0.0, 0.0], 1e-9, 2.0, 1000),
    (staircase, [0.5, 0.5], 1e-9, 1.0, 200),
    (plateau, [0.0, 0.0], 1e-9, 1.0, 50),
])
def test_matches_reference(func, start, tolerance, scale, max_iter):
    simp = NelderMead(len(start), func)
    simp.set_max_iterations(max_iter)
    result = simp.search(start, tolerance, scale)

    iterations, evals, best, fmin = reference_search(func, start, tolerance, scale, max_iter)

    assert result.iteration_count == iterations
    assert result.eval_count == evals
    assert result.min == fmin
    np.testing.assert_array_equal(result.min_values, best)


def test_tied_vertices_expand_then_shrink_in_one_iteration():
    # 三个顶点值相同，最好/最差/次差索引都指向0：
    # fr < f[best] 触发扩展（fe 不优于 fr，接受反射点），
    # 随后 fr >= f[second_worst] 读到刚写入的值，继续触发内收缩，收缩失败后整体收缩
    tracer = SearchTracer()
    simp = NelderMead(2, plateau, tracer=tracer)
    simp.set_max_iterations(1)
    result = simp.search([0.0, 0.0], 1e-9, 1.0)

    first = tracer.rows[0]
    assert first['action'] == 'shrink'
    # 反射1 + 扩展1 + 收缩1 + 整体收缩(3个顶点 + 最差点和次差点各1)
    assert first['eval_count'] - 3 == 1 + 1 + 1 + 3 + 2

    iterations, evals, best, fmin = reference_search(plateau, [0.0, 0.0], 1e-9, 1.0, 1)
    assert result.iteration_count == iterations
    assert result.eval_count == evals
    assert result.min == fmin
    np.testing.assert_array_equal(result.min_values, best)
