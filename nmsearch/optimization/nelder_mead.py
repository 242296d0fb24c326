"""
Nelder-Mead单纯形搜索

无导数地最小化N个连续变量的标量函数，可选地通过调用方提供的投影函数把每个候选点限制在可行域内。
单纯形、函数值和所有临时点在构造时一次性分配，之后的每次 search 都原地复用这些存储。
"""
import logging
import math
import numbers
from dataclasses import dataclass, field
from typing import Callable, Optional

import numpy as np

from nmsearch.config.search_config import SearchConfig
from nmsearch.optimization.errors import (
    InvalidArgument, InvalidDimension, InvalidScale, InvalidTolerance
)

logger = logging.getLogger(__name__)

Evaluator = Callable[[np.ndarray], float]
Projector = Callable[[np.ndarray], Optional[np.ndarray]]


@dataclass
class SearchResult:
    """
    最近一次 search 的结果

    Attributes:
        iteration_count: 实际执行的迭代次数
        eval_count: 目标函数求值总次数（包括初始单纯形和最后对最优点的重新求值）
        min_values: 找到的最优点
        min: 最优点的函数值
        converged: 是否在迭代上限之内满足了容差
    """
    iteration_count: int = 0
    eval_count: int = 0
    min_values: np.ndarray = field(default_factory=lambda: np.zeros(0))
    min: float = math.nan
    converged: bool = False

    def copy(self) -> 'SearchResult':
        return SearchResult(
            iteration_count=self.iteration_count,
            eval_count=self.eval_count,
            min_values=self.min_values.copy(),
            min=self.min,
            converged=self.converged,
        )


@dataclass
class SearchState:
    """每次 search 开始时重置的工作状态"""
    eval_count: int = 0
    best: int = 0  # 函数值最小的顶点
    second_worst: int = 0  # 函数值次大的顶点
    worst: int = 0  # 函数值最大的顶点

    def reset(self):
        self.eval_count = 0
        self.best = 0
        self.second_worst = 0
        self.worst = 0


class NelderMead:
    """
    Nelder-Mead算法的主接口。构造之后维度不能再改变，如需不同维度请重新构造实例。

    实例不支持并发使用：同一个实例上不能同时进行两次搜索。
    """

    def __init__(self,
                 dimension: int,
                 evaluator: Evaluator,
                 projector: Optional[Projector] = None,
                 config: Optional[SearchConfig] = None,
                 tracer=None):
        """
        初始化搜索器

        Args:
            dimension: 变量个数N，必须 >= 1
            evaluator: 目标函数，接收长度为N的一维数组，返回标量。不要保留传入数组的引用，
                它是搜索器内部的缓冲区，会被后续迭代覆盖
            projector: 可选的投影函数，原地修改传入的点；如果返回数组，则用返回值覆盖该点
            config: 算法参数，默认使用 SearchConfig()。搜索器持有它的一个副本
            tracer: 可选的跟踪器（见 nmsearch.utils.search_trace.SearchTracer）
        """
        if isinstance(dimension, bool) or not isinstance(dimension, numbers.Integral) or dimension < 1:
            raise InvalidDimension(f"维度必须是 >= 1 的整数，得到 {dimension!r}")

        self.size = int(dimension)
        self.evaluator = evaluator
        self.projector = projector
        self.config = config.copy() if config is not None else SearchConfig()
        self.tracer = tracer

        n = self.size
        self._vertices = np.zeros((n + 1, n))  # 单纯形顶点
        self._values = np.zeros(n + 1)  # 各顶点的函数值
        self._reflected = np.zeros(n)  # 反射点
        self._expanded = np.zeros(n)  # 扩展点
        self._contracted = np.zeros(n)  # 收缩点
        self._centroid = np.zeros(n)  # 除最差点外的重心

        self._state = SearchState()
        self._result = SearchResult(min_values=np.zeros(n))

    # ------------------------------------------------------------------
    # 配置
    # ------------------------------------------------------------------

    def set_max_iterations(self, value: int):
        if isinstance(value, bool) or not isinstance(value, numbers.Integral) or value < 0:
            raise InvalidArgument(f"迭代上限必须是非负整数，得到 {value!r}")
        self.config.max_iterations = int(value)

    def set_reflection_coefficient(self, value: float):
        self.config.reflection_coefficient = float(value)

    def set_contraction_coefficient(self, value: float):
        self.config.contraction_coefficient = float(value)

    def set_expansion_coefficient(self, value: float):
        self.config.expansion_coefficient = float(value)

    # ------------------------------------------------------------------
    # 访问接口
    # ------------------------------------------------------------------

    @property
    def dimension(self) -> int:
        return self.size

    @property
    def last_result(self) -> SearchResult:
        """最近一次 search 的结果（引用），下一次 search 会覆盖它"""
        return self._result

    def get_last_result(self) -> SearchResult:
        return self._result

    @property
    def vertices(self) -> np.ndarray:
        """当前单纯形顶点的只读视图，形状 (N+1, N)"""
        view = self._vertices.view()
        view.flags.writeable = False
        return view

    @property
    def values(self) -> np.ndarray:
        """当前各顶点函数值的只读视图"""
        view = self._values.view()
        view.flags.writeable = False
        return view

    # ------------------------------------------------------------------
    # 搜索
    # ------------------------------------------------------------------

    def initialize(self, start, scale: float):
        """
        以 start 为第0个顶点构造正则单纯形，不对目标函数求值

        pn = scale * (sqrt(N+1) - 1 + N) / (N * sqrt(2))
        qn = scale * (sqrt(N+1) - 1) / (N * sqrt(2))
        第i个顶点（i >= 1）的第 i-1 个坐标偏移 pn，其余坐标偏移 qn。

        Args:
            start: 起始点，长度为N
            scale: 初始单纯形的尺度，不能为0
        """
        start = self._check_start(start)
        if not isinstance(scale, numbers.Real) or not math.isfinite(scale) or scale == 0:
            raise InvalidScale(f"尺度必须是非零的有限数，得到 {scale!r}")

        self._state.reset()

        n = self.size
        pn = scale * (math.sqrt(n + 1) - 1 + n) / (n * math.sqrt(2))
        qn = scale * (math.sqrt(n + 1) - 1) / (n * math.sqrt(2))

        v = self._vertices
        v[0] = start
        for i in range(1, n + 1):
            for j in range(n):
                if i - 1 == j:
                    v[i, j] = pn + start[j]
                else:
                    v[i, j] = qn + start[j]

    def search(self, start, tolerance: float, scale: float) -> SearchResult:
        """
        从 start 出发搜索最小值

        同一个实例可以反复调用，不会重新分配内存。达到迭代上限仍未收敛不是错误，
        结果中的 converged 为 False，iteration_count 等于迭代上限。

        Args:
            start: 起始点，长度为N
            tolerance: 收敛阈值，作用于各顶点函数值的标准差（除以N），必须 > 0
            scale: 初始单纯形的尺度，不能为0

        Returns:
            SearchResult: 结果记录（同 last_result）
        """
        if not isinstance(tolerance, numbers.Real) or not math.isfinite(tolerance) or tolerance <= 0:
            raise InvalidTolerance(f"容差必须是有限的正数，得到 {tolerance!r}")

        self.initialize(start, scale)

        n = self.size
        state = self._state
        v = self._vertices
        f = self._values
        config = self.config

        # 起始点不一定满足约束，先投影
        if self.projector is not None:
            for j in range(n + 1):
                self._project(v[j])

        for j in range(n + 1):
            f[j] = self._evaluate(v[j], state)

        if self.tracer is not None:
            self.tracer.on_start(v, f)
        if logger.isEnabledFor(logging.DEBUG):
            self._log_simplex("Initial values")

        logger.info(f"开始单纯形搜索: N={n}, tolerance={tolerance:g}, scale={scale:g}, "
                    f"max_iterations={config.max_iterations}")

        alpha = config.reflection_coefficient
        gamma = config.expansion_coefficient
        beta = config.contraction_coefficient

        iteration_count = 0
        converged = False
        while iteration_count < config.max_iterations:
            iteration_count += 1

            self._rank(state)
            vg = state.worst
            vs = state.best
            vh = state.second_worst

            self._compute_centroid(vg)
            vm = self._centroid

            # 反射最差点
            vr = self._reflected
            np.subtract(vm, v[vg], out=vr)
            vr *= alpha
            vr += vm
            self._project(vr)
            fr = self._evaluate(vr, state)

            action = ''
            if f[vs] <= fr < f[vh]:
                v[vg] = vr
                f[vg] = fr
                action = 'reflect'

            # 以下两个判断与上面不是互斥的，读取的都是当前的函数值
            if fr < f[vs]:
                ve = self._expanded
                np.subtract(vr, vm, out=ve)
                ve *= gamma
                ve += vm
                self._project(ve)
                fe = self._evaluate(ve, state)

                if fe < fr:
                    v[vg] = ve
                    f[vg] = fe
                    action = 'expand'
                else:
                    v[vg] = vr
                    f[vg] = fr
                    action = 'reflect'

            if fr >= f[vh]:
                vc = self._contracted
                if f[vh] <= fr < f[vg]:
                    # 外收缩
                    np.subtract(vr, vm, out=vc)
                    vc *= beta
                    vc += vm
                    contraction = 'contract_outside'
                else:
                    # 内收缩
                    np.subtract(vm, v[vg], out=vc)
                    vc *= beta
                    np.subtract(vm, vc, out=vc)
                    contraction = 'contract_inside'
                self._project(vc)
                fc = self._evaluate(vc, state)

                if fc < f[vg]:
                    v[vg] = vc
                    f[vg] = fc
                    action = contraction
                else:
                    self._shrink(state)
                    action = 'shrink'

            spread = self._spread()

            if self.tracer is not None:
                self.tracer.on_iteration(iteration_count, action, v, f, spread, state.eval_count)
            if logger.isEnabledFor(logging.DEBUG):
                self._log_simplex(f"Iteration {iteration_count} ({action})")

            if spread < tolerance:
                converged = True
                break

        self._rank(state)
        vs = state.best

        result = self._result
        result.min = self._evaluate(v[vs], state)
        result.eval_count = state.eval_count
        result.iteration_count = iteration_count
        result.min_values[:] = v[vs]
        result.converged = converged

        if converged:
            logger.info(f"搜索收敛: {iteration_count} 次迭代, {state.eval_count} 次求值, "
                        f"最小值 {result.min:.6e}")
        else:
            logger.info(f"达到迭代上限 {config.max_iterations} 仍未收敛: {state.eval_count} 次求值, "
                        f"当前最小值 {result.min:.6e}")

        if self.tracer is not None:
            self.tracer.on_finish(result)

        return result

    # ------------------------------------------------------------------
    # 内部步骤
    # ------------------------------------------------------------------

    def _check_start(self, start) -> np.ndarray:
        try:
            start = np.asarray(start, dtype=float)
        except (TypeError, ValueError) as e:
            raise InvalidArgument(f"起始点无法转换为实数数组: {e}") from e
        if start.shape != (self.size,):
            raise InvalidArgument(f"起始点的形状应为 ({self.size},)，得到 {start.shape}")
        return start

    def _evaluate(self, point: np.ndarray, state: SearchState) -> float:
        state.eval_count += 1
        return float(self.evaluator(point))

    def _project(self, point: np.ndarray):
        if self.projector is None:
            return
        projected = self.projector(point)
        if projected is not None and projected is not point:
            point[:] = projected

    def _rank(self, state: SearchState):
        """
        计算最好、最差和次差顶点的索引

        扫描从上一次的索引出发，使用严格比较，并列时保留先找到的索引。
        次差点是函数值严格小于最差点的顶点中最大的一个。
        """
        f = self._values
        vg = state.worst
        vs = state.best
        for j in range(self.size + 1):
            if f[j] > f[vg]:
                vg = j
            if f[j] < f[vs]:
                vs = j

        vh = vs
        for j in range(self.size + 1):
            if f[vh] < f[j] < f[vg]:
                vh = j

        state.worst = vg
        state.best = vs
        state.second_worst = vh

    def _compute_centroid(self, worst: int):
        vm = self._centroid
        vm.fill(0.0)
        for m in range(self.size + 1):
            if m != worst:
                vm += self._vertices[m]
        vm /= self.size

    def _shrink(self, state: SearchState):
        """收缩失败：把所有顶点到最好点的距离减半，然后全部重新求值"""
        v = self._vertices
        f = self._values
        vs = state.best
        for row in range(self.size + 1):
            if row != vs:
                v[row] -= v[vs]
                v[row] /= 2.0
                v[row] += v[vs]

        for j in range(self.size + 1):
            self._project(v[j])
            f[j] = self._evaluate(v[j], state)

        self._rank(state)

        # 对新的最差点和次差点再投影并求值一次
        vg = state.worst
        vh = state.second_worst
        self._project(v[vg])
        f[vg] = self._evaluate(v[vg], state)
        self._project(v[vh])
        f[vh] = self._evaluate(v[vh], state)

    def _spread(self) -> float:
        """函数值的标准差，分母为N而不是N+1"""
        f = self._values
        n = self.size
        fsum = 0.0
        for j in range(n + 1):
            fsum += f[j]
        favg = fsum / (n + 1)
        s = 0.0
        for j in range(n + 1):
            s += (f[j] - favg) ** 2 / n
        return math.sqrt(s)

    def _log_simplex(self, title: str):
        logger.debug(title)
        for j in range(self.size + 1):
            coords = ", ".join(f"{x:f}" for x in self._vertices[j])
            logger.debug(f"  {coords}, value {self._values[j]:f}")
