"""
搜索过程的运行时跟踪

替代编译期的调试开关：把 SearchTracer 传给 NelderMead 即可记录初始单纯形和每一次迭代，
不传则没有任何开销。跟踪只做记录，不影响搜索结果。
"""
import logging
from collections import Counter
from typing import Any, Dict, List, Optional

import numpy as np
import pandas as pd

logger = logging.getLogger(__name__)


class SearchTracer:
    """记录每次迭代的顶点、函数值和所执行的操作"""

    def __init__(self, record_vertices: bool = True, log_iterations: bool = False):
        """
        初始化跟踪器

        Args:
            record_vertices: 是否保存每次迭代后所有顶点的坐标（高维时占用较多内存）
            log_iterations: 是否同时以INFO级别输出每次迭代的摘要
        """
        self.record_vertices = record_vertices
        self.log_iterations = log_iterations
        self.rows: List[Dict[str, Any]] = []
        self.initial_vertices: Optional[np.ndarray] = None
        self.initial_values: Optional[np.ndarray] = None
        self.final_result = None

    def reset(self):
        """清空上一次搜索的记录"""
        self.rows = []
        self.initial_vertices = None
        self.initial_values = None
        self.final_result = None

    def on_start(self, vertices: np.ndarray, values: np.ndarray):
        """搜索开始：记录投影并求值之后的初始单纯形"""
        self.reset()
        self.initial_vertices = vertices.copy()
        self.initial_values = values.copy()

    def on_iteration(self, iteration: int, action: str, vertices: np.ndarray,
                     values: np.ndarray, spread: float, eval_count: int):
        """
        一次迭代结束（收敛检验之前的状态）

        Args:
            iteration: 迭代序号，从1开始
            action: 本次迭代最终采用的操作，reflect/expand/contract_outside/contract_inside/shrink
            vertices: 当前单纯形顶点，形状 (N+1, N)
            values: 各顶点的函数值
            spread: 函数值的标准差（收敛检验量）
            eval_count: 到目前为止的函数求值次数
        """
        row = {
            'iteration': iteration,
            'action': action,
            'best_value': float(np.min(values)),
            'worst_value': float(np.max(values)),
            'spread': float(spread),
            'eval_count': eval_count,
        }
        if self.record_vertices:
            row['vertices'] = vertices.copy()
            row['values'] = values.copy()
        self.rows.append(row)

        if self.log_iterations:
            logger.info(f"Iteration {iteration}: {action}, best={row['best_value']:.6g}, "
                        f"spread={row['spread']:.3e}")

    def on_finish(self, result):
        """搜索结束：保存结果记录的副本"""
        self.final_result = result.copy()

    def to_frame(self) -> pd.DataFrame:
        """
        把迭代记录导出为DataFrame，每次迭代一行

        Returns:
            pd.DataFrame: 列为 iteration, action, best_value, worst_value, spread, eval_count
        """
        columns = ['iteration', 'action', 'best_value', 'worst_value', 'spread', 'eval_count']
        if not self.rows:
            return pd.DataFrame(columns=columns)
        return pd.DataFrame([{k: row[k] for k in columns} for row in self.rows], columns=columns)

    def summary(self) -> Dict[str, Any]:
        """汇总统计：迭代次数、各操作次数、最终标准差"""
        actions = Counter(row['action'] for row in self.rows)
        return {
            'iterations': len(self.rows),
            'actions': dict(actions),
            'final_spread': self.rows[-1]['spread'] if self.rows else None,
            'best_value': self.rows[-1]['best_value'] if self.rows else None,
        }
