"""
统一管理单纯形搜索的所有配置参数
"""
from dataclasses import dataclass, asdict, fields, replace
from typing import Dict, Any, Optional


@dataclass
class SearchConfig:
    """
    搜索配置类

    功能：
    1. 管理Nelder-Mead算法的超参数（迭代上限、反射/扩展/收缩系数）
    2. 管理命令行运行时的默认容差、初始尺度和日志参数
    3. 提供字典形式的导入导出接口

    注意：系数不做任何校验。使用非标准的取值（例如反射系数 <= 0）属于调用方的错误，
    只会导致搜索质量不可预期，而不会报错。
    """

    # ========================
    # 一、算法超参数
    # ========================

    max_iterations: int = 1000
    reflection_coefficient: float = 1.0  # alpha: 反射系数
    expansion_coefficient: float = 2.0  # gamma: 扩展系数
    contraction_coefficient: float = 0.5  # beta: 收缩系数

    # ========================
    # 二、运行参数
    # ========================

    tolerance: float = 1e-6  # 函数值标准差的收敛阈值
    scale: float = 1.0  # 初始单纯形的尺度

    # ========================
    # 三、日志参数
    # ========================

    logs_dir: Optional[str] = None  # 为None时只输出到控制台
    log_level: str = 'WARNING'

    def to_dict(self) -> Dict[str, Any]:
        """导出为普通字典"""
        return asdict(self)

    @classmethod
    def from_dict(cls, values: Dict[str, Any]) -> 'SearchConfig':
        """
        从字典构造配置

        Args:
            values: 配置字典，只能包含 SearchConfig 的字段

        Returns:
            SearchConfig: 新的配置对象
        """
        known = {f.name for f in fields(cls)}
        unknown = set(values) - known
        if unknown:
            raise ValueError(f"未知的配置项: {sorted(unknown)}")
        return cls(**values)

    def copy(self, **changes) -> 'SearchConfig':
        """复制配置，可选地覆盖部分字段"""
        return replace(self, **changes)
