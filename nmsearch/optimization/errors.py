"""
搜索接口的参数错误

只在接口边界（构造函数、initialize、search）做校验，迭代过程本身不抛出异常。
目标函数和投影函数抛出的异常原样向上传播。
"""


class SearchError(ValueError):
    """所有搜索参数错误的基类"""


class InvalidDimension(SearchError):
    """维度不是 >= 1 的整数"""


class InvalidArgument(SearchError):
    """起始点的长度与维度不一致，或其他参数类型错误"""


class InvalidTolerance(SearchError):
    """容差不是有限的正数"""


class InvalidScale(SearchError):
    """初始尺度为0或不是有限数"""
