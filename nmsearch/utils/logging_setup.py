"""
日志配置
"""
import logging
import os
import time
from typing import Optional


def setup_logging(logs_dir: Optional[str] = 'progress/log', level: str = 'INFO') -> logging.Logger:
    """
    设置日志记录：同时输出到按日期命名的日志文件和控制台

    Args:
        logs_dir: 日志目录，为None时只输出到控制台
        level: 日志级别名称

    Returns:
        logging.Logger: 包级别的日志记录器
    """
    handlers = [logging.StreamHandler()]
    if logs_dir:
        os.makedirs(logs_dir, exist_ok=True)
        log_file = os.path.join(logs_dir, f"search_log_{time.strftime('%Y%m%d')}.log")
        handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        handlers=handlers,
        force=True
    )

    return logging.getLogger('nmsearch')
