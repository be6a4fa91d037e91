"""
播放器裝飾器

提供自動化功能：
- log_operation: 記錄操作的開始與結束
- handle_errors: 統一錯誤記錄
"""

from functools import wraps
from typing import Callable, TypeVar, ParamSpec
from loguru import logger

from .errors import MusicError

P = ParamSpec('P')
T = TypeVar('T')


def handle_errors(func: Callable[P, T]) -> Callable[P, T]:
    """
    裝飾器：統一處理錯誤並記錄
    
    錯誤記錄後會重新拋出，由呼叫者決定如何處理。
    
    使用方式：
        @handle_errors
        def load_stream(self, path):
            # 任何 MusicError 會被記錄
            ...
    """
    @wraps(func)
    def wrapper(*args, **kwargs):
        try:
            return func(*args, **kwargs)
        except MusicError as e:
            logger.error(f"[{func.__name__}] 播放器錯誤: {e.message}")
            raise
        except Exception as e:
            logger.exception(f"[{func.__name__}] 未預期錯誤: {e}")
            raise
            
    return wrapper


def log_operation(operation_name: str = None):
    """
    裝飾器：記錄操作的開始和結束
    
    使用方式：
        @log_operation("切換暫停")
        def toggle_pause(self):
            ...
    """
    def decorator(func: Callable[P, T]) -> Callable[P, T]:
        name = operation_name or func.__name__
        
        @wraps(func)
        def wrapper(*args, **kwargs):
            logger.debug(f"開始: {name}")
            try:
                result = func(*args, **kwargs)
                logger.debug(f"完成: {name}")
                return result
            except Exception as e:
                logger.debug(f"失敗: {name} - {e}")
                raise
                
        return wrapper
    return decorator
