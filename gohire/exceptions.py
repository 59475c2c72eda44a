"""
客户端核心异常处理模块

定义网关、读取、保存与配置各环节的异常类型，
提供统一的异常包装和敏感信息屏蔽。
"""

import re
from datetime import datetime
from typing import Dict, Any, Optional


class HireException(Exception):
    """客户端核心基础异常类"""

    def __init__(self, message: str, error_code: str = "HIRE_ERROR",
                 component: str = "unknown", details: Optional[Dict[str, Any]] = None):
        """初始化异常

        Args:
            message: 错误消息
            error_code: 错误代码
            component: 出错组件
            details: 错误详情
        """
        super().__init__(message)
        self.message = message
        self.error_code = error_code
        self.component = component
        self.details = details or {}
        self.timestamp = datetime.now()

    def to_dict(self) -> Dict[str, Any]:
        """转换为字典格式"""
        return {
            'error_code': self.error_code,
            'message': self.message,
            'component': self.component,
            'details': self.details,
            'timestamp': self.timestamp.isoformat()
        }


class GatewayException(HireException):
    """远程网关异常"""

    def __init__(self, message: str, collection: Optional[str] = None,
                 status: Optional[int] = None, details: Optional[Dict[str, Any]] = None):
        self.collection = collection
        self.status = status
        error_details = details or {}
        error_details.update({
            'collection': collection,
            'status': status
        })
        super().__init__(message, "GATEWAY_ERROR", "RemoteGateway", error_details)


class RemoteReadError(HireException):
    """远程读取异常

    联合读取中任一读取失败时抛出，不基于部分结果计算统计。
    """

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "REMOTE_READ_ERROR", "SessionController", details)


class SaveError(HireException):
    """保存异常基类"""


class ValidationError(SaveError):
    """字段校验异常，不会触达远程网关"""

    def __init__(self, field: str, message: Optional[str] = None,
                 details: Optional[Dict[str, Any]] = None):
        self.field = field
        error_details = details or {}
        error_details.update({'field': field})
        super().__init__(
            message or f"Validation failed for field {field}",
            "VALIDATION_ERROR",
            "FieldValidator",
            error_details
        )


class RemoteWriteError(SaveError):
    """远程写入异常，已持久化状态不受影响"""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message, "REMOTE_WRITE_ERROR", "Reconciler", details)


class ConfigurationException(HireException):
    """配置异常"""

    def __init__(self, config_key: str, message: str,
                 details: Optional[Dict[str, Any]] = None):
        self.config_key = config_key
        error_details = details or {}
        error_details.update({'config_key': config_key})
        super().__init__(
            f"Configuration error for {config_key}: {message}",
            "CONFIGURATION_ERROR",
            "ConfigManager",
            error_details
        )


# 敏感信息屏蔽规则
_SENSITIVE_PATTERNS = [
    (re.compile(r'apikey["\s]*[:=]["\s]*[^"\s&]+', re.IGNORECASE), 'apikey=***'),
    (re.compile(r'password["\s]*[:=]["\s]*[^"\s&]+', re.IGNORECASE), 'password=***'),
    (re.compile(r'token["\s]*[:=]["\s]*[^"\s&]+', re.IGNORECASE), 'token=***'),
    (re.compile(r'secret["\s]*[:=]["\s]*[^"\s&]+', re.IGNORECASE), 'secret=***'),
    (re.compile(r'Bearer\s+[A-Za-z0-9\-_\.]+', re.IGNORECASE), 'Bearer ***'),
]

_SENSITIVE_KEYS = ('password', 'token', 'key', 'secret', 'auth', 'credential')


def wrap_exception(exception: Exception, component: str = "unknown",
                   context: Optional[Dict[str, Any]] = None,
                   mask_sensitive: bool = True) -> HireException:
    """将任意异常包装为 HireException，已是 HireException 时原样返回

    Args:
        exception: 原始异常
        component: 出错组件
        context: 上下文信息
        mask_sensitive: 是否屏蔽敏感信息
    """
    if isinstance(exception, HireException):
        return exception

    message = str(exception)
    details = dict(context or {})
    if mask_sensitive:
        message = mask_sensitive_info(message)
        details = _mask_sensitive_details(details)

    details['original_exception_type'] = type(exception).__name__
    details['original_exception_message'] = message

    return HireException(message, "WRAPPED_EXCEPTION", component, details)


def mask_sensitive_info(message: str) -> str:
    """屏蔽消息中的密钥、令牌与密码"""
    for pattern, replacement in _SENSITIVE_PATTERNS:
        message = pattern.sub(replacement, message)
    return message


def _mask_sensitive_details(details: Dict[str, Any]) -> Dict[str, Any]:
    return {
        key: '***' if any(marker in key.lower() for marker in _SENSITIVE_KEYS) else value
        for key, value in details.items()
    }
