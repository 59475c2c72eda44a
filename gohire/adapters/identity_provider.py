"""
身份提供者实现
"""

from typing import Optional

from ..interfaces import IIdentityProvider


class StaticIdentityProvider(IIdentityProvider):
    """返回固定身份的提供者，空字符串视为未登录"""

    def __init__(self, identity: Optional[str] = None):
        self._identity = (identity or '').strip() or None

    def current_identity(self) -> Optional[str]:
        return self._identity
