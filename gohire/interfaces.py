"""
客户端核心接口定义

定义远程网关与身份提供者的抽象接口，
确保会话控制器、对账引擎与具体存储实现之间的解耦。
"""

from abc import ABC, abstractmethod
from typing import Dict, List, Any, Optional


class IRemoteGateway(ABC):
    """远程网关接口

    对命名集合提供类型化的读写操作。所有操作均为异步，
    失败时抛出携带可读消息的 GatewayException。
    """

    @abstractmethod
    async def read(self, collection: str, filters: Optional[Dict[str, Any]] = None,
                   columns: str = "*") -> List[Dict[str, Any]]:
        """读取集合中满足过滤条件的记录

        Args:
            collection: 集合名称
            filters: 等值过滤条件 {字段: 值}
            columns: 选择的列

        Returns:
            List[Dict[str, Any]]: 记录列表
        """
        pass

    @abstractmethod
    async def read_one(self, collection: str, filters: Optional[Dict[str, Any]] = None,
                       columns: str = "*") -> Optional[Dict[str, Any]]:
        """读取至多一条记录

        Returns:
            Optional[Dict[str, Any]]: 记录，不存在时为 None
        """
        pass

    @abstractmethod
    async def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """插入记录

        Returns:
            Dict[str, Any]: 包含新记录 id 的字典
        """
        pass

    @abstractmethod
    async def upsert(self, collection: str, record: Dict[str, Any], conflict_key: str) -> None:
        """按冲突键插入或覆盖记录

        Args:
            collection: 集合名称
            record: 完整记录
            conflict_key: 冲突键字段
        """
        pass

    async def connect(self) -> None:
        """建立底层连接，默认无操作"""

    async def disconnect(self) -> None:
        """释放底层连接，默认无操作"""


class IIdentityProvider(ABC):
    """身份提供者接口"""

    @abstractmethod
    def current_identity(self) -> Optional[str]:
        """获取当前身份

        Returns:
            Optional[str]: 当前身份，未登录时为 None
        """
        pass
