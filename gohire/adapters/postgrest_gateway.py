"""
Supabase REST 网关实现

负责与远程关系型存储的 REST 接口适配和通信管理。
提供按集合的读取、单条读取、插入与 upsert 操作。
"""

import logging
from datetime import datetime
from typing import Dict, List, Any, Optional

from ..interfaces import IRemoteGateway
from ..config import HireConfig
from ..exceptions import GatewayException
from .http_client import HttpClient
from .postgrest_request_mapper import PostgrestRequestMapper

logger = logging.getLogger(__name__)


class PostgrestGateway(IRemoteGateway):
    """Supabase REST 网关实现类

    所有失败都以 GatewayException 抛出，只携带可读消息；
    不做重试，不缓存结果。
    """

    def __init__(self, config: HireConfig, http_client: Optional[HttpClient] = None):
        """初始化网关

        Args:
            config: 客户端配置对象
            http_client: 可选的 HTTP 客户端，默认按配置创建
        """
        self.config = config
        self._http_client = http_client or HttpClient(config)
        self._request_mapper = PostgrestRequestMapper()

        # 请求统计
        self._request_statistics = {
            'reads': 0,
            'inserts': 0,
            'upserts': 0,
            'failed_requests': 0,
            'last_request_time': None
        }

        logger.info("PostgrestGateway initialized")

    @property
    def http_client(self) -> HttpClient:
        return self._http_client

    async def connect(self) -> None:
        """启动底层 HTTP 会话"""
        await self._http_client.start()

    async def disconnect(self) -> None:
        """关闭底层 HTTP 会话"""
        await self._http_client.stop()

    async def read(self, collection: str, filters: Optional[Dict[str, Any]] = None,
                   columns: str = "*") -> List[Dict[str, Any]]:
        """读取集合记录

        Args:
            collection: 集合名称
            filters: 等值过滤条件
            columns: 选择的列

        Returns:
            List[Dict[str, Any]]: 记录列表
        """
        self._track('reads')
        params = self._request_mapper.map_read_request(filters, columns)

        try:
            rows = await self._http_client.get(collection, params=params)
        except GatewayException:
            self._request_statistics['failed_requests'] += 1
            raise

        if rows is None:
            return []
        if not _is_row_list(rows):
            self._request_statistics['failed_requests'] += 1
            raise GatewayException(f"Unexpected response shape from {collection}", collection=collection)

        logger.debug(f"Read {len(rows)} rows from {collection}")
        return rows

    async def read_one(self, collection: str, filters: Optional[Dict[str, Any]] = None,
                       columns: str = "*") -> Optional[Dict[str, Any]]:
        """读取至多一条记录，多于一条视为错误

        Returns:
            Optional[Dict[str, Any]]: 记录或 None
        """
        self._track('reads')
        params = self._request_mapper.map_read_request(filters, columns, limit=2)

        try:
            rows = await self._http_client.get(collection, params=params)
        except GatewayException:
            self._request_statistics['failed_requests'] += 1
            raise

        rows = rows or []
        if not _is_row_list(rows):
            self._request_statistics['failed_requests'] += 1
            raise GatewayException(f"Unexpected response shape from {collection}", collection=collection)
        if len(rows) > 1:
            self._request_statistics['failed_requests'] += 1
            raise GatewayException(
                f"Multiple rows returned from {collection} where at most one was expected",
                collection=collection
            )
        return rows[0] if rows else None

    async def insert(self, collection: str, record: Dict[str, Any]) -> Dict[str, Any]:
        """插入记录并返回新 id"""
        self._track('inserts')
        request = self._request_mapper.map_insert_request()

        try:
            response = await self._http_client.post(
                collection, data=record, params=request['params'], headers=request['headers']
            )
            result = self._request_mapper.map_insert_response(response)
        except GatewayException:
            self._request_statistics['failed_requests'] += 1
            raise
        except ValueError as e:
            self._request_statistics['failed_requests'] += 1
            raise GatewayException(str(e), collection=collection)

        logger.info(f"Inserted record {result['id']} into {collection}")
        return result

    async def upsert(self, collection: str, record: Dict[str, Any], conflict_key: str) -> None:
        """按冲突键 upsert 记录"""
        self._track('upserts')
        request = self._request_mapper.map_upsert_request(conflict_key)

        try:
            await self._http_client.post(
                collection, data=record, params=request['params'], headers=request['headers']
            )
        except GatewayException:
            self._request_statistics['failed_requests'] += 1
            raise

        logger.info(f"Upserted record into {collection} on conflict {conflict_key}")

    def _track(self, kind: str) -> None:
        self._request_statistics[kind] += 1
        self._request_statistics['last_request_time'] = datetime.now()

    def get_statistics(self) -> Dict[str, Any]:
        """获取网关与 HTTP 客户端统计信息"""
        stats = dict(self._request_statistics)
        stats['http'] = self._http_client.get_statistics()
        return stats


def _is_row_list(rows: Any) -> bool:
    """PostgREST 读取响应必须是记录（字典）列表"""
    return isinstance(rows, list) and all(isinstance(row, dict) for row in rows)
