"""
PostgREST 请求映射器

将网关层的集合读写请求转换为 Supabase REST (PostgREST) 的
查询参数与请求头格式，处理过滤条件编码和写入偏好设置。
"""

import logging
from typing import Dict, Any, Optional

logger = logging.getLogger(__name__)


class PostgrestRequestMapper:
    """PostgREST 请求映射器

    过滤条件 {字段: 值} 映射为 字段=eq.值，列选择映射为 select 参数。
    """

    def map_filters(self, filters: Optional[Dict[str, Any]]) -> Dict[str, str]:
        """映射等值过滤条件

        Args:
            filters: 过滤条件字典

        Returns:
            Dict[str, str]: PostgREST 查询参数
        """
        params: Dict[str, str] = {}
        for field_name, value in (filters or {}).items():
            if value is None:
                params[field_name] = 'is.null'
            elif isinstance(value, bool):
                params[field_name] = f"eq.{str(value).lower()}"
            else:
                params[field_name] = f"eq.{value}"
        return params

    def map_read_request(self, filters: Optional[Dict[str, Any]], columns: str = "*",
                         limit: Optional[int] = None) -> Dict[str, str]:
        """映射读取请求

        Args:
            filters: 过滤条件
            columns: 选择的列，支持 jobs(title) 形式的内嵌关系
            limit: 最大返回条数

        Returns:
            Dict[str, str]: PostgREST 查询参数
        """
        params = {'select': self._normalize_columns(columns)}
        params.update(self.map_filters(filters))
        if limit is not None:
            params['limit'] = str(limit)

        logger.debug(f"Mapped read request: {params}")
        return params

    def map_insert_request(self) -> Dict[str, Any]:
        """映射插入请求，返回新记录的 id

        Returns:
            Dict[str, Any]: 包含 params 与 headers 的字典
        """
        return {
            'params': {'select': 'id'},
            'headers': {'Prefer': 'return=representation'}
        }

    def map_upsert_request(self, conflict_key: str) -> Dict[str, Any]:
        """映射 upsert 请求

        Args:
            conflict_key: 冲突键字段

        Returns:
            Dict[str, Any]: 包含 params 与 headers 的字典
        """
        if not conflict_key:
            raise ValueError("Upsert requires a conflict key")

        return {
            'params': {'on_conflict': conflict_key},
            'headers': {'Prefer': 'resolution=merge-duplicates,return=minimal'}
        }

    def map_insert_response(self, response: Any) -> Dict[str, Any]:
        """标准化插入响应为 {id: ...}"""
        row = response[0] if isinstance(response, list) and response else response
        if not isinstance(row, dict) or 'id' not in row:
            raise ValueError(f"Insert response has no id: {response!r}")
        return {'id': row['id']}

    @staticmethod
    def _normalize_columns(columns: Optional[str]) -> str:
        """去除列列表中的空白"""
        if not columns:
            return '*'
        return ''.join(columns.split())
