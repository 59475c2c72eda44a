"""
HTTP客户端

提供访问 Supabase REST (PostgREST) 接口的统一 HTTP 调用。
不做自动重试；默认不设超时，由配置决定。
"""

import asyncio
import json
import logging
from typing import Dict, Any, Optional

import aiohttp

from ..config import HireConfig
from ..exceptions import ConfigurationException, GatewayException, mask_sensitive_info


class HttpClient:
    """Supabase REST HTTP客户端"""

    REST_PREFIX = '/rest/v1'

    def __init__(self, config: HireConfig):
        """初始化HTTP客户端

        Args:
            config: 客户端配置对象
        """
        if not config.gateway.supabase_url:
            raise ConfigurationException('gateway.supabase_url', "Supabase URL is not configured")

        self.config = config
        self.logger = logging.getLogger(__name__)
        self._session: Optional[aiohttp.ClientSession] = None
        self._base_url = config.gateway.supabase_url.rstrip('/')
        self._access_token = config.gateway.access_token or config.gateway.anon_key

        # 统计信息
        self._request_count = 0
        self._success_count = 0
        self._error_count = 0

    @property
    def base_url(self) -> str:
        return self._base_url

    def set_access_token(self, token: Optional[str]) -> None:
        """切换请求使用的访问令牌，None 时回退到 anon key"""
        self._access_token = token or self.config.gateway.anon_key

    def _default_headers(self) -> Dict[str, str]:
        headers = {
            'apikey': self.config.gateway.anon_key,
            'Authorization': f'Bearer {self._access_token}',
            'Content-Type': 'application/json',
        }
        schema = self.config.gateway.schema
        if schema and schema != 'public':
            headers['Accept-Profile'] = schema
            headers['Content-Profile'] = schema
        return headers

    async def start(self):
        """启动HTTP客户端"""
        if self._session:
            return

        timeout = aiohttp.ClientTimeout(total=self.config.gateway.request_timeout)
        connector = aiohttp.TCPConnector(limit=self.config.gateway.pool_size)

        self._session = aiohttp.ClientSession(timeout=timeout, connector=connector)

        self.logger.info(f"HTTP client for {self._base_url} started")

    async def stop(self):
        """停止HTTP客户端"""
        if self._session:
            await self._session.close()
            self._session = None

        self.logger.info(f"HTTP client for {self._base_url} stopped")

    async def get(self, table: str, params: Dict[str, Any] = None,
                  headers: Dict[str, str] = None) -> Any:
        """GET请求

        Args:
            table: 集合名称
            params: 查询参数
            headers: 额外请求头

        Returns:
            Any: 响应数据
        """
        return await self._request('GET', table, params=params, headers=headers)

    async def post(self, table: str, data: Any = None, params: Dict[str, Any] = None,
                   headers: Dict[str, str] = None) -> Any:
        """POST请求

        Args:
            table: 集合名称
            data: 请求数据
            params: 查询参数
            headers: 额外请求头

        Returns:
            Any: 响应数据，无响应体时为 None
        """
        return await self._request('POST', table, json=data, params=params, headers=headers)

    async def _request(self, method: str, table: str, headers: Dict[str, str] = None,
                       **kwargs) -> Any:
        """执行HTTP请求

        Args:
            method: HTTP方法
            table: 集合名称
            headers: 额外请求头
            **kwargs: 请求参数

        Returns:
            Any: 响应数据

        Raises:
            GatewayException: 请求失败或连接失败
        """
        if not self._session:
            await self.start()

        url = f"{self._base_url}{self.REST_PREFIX}/{table}"
        request_headers = self._default_headers()
        if headers:
            request_headers.update(headers)

        self._request_count += 1
        self.logger.debug(f"{method} {url} params={kwargs.get('params')}")

        try:
            async with self._session.request(method, url, headers=request_headers, **kwargs) as response:
                text = await response.text()
                if 200 <= response.status < 300:
                    self._success_count += 1
                    return json.loads(text) if text else None

                self._error_count += 1
                raise GatewayException(
                    self._extract_error_message(text, response.status),
                    collection=table,
                    status=response.status
                )

        except GatewayException:
            raise

        except aiohttp.ClientError as e:
            self._error_count += 1
            raise GatewayException(
                f"Connection failed to {table}: {mask_sensitive_info(str(e))}",
                collection=table
            )

        except asyncio.TimeoutError:
            self._error_count += 1
            raise GatewayException(f"Request to {table} timed out", collection=table)

        except ValueError as e:
            self._error_count += 1
            raise GatewayException(f"Invalid response from {table}: {e}", collection=table)

    @staticmethod
    def _extract_error_message(text: str, status: int) -> str:
        """从 PostgREST 错误响应中提取可读消息"""
        try:
            body = json.loads(text) if text else {}
        except ValueError:
            body = {}

        if isinstance(body, dict):
            for key in ('message', 'hint', 'details', 'error_description', 'error'):
                value = body.get(key)
                if value:
                    return mask_sensitive_info(str(value))

        if text:
            return mask_sensitive_info(f"HTTP {status}: {text[:200]}")
        return f"HTTP {status}"

    def get_statistics(self) -> Dict[str, Any]:
        """获取统计信息

        Returns:
            Dict[str, Any]: 统计信息
        """
        return {
            'base_url': self._base_url,
            'request_count': self._request_count,
            'success_count': self._success_count,
            'error_count': self._error_count,
            'success_rate': self._success_count / max(self._request_count, 1)
        }
