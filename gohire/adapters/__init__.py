"""
适配器模块

包含远程网关、HTTP 客户端、请求映射器与身份提供者的具体实现。
"""

# 为避免在导入子模块时触发 aiohttp 加载，此处不聚合导入子模块。
# 请从具体模块路径导入需要的适配器，例如：
# from gohire.adapters.postgrest_gateway import PostgrestGateway
__all__: list[str] = []
