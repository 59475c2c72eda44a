"""
依赖注入容器

提供统一的依赖管理和注入机制，将配置、网关、会话控制器与各协调器装配在一起。
"""

import inspect
import logging
from enum import Enum
from typing import Any, Callable, Dict, Tuple, Type, TypeVar

from .config import HireConfig
from .interfaces import IRemoteGateway
from .adapters.postgrest_gateway import PostgrestGateway
from .coordinators.session_controller import SessionController
from .coordinators.dashboard_coordinator import DashboardCoordinator
from .coordinators.profile_coordinator import ProfileCoordinator
from .coordinators.job_coordinator import JobCoordinator
from .managers.profile_reconciler import ProfileReconciler
from .managers.job_publisher import JobPublisher

logger = logging.getLogger(__name__)

T = TypeVar('T')


class Lifetime(Enum):
    """服务生命周期"""
    INSTANCE = "instance"
    SINGLETON = "singleton"
    TRANSIENT = "transient"


class DIContainer:
    """依赖注入容器

    按类型登记服务；单例在首次解析时构造并缓存，瞬态服务每次调用工厂。
    """

    def __init__(self):
        self._registrations: Dict[Type, Tuple[Lifetime, Any]] = {}
        self._resolved: Dict[Type, Any] = {}

    def register_singleton(self, interface: Type[T], implementation: Type[T]) -> None:
        """注册单例服务，构造参数按注解注入"""
        self._registrations[interface] = (Lifetime.SINGLETON, implementation)
        self._resolved.pop(interface, None)

    def register_transient(self, interface: Type[T], factory: Callable[[], T]) -> None:
        """注册瞬态服务，工厂可以是协程函数"""
        self._registrations[interface] = (Lifetime.TRANSIENT, factory)

    def register_instance(self, interface: Type[T], instance: T) -> None:
        """注册已构造的实例"""
        self._registrations[interface] = (Lifetime.INSTANCE, instance)

    async def resolve(self, interface: Type[T]) -> T:
        """解析依赖

        Raises:
            ValueError: 类型未注册
        """
        if interface not in self._registrations:
            raise ValueError(f"No registration found for {interface.__name__}")

        lifetime, target = self._registrations[interface]
        if lifetime is Lifetime.INSTANCE:
            return target
        if lifetime is Lifetime.TRANSIENT:
            result = target()
            return await result if inspect.isawaitable(result) else result

        if interface not in self._resolved:
            self._resolved[interface] = await self._construct(target)
            logger.debug(f"Constructed singleton {interface.__name__}")
        return self._resolved[interface]

    async def _construct(self, cls: Type[T]) -> T:
        """按构造函数注解注入依赖，带默认值的参数不注入"""
        kwargs = {}
        for name, param in inspect.signature(cls.__init__).parameters.items():
            if name == 'self' or param.default is not inspect.Parameter.empty:
                continue
            if param.annotation is inspect.Parameter.empty:
                raise ValueError(f"Cannot inject unannotated parameter {name} of {cls.__name__}")
            kwargs[name] = await self.resolve(param.annotation)
        return cls(**kwargs)


class ServiceRegistry:
    """依赖注入服务注册表"""

    @staticmethod
    async def register_core_services(container: DIContainer, config: HireConfig,
                                     gateway: IRemoteGateway = None) -> None:
        """注册核心服务

        Args:
            container: 容器
            config: 客户端配置
            gateway: 可选的网关实例，默认使用 PostgrestGateway
        """
        container.register_instance(HireConfig, config)

        if gateway is not None:
            container.register_instance(IRemoteGateway, gateway)
        else:
            container.register_singleton(IRemoteGateway, PostgrestGateway)

        container.register_singleton(SessionController, SessionController)
        container.register_singleton(ProfileReconciler, ProfileReconciler)
        container.register_singleton(DashboardCoordinator, DashboardCoordinator)
        container.register_singleton(ProfileCoordinator, ProfileCoordinator)
        container.register_singleton(JobCoordinator, JobCoordinator)

        async def _job_publisher() -> JobPublisher:
            return JobPublisher(
                await container.resolve(IRemoteGateway),
                config.forms.job_required_fields
            )

        container.register_transient(JobPublisher, _job_publisher)

        logger.info("Core services registered successfully")


async def setup_container(config: HireConfig, gateway: IRemoteGateway = None) -> DIContainer:
    """创建并装配依赖注入容器"""
    container = DIContainer()
    await ServiceRegistry.register_core_services(container, config, gateway)
    return container
