"""
客户端核心配置管理模块

提供远程网关、仪表盘、表单校验与日志的配置管理功能，
支持多环境配置文件、环境变量覆盖和配置验证。

加载顺序（后者覆盖前者）：
    默认值 -> config/gohire_<environment>.yaml -> 指定的配置文件 -> 环境变量
"""

import os
import yaml
import json
import logging
from copy import deepcopy
from dataclasses import dataclass, field, asdict
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

logger = logging.getLogger(__name__)


@dataclass
class GatewayConfig:
    """远程网关配置"""
    supabase_url: str = ""
    anon_key: str = ""
    access_token: Optional[str] = None  # 为空时使用 anon_key
    schema: str = "public"
    request_timeout: Optional[float] = None  # 秒，None 表示不设超时
    pool_size: int = 10


@dataclass
class DashboardConfig:
    """仪表盘配置"""
    recent_applications_limit: int = 5
    applications_columns: str = "id, status, job_id, jobs(title)"
    contracts_columns: str = "status"


@dataclass
class FormsConfig:
    """表单校验配置"""
    job_required_fields: List[str] = field(default_factory=lambda: [
        'title', 'education_level', 'contract_type'
    ])


@dataclass
class LoggingConfig:
    """日志配置"""
    level: str = "INFO"
    file: str = "logs/gohire.log"
    format: str = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


# (环境变量, 配置节, 配置项, 类型)；同一配置项出现多个变量时，后者优先
ENV_MAPPINGS: List[Tuple[str, str, str, Callable[[str], Any]]] = [
    ('VITE_SUPABASE_URL', 'gateway', 'supabase_url', str),
    ('SUPABASE_URL', 'gateway', 'supabase_url', str),
    ('VITE_SUPABASE_ANON_KEY', 'gateway', 'anon_key', str),
    ('SUPABASE_ANON_KEY', 'gateway', 'anon_key', str),
    ('SUPABASE_ACCESS_TOKEN', 'gateway', 'access_token', str),
    ('SUPABASE_SCHEMA', 'gateway', 'schema', str),
    ('GOHIRE_REQUEST_TIMEOUT', 'gateway', 'request_timeout', float),
    ('GOHIRE_RECENT_LIMIT', 'dashboard', 'recent_applications_limit', int),

    # 日志配置
    ('LOG_LEVEL', 'logging', 'level', str),
    ('LOG_FILE', 'logging', 'file', str),
]

_SECRET_MARKERS = ('KEY', 'TOKEN')

_READERS: Dict[str, Callable[[Any], Any]] = {
    '.yaml': yaml.safe_load,
    '.yml': yaml.safe_load,
    '.json': json.load,
}


class HireConfig:
    """客户端核心主配置类"""

    SECTIONS = ('gateway', 'dashboard', 'forms', 'logging')

    def __init__(self, config_file: Optional[str] = None, environment: str = "development"):
        """初始化配置

        Args:
            config_file: 配置文件路径
            environment: 环境名称 (development, testing, production)
        """
        self.environment = environment
        self.config_file = config_file

        self.gateway = GatewayConfig()
        self.dashboard = DashboardConfig()
        self.forms = FormsConfig()
        self.logging = LoggingConfig()

        # 默认值取自各配置节的 dataclass 定义
        self._config_data: Dict[str, Any] = {
            section: asdict(getattr(self, section)) for section in self.SECTIONS
        }

        try:
            env_file = Path(f"config/gohire_{environment}.yaml")
            if env_file.exists():
                self._load_file_config(env_file)
            if config_file:
                self._load_file_config(Path(config_file))
            self._load_env_config()
            self._apply_config()
        except Exception as e:
            logger.error(f"Failed to load config for {environment}: {e}")
            raise

        logger.info(f"GO! HIRE config initialized for environment: {environment}")

    def _load_file_config(self, path: Path) -> None:
        """合并 YAML/JSON 配置文件"""
        if not path.exists():
            logger.warning(f"Config file not found: {path}")
            return

        reader = _READERS.get(path.suffix.lower())
        if reader is None:
            logger.warning(f"Unsupported config file format: {path}")
            return

        with path.open('r', encoding='utf-8') as f:
            file_config = reader(f)

        if file_config:
            _deep_merge(self._config_data, file_config)
            logger.info(f"Loaded config from: {path}")

    def _load_env_config(self) -> None:
        """应用环境变量覆盖，无法转换的值被忽略"""
        for env_var, section, key, convert in ENV_MAPPINGS:
            raw = os.getenv(env_var)
            if raw is None:
                continue

            try:
                value = None if raw.lower() == 'none' else convert(raw)
            except (ValueError, TypeError) as e:
                logger.warning(f"Invalid env config value for {env_var}: {raw}, error: {e}")
                continue

            self._config_data.setdefault(section, {})[key] = value

            shown = '***' if any(marker in env_var for marker in _SECRET_MARKERS) else value
            logger.info(f"Applied env config: {env_var}={shown}")

    def _apply_config(self) -> None:
        """将配置字典写回各配置节对象，未知键被忽略"""
        for section in self.SECTIONS:
            target = getattr(self, section)
            for key, value in self._config_data.get(section, {}).items():
                if hasattr(target, key):
                    setattr(target, key, value)

    def get(self, key: str, default: Any = None) -> Any:
        """获取配置值

        Args:
            key: 配置键，支持点号分隔的嵌套键，如 gateway.anon_key
            default: 默认值
        """
        node: Any = self._config_data
        for part in key.split('.'):
            if not isinstance(node, dict) or part not in node:
                return default
            node = node[part]
        return node

    def set(self, key: str, value: Any) -> None:
        """设置配置值并同步到配置节对象"""
        *parents, leaf = key.split('.')
        node = self._config_data
        for part in parents:
            node = node.setdefault(part, {})
        node[leaf] = value

        self._apply_config()

    def validate(self) -> bool:
        """验证配置有效性

        Returns:
            bool: 配置是否有效，失败原因写入日志
        """
        missing = [section for section in self.SECTIONS if section not in self._config_data]
        if missing:
            logger.error(f"Missing required config sections: {missing}")
            return False

        timeout = self.gateway.request_timeout
        checks = [
            (bool(self.gateway.supabase_url), "gateway supabase_url must be specified"),
            (bool(self.gateway.anon_key), "gateway anon_key must be specified"),
            (timeout is None or timeout > 0, "request_timeout must be positive or None"),
            (self.gateway.pool_size > 0, "gateway pool_size must be positive"),
            (self.dashboard.recent_applications_limit >= 0, "recent_applications_limit must not be negative"),
            (len(self.forms.job_required_fields) > 0, "job_required_fields must not be empty"),
        ]

        failures = [message for ok, message in checks if not ok]
        for message in failures:
            logger.error(f"Config validation failed: {message}")
        if failures:
            return False

        logger.info("Config validation passed")
        return True

    def to_dict(self) -> Dict[str, Any]:
        return deepcopy(self._config_data)

    def save_to_file(self, file_path: str) -> None:
        """保存配置到 YAML 或 JSON 文件

        Raises:
            ValueError: 不支持的文件格式
        """
        path = Path(file_path)
        suffix = path.suffix.lower()
        if suffix not in _READERS:
            raise ValueError(f"Unsupported file format: {suffix}")

        path.parent.mkdir(parents=True, exist_ok=True)
        with path.open('w', encoding='utf-8') as f:
            if suffix == '.json':
                json.dump(self._config_data, f, indent=2, ensure_ascii=False)
            else:
                yaml.safe_dump(self._config_data, f, default_flow_style=False, allow_unicode=True)

        logger.info(f"Config saved to: {file_path}")


def _deep_merge(base: Dict[str, Any], override: Dict[str, Any]) -> None:
    """递归合并字典，override 优先"""
    for key, value in override.items():
        if isinstance(base.get(key), dict) and isinstance(value, dict):
            _deep_merge(base[key], value)
        else:
            base[key] = value
