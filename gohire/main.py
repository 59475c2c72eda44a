"""
GO! HIRE 客户端核心命令行入口

加载配置后打开指定视图，输出其对外可观察状态（JSON）。

示例:
    python -m gohire.main dashboard <identity>
    python -m gohire.main profile <identity> --environment production
"""

import argparse
import asyncio
import json
import logging
import sys
from pathlib import Path

from .config import HireConfig
from .container import setup_container
from .interfaces import IRemoteGateway
from .adapters.identity_provider import StaticIdentityProvider
from .coordinators.dashboard_coordinator import DashboardCoordinator
from .coordinators.profile_coordinator import ProfileCoordinator


def setup_logging(config: HireConfig):
    """设置日志配置"""
    log_level = getattr(logging, str(config.get('logging.level', 'INFO')).upper(), logging.INFO)

    log_file = config.get('logging.file', 'logs/gohire.log')
    log_path = Path(log_file)
    log_path.parent.mkdir(parents=True, exist_ok=True)

    logging.basicConfig(
        level=log_level,
        format=config.logging.format,
        handlers=[
            logging.FileHandler(log_file),
            # stdout 用于输出 JSON 结果
            logging.StreamHandler(sys.stderr)
        ]
    )

    logging.getLogger('aiohttp').setLevel(logging.WARNING)
    logging.getLogger('asyncio').setLevel(logging.WARNING)


def parse_args(argv=None) -> argparse.Namespace:
    p = argparse.ArgumentParser(description="Open a GO! HIRE view and print its state.")
    p.add_argument("view", choices=["dashboard", "profile"], help="View to open.")
    p.add_argument("identity", nargs="?", default=None, help="Identity of the current user.")
    p.add_argument("--environment", default="development", help="Config environment name.")
    p.add_argument("--config", default=None, help="Optional YAML/JSON config file.")
    return p.parse_args(argv)


async def run(args: argparse.Namespace) -> int:
    """打开视图并输出状态"""
    config = HireConfig(config_file=args.config, environment=args.environment)
    setup_logging(config)
    logger = logging.getLogger(__name__)

    logger.info(f"Starting GO! HIRE core in {args.environment} environment")

    if not config.validate():
        logger.error("Configuration validation failed")
        return 1

    identity = StaticIdentityProvider(args.identity).current_identity()
    container = await setup_container(config)
    gateway = await container.resolve(IRemoteGateway)

    try:
        await gateway.connect()

        if args.view == "dashboard":
            coordinator = await container.resolve(DashboardCoordinator)
        else:
            coordinator = await container.resolve(ProfileCoordinator)

        handle = await coordinator.open(identity)
        state = coordinator.view(handle).to_dict()
        coordinator.close(handle)

        print(json.dumps(state, indent=2, ensure_ascii=False))
        feedback = state.get("feedback")
        return 2 if feedback and feedback["kind"] == "error" else 0

    finally:
        await gateway.disconnect()


def main(argv=None) -> int:
    try:
        return asyncio.run(run(parse_args(argv)))
    except KeyboardInterrupt:
        print("\nShutdown requested by user", file=sys.stderr)
        return 130


if __name__ == '__main__':
    sys.exit(main())
