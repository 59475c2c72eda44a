"""
协调器模块

包含会话控制器以及仪表盘、资料表单、职位表单等视图协调组件。
"""

from .session_controller import SessionController, SessionHandle, SessionState
from .dashboard_coordinator import DashboardCoordinator
from .profile_coordinator import ProfileCoordinator
from .job_coordinator import JobCoordinator

__all__ = [
    'SessionController',
    'SessionHandle',
    'SessionState',
    'DashboardCoordinator',
    'ProfileCoordinator',
    'JobCoordinator'
]
