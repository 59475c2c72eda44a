"""
统计聚合引擎

将同一身份下的求职申请与合同集合归约为仪表盘统计。
纯函数：相同输入得到相同输出，无副作用，不访问网关。
"""

from collections import Counter
from typing import Dict, Sequence

from ..models import Application, Contract, ContractStatus, Stats

DEFAULT_PREVIEW_LIMIT = 5

# 合同状态 -> 统计计数字段
CONTRACT_COUNTERS: Dict[ContractStatus, str] = {
    ContractStatus.ATIVO: 'active_count',
    ContractStatus.PENDENTE: 'pending_count',
    ContractStatus.RECUSADO: 'rejected_count',
}


def aggregate(applications: Sequence[Application], contracts: Sequence[Contract],
              preview_limit: int = DEFAULT_PREVIEW_LIMIT) -> Stats:
    """聚合求职申请与合同

    词汇表之外的合同状态不计入任何计数；预览保持网关返回的顺序。

    Args:
        applications: 求职申请列表
        contracts: 合同列表
        preview_limit: 预览条数上限

    Returns:
        Stats: 统计结果
    """
    known = {status.value: status for status in CONTRACT_COUNTERS}
    counts = Counter(
        CONTRACT_COUNTERS[known[contract.status]]
        for contract in contracts
        if isinstance(contract.status, str) and contract.status in known
    )

    return Stats(
        applications_count=len(applications),
        active_count=counts['active_count'],
        pending_count=counts['pending_count'],
        rejected_count=counts['rejected_count'],
        recent_applications=list(applications[:max(preview_limit, 0)]),
    )
