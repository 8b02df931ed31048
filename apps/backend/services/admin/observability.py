import os
import sys
import platform
from typing import Dict, Any

from apps.backend.services.stats.cashier_stats import CashierStats
from apps.backend.services.vouchers.voucher_service import VoucherService


def system_snapshot(vouchers: VoucherService, stats: CashierStats) -> Dict[str, Any]:
    return {
        "python_version": sys.version,
        "platform": platform.platform(),
        "pid": os.getpid(),
        "env": {
            "ENVIRONMENT": os.getenv("ENVIRONMENT", "development"),
            "REQUEST_LOGGING": os.getenv("REQUEST_LOGGING", "true"),
        },
        "vouchers": vouchers.snapshot(),
        "cashiers": stats.all_counts(),
    }
