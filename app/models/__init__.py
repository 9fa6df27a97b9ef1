from app.models.execution_log import ExecutionLog
from app.models.script import Script
from app.models.whitelist_entry import WhitelistEntry

__all__ = ["ExecutionLog", "Script", "WhitelistEntry"]
