"""cvm 日志配置

stdout 只留给命令结果（版本列表、切换提示），诊断信息一律经 logging 写 stderr，
这样 `cvm active` 之类的输出可以直接被脚本读取。

默认只输出 WARNING 及以上；`--verbose` 打开 DEBUG，
CVM_LOG_JSON=1 时每条日志输出一行 JSON，方便重定向到文件后用 jq 过滤。
"""

from __future__ import annotations

import json
import logging
import sys
from datetime import datetime, timezone

TEXT_FORMAT = "cvm %(levelname)s [%(name)s] %(message)s"
DEBUG_TEXT_FORMAT = "%(asctime)s cvm %(levelname)s [%(name)s:%(lineno)d] %(message)s"


class JSONFormatter(logging.Formatter):
    """一行一条的 JSON 日志

    字段: ts, level, logger, msg, 以及调试用的 where (模块:行号)；
    带异常时追加 exc。
    """

    def format(self, record: logging.LogRecord) -> str:
        entry = {
            "ts": datetime.fromtimestamp(record.created, tz=timezone.utc).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "msg": record.getMessage(),
            "where": f"{record.module}:{record.lineno}",
        }
        if record.exc_info and record.exc_info[1]:
            entry["exc"] = self.formatException(record.exc_info)
        return json.dumps(entry, ensure_ascii=False)


def setup_logging(level: str = "WARNING", json_output: bool = False) -> None:
    """把根日志器接到 stderr

    level 取不到对应级别时退回 WARNING。重复调用会先拆掉旧 handler，
    同一进程里多次执行 CLI（测试里的 CliRunner）不会重复输出。
    """
    reset_logging()
    root = logging.getLogger()
    numeric = getattr(logging, level.upper(), logging.WARNING)
    root.setLevel(numeric)

    handler = logging.StreamHandler(sys.stderr)
    if json_output:
        handler.setFormatter(JSONFormatter())
    else:
        fmt = DEBUG_TEXT_FORMAT if numeric <= logging.DEBUG else TEXT_FORMAT
        handler.setFormatter(logging.Formatter(fmt))
    root.addHandler(handler)


def reset_logging() -> None:
    root = logging.getLogger()
    for handler in root.handlers[:]:
        root.removeHandler(handler)
        handler.close()
