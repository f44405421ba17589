import logging
import os

VPA_RECOMMENDATION_CONFIG = "VPA_RECOMMENDATION_CONFIG"
VPA_RECOMMENDATION_LOG_LEVEL = "VPA_RECOMMENDATION_LOG_LEVEL"

LOG_FMT = "[%(asctime)s] [%(levelname)s] [%(filename)s:%(funcName)s:%(lineno)d] - %(message)s"
LOG_DATEFMT = "%Y-%m-%d %H:%M:%S"

# table output goes to stdout, keep stderr quiet unless asked for
DEFAULT_LOG_LEVEL = "WARNING"


def init_env(log_level: str | None = None) -> None:
    level = log_level or os.environ.get(VPA_RECOMMENDATION_LOG_LEVEL, DEFAULT_LOG_LEVEL)
    logging.basicConfig(
        format=LOG_FMT,
        datefmt=LOG_DATEFMT,
        level=getattr(logging, level.upper()),
    )
