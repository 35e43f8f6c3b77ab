from cachetools import cached

from keepc.config.logger import reset_logging
from keepc.config.settings import app_log_dir


@cached(cache={})
def setup():
    """
    One-time setup of logging and directories. Idempotent.
    """

    reset_logging(app_log_dir())
