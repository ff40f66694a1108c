"""Wall-clock helper; all stored timestamps are whole epoch seconds."""

import time


def current_time() -> int:
    return int(time.time())
