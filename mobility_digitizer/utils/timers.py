# mobility_digitizer/utils/timers.py
import time
from contextlib import contextmanager
from loguru import logger

@contextmanager
def timer(name: str):
    t0 = time.time()
    yield
    dt = time.time() - t0
    logger.info(f"[timer] {name}: {dt:.3f}s")
