"""
mem_store - Logging Module
Provides centralized logging for collection mutations.
"""
import sys
from datetime import datetime

from . import conf

first_line = True


def store_log(message: str) -> None:
    """Append log message to mem_store.log if logging is enabled."""
    global first_line
    if not conf.LOG_ENABLED:
        return
    if first_line:
        first_line = False
        conf.LOG_FILE.parent.mkdir(parents=True, exist_ok=True)
        store_log("--- New mem_store Session ---")
    timestamp = datetime.now().strftime("%Y-%m-%d %H:%M:%S")
    log_line = f"[{timestamp}] {message}\n"
    if conf.LOG_TO_STDERR:
        sys.stderr.write(log_line)
    with open(conf.LOG_FILE, "a", encoding="utf-8") as f:
        f.write(log_line)


def store_log_print() -> None:
    """Print the contents of the log file to stdout."""
    if conf.LOG_FILE.exists():
        log_contents = conf.LOG_FILE.read_text(encoding="utf-8")
        if log_contents:
            print(log_contents, end="")
        else:
            print("[mem_store log is empty]")
    else:
        print("[mem_store log file does not exist]")


def store_log_clear() -> None:
    """Delete the log file."""
    global first_line
    if conf.LOG_FILE.exists():
        conf.LOG_FILE.unlink()
    first_line = True
