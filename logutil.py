import os
import threading
import multiprocessing
import config

_cube_pos = None

_GATED_SCOPES = {
    "FIELD": "LOG_EVALUATOR",
    "EVAL": "LOG_EVALUATOR",
    "MAPGEN": "LOG_MAPGEN",
}


def set_cube(cube_pos):
    """Tag subsequent log lines with the cube being generated (None clears)."""
    global _cube_pos
    _cube_pos = tuple(cube_pos) if cube_pos is not None else None


def enabled(scope):
    flag = _GATED_SCOPES.get(scope)
    if flag is None:
        return True
    return bool(getattr(config, flag, True))


def log(scope, msg, level="INFO"):
    if level not in ("WARN", "ERROR") and not enabled(scope):
        return
    pid = os.getpid()
    proc = multiprocessing.current_process().name
    thread = threading.current_thread().name
    cube = _cube_pos
    cube_tag = f" c{cube[0]},{cube[1]},{cube[2]}" if cube is not None else ""
    text = f"[{level}{cube_tag} pid{pid} proc{proc} thr{thread} {scope}] {msg}"
    use_color = getattr(config, "LOG_COLOR", True) and os.getenv("NO_COLOR") is None
    if use_color:
        # Main process + main thread: default (no color).
        if proc == "MainProcess" and thread != "MainThread":
            # Generation worker thread.
            text = f"\x1b[32m{text}\x1b[0m"
        elif proc != "MainProcess":
            # Worker process.
            text = f"\x1b[33m{text}\x1b[0m"
    print(text)
