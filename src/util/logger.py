import sys

LEVELS = {"DEBUG": 10, "INFO": 20, "WARNING": 30, "ERROR": 40}
_min_level = LEVELS["INFO"]

def set_level(level: str):
    global _min_level
    _min_level = LEVELS.get(level.upper(), LEVELS["INFO"])

def log(message: str, level: str = "INFO"):
    if LEVELS.get(level, LEVELS["INFO"]) < _min_level:
        return
    output = f"[namespace-manager] [{level}] {message}"
    eprint(output)

def eprint(*args, **kwargs):
    print(*args, file=sys.stderr, **kwargs)
