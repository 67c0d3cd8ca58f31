from typing import get_origin, get_args
import yaml
from contextlib import contextmanager

def _coerce_value(val_str: str, typ):
    # Support Optional[...] and unions with None
    origin = get_origin(typ)
    args_ = get_args(typ)
    is_optional = False
    if origin is None:
        target_types = (typ,)
    elif origin is list or origin is tuple or origin is dict:
        return yaml.safe_load(val_str)
    else:
        # Assume Union
        target_types = args_
        if type(None) in target_types:
            is_optional = True
    if val_str.lower() in ("none", "null"):
        if is_optional:
            return None
        raise ValueError(f"Value {val_str!r} is not allowed for non-optional type {typ}")
    if bool in target_types:
        if val_str.lower() in ("1", "true", "t", "yes", "y", "on"):
            return True
        if val_str.lower() in ("0", "false", "f", "no", "n", "off"):
            return False
        raise ValueError(f"Cannot interpret {val_str!r} as a boolean")
    if int in target_types:
        try:
            # accept 1e6-style and 1_000_000 spellings for round counts
            return int(val_str) if "e" not in val_str.lower() else int(float(val_str))
        except ValueError:
            pass
    if float in target_types:
        try:
            return float(val_str)
        except ValueError:
            pass
    if str in target_types:
        return val_str
    raise ValueError(f"Cannot coerce {val_str!r} to {typ}")


@contextmanager
def measure_time():
    """
    Measure wall-clock time for a code block.

    Usage:
        with measure_time() as elapsed:
            do_work()
        print(elapsed())  # seconds as float

    Yields:
        Callable[[], float]: A zero-arg function that returns the elapsed
        seconds since entering the context.
    """
    import time

    t0 = time.perf_counter()
    yield lambda: time.perf_counter() - t0


__all__ = ["_coerce_value", "measure_time"]
