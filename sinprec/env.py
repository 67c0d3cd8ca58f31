from __future__ import annotations

import os
import platform
from importlib import metadata
from typing import Any, Dict

import mpmath
import numpy as np

from .io_utils import write_json
from .sine import QUAD_BACKEND


def _finfo(dtype) -> Dict[str, Any]:
    fi = np.finfo(dtype)
    return {
        "dtype": str(np.dtype(dtype)),
        "bits": int(np.dtype(dtype).itemsize * 8),
        "mantissa_bits": int(fi.nmant),
        "exponent_bits": int(fi.nexp),
        "eps": repr(fi.eps),
        "tiny": repr(fi.tiny),
    }


def collect_env(precision_bits: int | None = None) -> Dict[str, Any]:
    info: Dict[str, Any] = {}
    info["python"] = {
        "version": platform.python_version(),
        "implementation": platform.python_implementation(),
        "platform": platform.platform(),
    }
    info["os"] = {
        "system": platform.system(),
        "release": platform.release(),
        "machine": platform.machine(),
        "processor": platform.processor(),
    }
    info["numpy"] = {
        "version": np.__version__,
        "float32": _finfo(np.float32),
        "float64": _finfo(np.float64),
        "longdouble": _finfo(np.longdouble),
    }
    info["mpmath"] = {
        "version": mpmath.__version__,
        # 'gmpy' when gmpy2 accelerates the integer arithmetic, else 'python'
        "backend": mpmath.libmp.BACKEND,
        "precision_bits": precision_bits,
    }
    info["tiers"] = {
        "extended": "numpy.longdouble",
        "quad": {
            "implementation": "numpy_quaddtype",
            "version": metadata.version("numpy-quaddtype"),
            "backend": QUAD_BACKEND,
            "longdouble_is_binary128": int(np.finfo(np.longdouble).nmant) == 112,
        },
    }
    return info


def record_env(root: str, precision_bits: int | None = None) -> Dict[str, Any]:
    info = collect_env(precision_bits)
    write_json(os.path.join(root, "logs", "env.json"), info)
    return info
