"""Low-level sysctl interface for macOS system metrics.

Uses ctypes to call sysctlbyname() directly - no subprocess overhead.
The C library is bound lazily so the module imports cleanly on Linux.
"""

import ctypes
from ctypes import byref, c_int, c_int64, c_size_t

_sysctlbyname = None


def _load_sysctlbyname():
    """Return libc's sysctlbyname, or None if this libc has no such symbol."""
    global _sysctlbyname
    if _sysctlbyname is None:
        libc = ctypes.CDLL(None)
        func = getattr(libc, "sysctlbyname", None)
        if func is None:
            return None
        func.argtypes = [
            ctypes.c_char_p,
            ctypes.c_void_p,
            ctypes.POINTER(c_size_t),
            ctypes.c_void_p,
            c_size_t,
        ]
        func.restype = c_int
        _sysctlbyname = func
    return _sysctlbyname


def sysctl_int(name: str) -> int | None:
    """Read an integer sysctl value by MIB name.

    Args:
        name: sysctl MIB name (e.g., "hw.logicalcpu")

    Returns:
        Integer value on success, None if sysctl doesn't exist or fails.

    Note:
        Uses c_int64 buffer which handles both 32-bit and 64-bit sysctls.
        sysctl only writes the bytes it needs (little-endian hosts).
    """
    func = _load_sysctlbyname()
    if func is None:
        return None
    value = c_int64()
    size = c_size_t(ctypes.sizeof(value))
    result = func(name.encode(), byref(value), byref(size), None, 0)
    return value.value if result == 0 else None
