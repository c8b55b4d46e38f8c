"""Error numbers used throughout the SDK and the exception that carries them."""

from __future__ import annotations

import enum


class Errno(enum.IntEnum):
    """Error numbers, matching the Linux/POSIX values."""

    EIO = 5
    EAGAIN = 11
    ENOMEM = 12
    EBUSY = 16
    ENODEV = 19
    EINVAL = 22
    ENOSPC = 28
    EDOM = 33
    ERANGE = 34
    ENAMETOOLONG = 36
    ENOSYS = 38
    ENOMSG = 42
    ENODATA = 61
    ETIME = 62
    EPROTO = 71
    EBADMSG = 74
    EOVERFLOW = 75
    EILSEQ = 84
    EDESTADDRREQ = 89
    EMSGSIZE = 90
    ENOTSUP = 95
    EADDRINUSE = 98
    EADDRNOTAVAIL = 99
    ECONNRESET = 104
    ENOBUFS = 105
    EHOSTDOWN = 112
    EHOSTUNREACH = 113

    @property
    def description(self) -> str:
        """Short human-readable meaning of the error number."""
        return _DESCRIPTIONS[self]


_DESCRIPTIONS = {
    Errno.EIO: "I/O error",
    Errno.EAGAIN: "Try again",
    Errno.ENOMEM: "Out of memory",
    Errno.EBUSY: "Device or resource busy",
    Errno.ENODEV: "No such device",
    Errno.EINVAL: "Invalid argument",
    Errno.ENOSPC: "No space left on device",
    Errno.EDOM: "Math argument out of domain of func",
    Errno.ERANGE: "Math result not representable",
    Errno.ENAMETOOLONG: "File name too long",
    Errno.ENOSYS: "Function not implemented",
    Errno.ENOMSG: "No message of desired type",
    Errno.ENODATA: "No data available",
    Errno.ETIME: "Timer expired",
    Errno.EPROTO: "Protocol error",
    Errno.EBADMSG: "Not a data message",
    Errno.EOVERFLOW: "Value too large for defined data type",
    Errno.EILSEQ: "Illegal byte sequence",
    Errno.EDESTADDRREQ: "Destination address required",
    Errno.EMSGSIZE: "Message too long",
    Errno.ENOTSUP: "Not supported",
    Errno.EADDRINUSE: "Address already in use",
    Errno.EADDRNOTAVAIL: "Cannot assign requested address",
    Errno.ECONNRESET: "Connection reset by peer",
    Errno.ENOBUFS: "No buffer space available",
    Errno.EHOSTDOWN: "Host is down",
    Errno.EHOSTUNREACH: "No route to host",
}


class SdkError(Exception):
    """An error carrying one of the SDK's error numbers."""

    def __init__(self, errno: Errno | int, message: str) -> None:
        self.errno = Errno(errno)
        self.message = message
        super().__init__(f"[{self.errno.name}] {message}")


def error_for(code: int, message: str | None = None) -> SdkError:
    """Build an SdkError from an error number, accepting negated codes too.

    Raises ValueError if the code is not a known error number.
    """
    errno = Errno(abs(int(code)))
    return SdkError(errno, message if message is not None else errno.description)