"""
gpioctl Sysfs Channel
Scoped read/write helpers for text pseudo-files under /sys.
"""

import errno
import os
import logging

from .errors import SysfsIOError

logger = logging.getLogger(__name__)

# fsync results that only mean "this file has nothing to flush"
_FSYNC_UNSUPPORTED = {errno.EINVAL, errno.EROFS, errno.ENOTSUP}


def write_text(path: str, text: str, create: bool = True) -> None:
    """
    Write text to a pseudo-file.

    Args:
        path: File to write
        text: Content, written in full
        create: Create the file if missing (regular-file mocks need this,
            control files such as ``export`` must not be created)

    Raises:
        SysfsIOError: open, write or sync failed
    """
    flags = os.O_WRONLY | os.O_TRUNC
    if create:
        flags |= os.O_CREAT

    try:
        fd = os.open(path, flags, 0o644)
    except OSError as e:
        raise SysfsIOError("open", path, e) from e

    data = text.encode("ascii")
    with os.fdopen(fd, "wb", buffering=0) as handle:
        view = memoryview(data)
        offset = 0
        while offset < len(data):
            try:
                written = handle.write(view[offset:])
            except OSError as e:
                raise SysfsIOError("write", path, e) from e
            if not written:
                raise SysfsIOError("write", path, OSError(errno.EIO, "short write"))
            offset += written

        try:
            os.fsync(handle.fileno())
        except OSError as e:
            if e.errno not in _FSYNC_UNSUPPORTED:
                raise SysfsIOError("sync", path, e) from e

    logger.debug(f"wrote {text!r} to {path}")


def read_text(path: str, capacity: int = 16) -> str:
    """
    Read at most ``capacity - 1`` bytes from the start of a pseudo-file.

    Sysfs attributes keep a file offset, so the handle is rewound before
    reading.

    Raises:
        SysfsIOError: open or read failed
    """
    try:
        handle = open(path, "rb", buffering=0)
    except OSError as e:
        raise SysfsIOError("open", path, e) from e

    with handle:
        try:
            handle.seek(0)
            data = handle.read(max(capacity - 1, 0))
        except OSError as e:
            raise SysfsIOError("read", path, e) from e

    return (data or b"").decode("ascii", errors="replace")
