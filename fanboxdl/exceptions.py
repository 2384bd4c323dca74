from __future__ import annotations


class FanboxDLException(Exception):
    pass


class RequestFailed(FanboxDLException):
    pass


class StatusError(FanboxDLException):
    def __init__(self, url: str, status_code: int):
        super().__init__(f"fanbox returned http {status_code}: {url}")
        self.url = url
        self.status_code = status_code


class ReadFailed(FanboxDLException):
    pass


class APISchemaError(ReadFailed):
    pass


class FilesystemError(FanboxDLException):
    def __init__(self, message: str, path=None):
        super().__init__(message)
        self.path = path


class InitError(FanboxDLException):
    pass


_EXIT_CODE_MAP: dict[type[BaseException], int] = {
    InitError: 2,
    StatusError: 3,
}

_DEFAULT_EXIT_CODE = 1
_KEYBOARD_INTERRUPT_EXIT_CODE = 5


def map_exception_to_exit_code(exc: BaseException) -> int:
    if isinstance(exc, KeyboardInterrupt):
        return _KEYBOARD_INTERRUPT_EXIT_CODE
    for exc_type, code in _EXIT_CODE_MAP.items():
        if isinstance(exc, exc_type):
            return code
    return _DEFAULT_EXIT_CODE
