from ..errors import ScratchIOError


def read_file(path: str) -> bytes:
    try:
        with open(path, "rb") as f:
            return f.read()
    except OSError as e:
        raise ScratchIOError(f"Can't open file '{path}' for read", resource=path) from e


def write_file(path: str, data: bytes) -> None:
    # truncates: the file ends up exactly len(data) bytes long
    try:
        with open(path, "wb") as f:
            f.write(data)
    except OSError as e:
        raise ScratchIOError(f"Can't open file '{path}' for write", resource=path) from e
