_UNITS = ["Bytes", "KB", "MB", "GB", "TB"]


def format_bytes(size: int, decimals: int = 2) -> str:
    if not size:
        return "0 Bytes"

    value = float(size)
    index = 0
    while value >= 1024 and index < len(_UNITS) - 1:
        value /= 1024
        index += 1

    value = round(value, max(decimals, 0))
    if value == int(value):
        value = int(value)
    return f"{value} {_UNITS[index]}"
