"""Text rendering helpers shared by the query builder and the file store."""

from typing import Union


def format_number(value: Union[int, float]) -> str:
    """Render a number without a trailing ``.0`` for integral values.

    ``12.0`` becomes ``"12"`` and ``60.5`` stays ``"60.5"``; non-integral
    floats keep their shortest round-tripping representation.
    """
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return repr(value) if isinstance(value, float) else str(value)
