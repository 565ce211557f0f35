"""Validation of identifiers crossing the service boundary."""
from shopdb.exceptions import InvalidArgumentError

# Article codes are unsigned on the wire, but the store keeps signed 64-bit keys
EAN_MAX = 2 ** 63 - 1
USER_ID_MIN = -(2 ** 31)
USER_ID_MAX = 2 ** 31 - 1
TIMESTAMP_MIN = -(2 ** 63)
TIMESTAMP_MAX = 2 ** 63 - 1


def _as_int(value, what):
    # bool is an int subclass; True is not an identifier
    if isinstance(value, bool):
        raise InvalidArgumentError(f"{what} must be an integer, got {value!r}")
    if isinstance(value, int):
        return value
    if isinstance(value, str) and value.strip().lstrip('-').isdigit():
        return int(value.strip())
    raise InvalidArgumentError(f"{what} must be an integer, got {value!r}")


def validate_ean(value) -> int:
    """Return the article code as int or raise InvalidArgumentError."""
    ean = _as_int(value, 'EAN')
    if ean < 0 or ean > EAN_MAX:
        raise InvalidArgumentError(f"EAN out of range: {ean}")
    return ean


def validate_user_id(value) -> int:
    """Return the user id as int or raise InvalidArgumentError."""
    user = _as_int(value, 'user id')
    if user < USER_ID_MIN or user > USER_ID_MAX:
        raise InvalidArgumentError(f"user id out of range: {user}")
    return user


def validate_timestamp(value) -> int:
    """Return the unix timestamp as int or raise InvalidArgumentError."""
    timestamp = _as_int(value, 'timestamp')
    if timestamp < TIMESTAMP_MIN or timestamp > TIMESTAMP_MAX:
        raise InvalidArgumentError(f"timestamp out of range: {timestamp}")
    return timestamp


def validate_integer(value, what='value') -> int:
    """Return a plain integer parameter (amounts, prices, ids) as int."""
    return _as_int(value, what)



def validate_bool(value, what='value') -> bool:
    """Return a flag parameter; only real booleans are accepted."""
    if not isinstance(value, bool):
        raise InvalidArgumentError(f"{what} must be a boolean, got {value!r}")
    return value
