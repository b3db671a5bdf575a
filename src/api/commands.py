"""
Console / network command strings
-----

    ChessMove from=e2 to=e4 [promoteTo=queen] [teleport=true] [remote=true]

Arguments are key=value pairs separated by whitespace, in any order. Keys are case-insensitive.
"""

from src.api.models import MoveRequest
from src.core.exceptions import InvalidRequestError

MOVE_COMMAND = "ChessMove"

# command argument -> MoveRequest field
ARGUMENT_FIELDS: dict[str, str] = {
    "from": "from_square",
    "to": "to_square",
    "promoteto": "promote_to",
    "teleport": "is_teleport",
    "remote": "is_remote",
}
FLAG_ARGUMENTS = frozenset({"teleport", "remote"})
TRUE_VALUES = frozenset({"true", "1", "yes"})
FALSE_VALUES = frozenset({"false", "0", "no"})


def parse_move_command(command: str) -> MoveRequest:
    parts = command.split()
    if not parts or parts[0].lower() != MOVE_COMMAND.lower():
        raise InvalidRequestError(f"Not a {MOVE_COMMAND} command: {command!r}")

    fields: dict[str, object] = {}
    for argument in parts[1:]:
        key, separator, value = argument.partition("=")
        key = key.lower()
        if not separator or key not in ARGUMENT_FIELDS:
            raise InvalidRequestError(f"Cannot interpret argument {argument!r}")
        fields[ARGUMENT_FIELDS[key]] = _parse_flag(key, value) if key in FLAG_ARGUMENTS else value

    for required in ("from", "to"):
        if ARGUMENT_FIELDS[required] not in fields:
            raise InvalidRequestError(f"{MOVE_COMMAND} needs a {required}= argument")

    return MoveRequest(**fields)


def format_move_command(request: MoveRequest) -> str:
    parts = [MOVE_COMMAND, f"from={request.from_square}", f"to={request.to_square}"]
    if request.promote_to is not None:
        parts.append(f"promoteTo={request.promote_to.value}")
    if request.is_teleport:
        parts.append("teleport=true")
    if request.is_remote:
        parts.append("remote=true")
    return " ".join(parts)


def _parse_flag(key: str, value: str) -> bool:
    if value.lower() in TRUE_VALUES:
        return True
    if value.lower() in FALSE_VALUES:
        return False
    raise InvalidRequestError(f"{key}= expects true or false, got {value!r}")
