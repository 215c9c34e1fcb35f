"""Command validation for dashboard-originated commands.

Maps an inbound ``{action, value}`` payload onto one of the recognized command
models and from there onto a state mutation. Validation misses are not errors:
the caller still relays the command to the device, only the shared state is
left untouched.
"""
from dataclasses import dataclass
from typing import Any, Optional, Union

from config.logger import logger
from models.schemas import KNOWN_ACTIONS, Command, UnknownCommand
from pydantic import TypeAdapter, ValidationError

_command_adapter: TypeAdapter = TypeAdapter(Command)


@dataclass(frozen=True)
class CommandResult:
    """Outcome of validating one command"""
    accepted: bool
    command: Optional[Any] = None
    mutation: Optional[tuple[str, Any]] = None

    @property
    def mutates(self) -> bool:
        return self.mutation is not None


REJECTED = CommandResult(accepted=False)


def parse_command(payload: Any) -> Union[Command, UnknownCommand, None]:
    """Parse a raw payload into a command model.

    Returns ``UnknownCommand`` for a missing or unrecognized action and ``None``
    when a recognized action carries an invalid value.
    """
    action = payload.get("action") if isinstance(payload, dict) else None
    if not isinstance(action, str) or action not in KNOWN_ACTIONS:
        return UnknownCommand(action=action, value=payload.get("value") if isinstance(payload, dict) else None)
    try:
        return _command_adapter.validate_python(payload)
    except ValidationError as e:
        logger.info(f"Rejected '{action}' command with value {payload.get('value')!r}: {e.error_count()} error(s)")
        return None


def validate_command(payload: Any) -> CommandResult:
    """Validate a command and resolve the state mutation it requests"""
    command = parse_command(payload)
    if command is None:
        return REJECTED
    if isinstance(command, UnknownCommand):
        logger.warning(f"Unknown action: {command.action!r}")
        return REJECTED
    return CommandResult(accepted=True, command=command, mutation=command.mutation())
