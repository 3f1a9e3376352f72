"""Command implementations for migrator CLI."""

from .seed import add_seed_arguments, handle_seed
from .setup import handle_create, handle_init
from .units import (
    add_confirm_argument,
    add_connection_arguments,
    confirm,
    handle_apply,
    handle_fresh,
    handle_reset,
    handle_rollback,
    handle_status,
)

__all__ = [
    "add_connection_arguments",
    "add_confirm_argument",
    "add_seed_arguments",
    "confirm",
    "handle_apply",
    "handle_create",
    "handle_fresh",
    "handle_init",
    "handle_reset",
    "handle_rollback",
    "handle_seed",
    "handle_status",
]
