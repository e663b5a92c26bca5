"""Identifier generation."""
import uuid


def new_id() -> str:
    return str(uuid.uuid4())


def new_tracking_number() -> str:
    return uuid.uuid4().hex
