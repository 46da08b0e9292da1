"""
Command bus over Redis Streams.

- stream_consumer.py: consumer-group loop that dispatches commands and replies
- command_client.py: caller side (XADD the envelope, BLPOP the reply)
"""

from .envelope import CommandEnvelope, EnvelopeError, parse_envelope
from .stream_consumer import run_command_consumer, ensure_consumer_group, process_command
from .command_client import CommandClient

__all__ = [
    "CommandEnvelope",
    "EnvelopeError",
    "parse_envelope",
    "run_command_consumer",
    "ensure_consumer_group",
    "process_command",
    "CommandClient",
]
