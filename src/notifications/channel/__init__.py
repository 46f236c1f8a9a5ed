"""Channel adapter registry — pluggable delivery channels.

Provides singleton access to channel adapters. Uses fake adapters by
default; real adapters (transactional email, chat bot) are selected via
the EMAIL_ADAPTER and CHAT_ADAPTER environment variables.
"""

import os
from enum import Enum


class ChannelType(Enum):
    EMAIL = "email"
    CHAT = "chat"


_channel_instances: dict[str, object] = {}


def _build_channel(channel_type: str):
    if channel_type == ChannelType.EMAIL.value:
        adapter = os.environ.get("EMAIL_ADAPTER", "fake")
        if adapter == "fake":
            from notifications.channel.fake_email import FakeEmailAdapter

            return FakeEmailAdapter()
        raise ValueError(f"Unknown email adapter: {adapter}")
    if channel_type == ChannelType.CHAT.value:
        adapter = os.environ.get("CHAT_ADAPTER", "fake")
        if adapter == "fake":
            from notifications.channel.fake_chat import FakeChatAdapter

            return FakeChatAdapter()
        raise ValueError(f"Unknown chat adapter: {adapter}")
    raise ValueError(f"Unknown channel type: {channel_type}")


def get_channel(channel_type: str):
    """Return the configured channel adapter (singleton per channel type).

    Args:
        channel_type: One of ChannelType values ("email", "chat")
    """
    if channel_type not in _channel_instances:
        _channel_instances[channel_type] = _build_channel(channel_type)
    return _channel_instances[channel_type]


def set_channel(channel_type: str, adapter) -> None:
    """Install a specific adapter for a channel type."""
    _channel_instances[channel_type] = adapter


def reset_channels():
    """Reset all channel singletons (useful for testing)."""
    _channel_instances.clear()
