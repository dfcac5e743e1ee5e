"""SimPy plumbing shared by the controller and observers: message broker and wall-clock pacing"""

from .message_broker import MessageBroker
from .realtime_env import RealtimeEnvironment

__all__ = ['MessageBroker', 'RealtimeEnvironment']
