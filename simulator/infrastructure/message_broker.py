from typing import Iterable, Optional

import simpy


class MessageBroker:
    """
    Topic-based publish-subscribe channel between the controller and its
    observers (statistics, status printers, command sources).

    A topic buffers messages only after someone subscribes to it, so the
    per-tick status stream does not pile up when nobody reads it. Every
    published message is also copied onto one broadcast pipe so a recorder
    can see all traffic without subscribing topic by topic.
    """

    # Published once per tick; logging them would drown everything else
    DEFAULT_QUIET_TOPICS = ("building/status",)

    def __init__(self, env: simpy.Environment, quiet_topics: Optional[Iterable[str]] = None):
        """
        Args:
            env (simpy.Environment): SimPy environment
            quiet_topics: Topics published without a log line
        """
        self.env = env
        self.subscriptions = {}  # topic -> Store, created on first subscribe
        self.broadcast_pipe = simpy.Store(self.env)
        self.quiet_topics = set(self.DEFAULT_QUIET_TOPICS if quiet_topics is None else quiet_topics)

    def subscribe(self, topic: str) -> simpy.Store:
        """Store receiving every message published on `topic` from now on"""
        if topic not in self.subscriptions:
            self.subscriptions[topic] = simpy.Store(self.env)
        return self.subscriptions[topic]

    def is_subscribed(self, topic: str) -> bool:
        return topic in self.subscriptions

    def put(self, topic: str, message):
        """Publish a message on a topic and on the broadcast pipe"""
        if topic not in self.quiet_topics:
            print(f"{self.env.now:.2f} [Broker] Publish on '{topic}': {message}")
        self.broadcast_pipe.put({'topic': topic, 'time': self.env.now, 'message': message})

        pipe = self.subscriptions.get(topic)
        if pipe is not None:
            pipe.put(message)

    def get(self, topic: str):
        """Event that fires with the next message on a topic (subscribing first if needed)"""
        return self.subscribe(topic).get()

    def get_broadcast_pipe(self) -> simpy.Store:
        """Pipe receiving a copy of every published message"""
        return self.broadcast_pipe

    def get_current_time(self) -> float:
        """
        Current simulation time

        Lets the controller log and timestamp without holding the environment.
        """
        return self.env.now
