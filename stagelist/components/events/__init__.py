"""
Events package.
"""

from .event_broker_comp import ChangeCallback, SetListBroker, setlist_topic

__all__ = [
    "ChangeCallback",
    "SetListBroker",
    "setlist_topic",
]
