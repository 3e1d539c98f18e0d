from .polling_processor_base import PollingProcessor
from .queue_processor_base import QueueProcessor
from .ding_poller import DingPoller
from .ding_dispatcher import DingDispatcher, describe_ding

__all__ = [
    "PollingProcessor",
    "QueueProcessor",
    "DingPoller",
    "DingDispatcher",
    "describe_ding",
]
