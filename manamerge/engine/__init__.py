"""Engine layer: game loop, scheduler, intent queue, feedback sink."""

from manamerge.engine.action_queue import ActionQueue
from manamerge.engine.feedback import FeedbackSink, NullFeedback, RecordingFeedback
from manamerge.engine.game_loop import GameLoop
from manamerge.engine.scheduler import TickScheduler

__all__ = [
    "ActionQueue",
    "FeedbackSink",
    "GameLoop",
    "NullFeedback",
    "RecordingFeedback",
    "TickScheduler",
]
