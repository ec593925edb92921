"""
Feed module - snapshot reconciliation, simulation and recordings.
"""
from .events import ThrowAdded, ThrowRemoved, TurnEnded, ReconciledEvent
from .reconciler import FeedReconciler
from .simulator import FeedSimulator
from .recording import save_recording, load_recording

__all__ = [
    # Events
    "ThrowAdded",
    "ThrowRemoved",
    "TurnEnded",
    "ReconciledEvent",
    # Reconciliation
    "FeedReconciler",
    # Simulation
    "FeedSimulator",
    "save_recording",
    "load_recording",
]
