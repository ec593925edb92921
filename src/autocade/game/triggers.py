"""
Named trigger notifications for the lighting and audio collaborators.
The core only names the moment; the effect is performed elsewhere.
"""
from enum import Enum


class Trigger(Enum):
    # X01
    CHECKOUT = "checkout"
    BUST = "bust"
    ONE_EIGHTY = "one_eighty"
    # Around the Clock
    TARGET_HIT = "target_hit"
    # Dart Roulette
    HIT = "hit"
    JAILBREAK = "jailbreak"
    BACKFIRE = "backfire"
    # Killer
    ELIMINATION = "elimination"
    # Any variant
    WIN = "win"
