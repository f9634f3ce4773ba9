"""Golden Book game-rules core: combat, capture and the curse cycle."""
__version__ = "0.1.0"
