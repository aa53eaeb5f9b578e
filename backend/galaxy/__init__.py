"""Hub-and-satellite call orchestration for galaxy core and feature apps."""

__version__ = "0.1.0"
