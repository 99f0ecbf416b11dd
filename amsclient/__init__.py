"""Transport abstraction, core calls and container, image and node calls for the AMS REST API."""

__version__ = "0.1.0"