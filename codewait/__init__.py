"""CodeWait English - micro-lessons for developers waiting on builds and deploys."""

__version__ = "0.1.0"
