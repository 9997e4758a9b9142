from .messages import MessagePicker

__all__ = ["MessagePicker"]
