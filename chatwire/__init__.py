"""Request and response models, with their JSON wire form, for chat, streamed chat, assistant, audio and batch APIs."""

__version__ = "0.1.0"

__all__ = ["assistant", "audio", "batch", "chat", "chat_stream"]