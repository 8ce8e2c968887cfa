"""WhatsApp to workflow-webhook relay bridge."""

__version__ = "0.1.0"
