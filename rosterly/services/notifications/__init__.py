"""
Outbound notifications.
"""

from .base import PublishNotifier
from .whatsapp import WhatsAppNotifier, format_phone, format_shift_message

__all__ = [
    "PublishNotifier",
    "WhatsAppNotifier",
    "format_phone",
    "format_shift_message",
]
