"""
WhatsApp Cloud API notifier.
Sends each scheduled employee a plain text summary of their week.
"""

import logging
import re
from typing import Optional

import httpx

from rosterly.core.config import Settings, settings as default_settings
from rosterly.services.scheduling.timeutils import format_time
from rosterly.services.scheduling.types import Schedule, Shift, Weekday


logger = logging.getLogger(__name__)


def format_phone(phone: str, country_code: str = "55") -> str:
    """
    Normalise a phone number for the API.
    "(11) 99999-9999" -> "5511999999999"
    """
    digits = re.sub(r"\D", "", phone)
    if digits.startswith("0"):
        digits = digits[1:]
    if not digits.startswith(country_code):
        digits = country_code + digits
    return digits


def format_shift_message(establishment_name: str, schedule: Schedule, shifts: list[Shift]) -> str:
    lines = [
        f"*{establishment_name}*",
        f"Your schedule for {schedule.week_start_date.isoformat()} to {schedule.week_end_date.isoformat()}:",
        "",
    ]
    for shift in sorted(shifts, key=lambda s: s.start_datetime):
        lines.append(
            f"{Weekday(shift.day_of_week).short_name} {shift.date.strftime('%d/%m')}: "
            f"{format_time(shift.start_time)} - {format_time(shift.end_time)}"
        )
    return "\n".join(lines)


class WhatsAppNotifier:
    """
    Publish notifier backed by the WhatsApp Cloud API.

    Delivery is best effort: missing configuration, employees without a phone
    and HTTP failures are logged and skipped.
    """

    def __init__(
        self,
        phones: dict[int, str],
        establishment_name: str = "Rosterly",
        settings: Optional[Settings] = None,
        client: Optional[httpx.Client] = None,
    ):
        self.phones = phones
        self.establishment_name = establishment_name
        self.settings = settings or default_settings
        self.client = client

    @property
    def configured(self) -> bool:
        return bool(self.settings.WHATSAPP_PHONE_NUMBER_ID and self.settings.WHATSAPP_ACCESS_TOKEN)

    def notify_published(self, schedule: Schedule, per_employee_shifts: dict[int, list[Shift]]) -> None:
        if not self.configured:
            logger.warning(f"WhatsApp not configured, skipping notifications for schedule {schedule.id}")
            return

        sent = 0
        for employee_id, shifts in per_employee_shifts.items():
            phone = self.phones.get(employee_id)
            if not phone:
                logger.debug(f"Employee {employee_id} has no phone, not notified")
                continue
            text = format_shift_message(self.establishment_name, schedule, shifts)
            if self.send_text(phone, text):
                sent += 1

        logger.info(f"Schedule {schedule.id}: sent {sent} of {len(per_employee_shifts)} notifications")

    def send_text(self, phone: str, text: str) -> bool:
        url = f"{self.settings.WHATSAPP_API_URL}/{self.settings.WHATSAPP_PHONE_NUMBER_ID}/messages"
        payload = {
            "messaging_product": "whatsapp",
            "to": format_phone(phone, self.settings.WHATSAPP_DEFAULT_COUNTRY_CODE),
            "type": "text",
            "text": {"body": text},
        }
        headers = {"Authorization": f"Bearer {self.settings.WHATSAPP_ACCESS_TOKEN}"}

        try:
            if self.client is not None:
                response = self.client.post(url, json=payload, headers=headers)
            else:
                response = httpx.post(
                    url, json=payload, headers=headers, timeout=self.settings.WHATSAPP_TIMEOUT_SECONDS
                )
            response.raise_for_status()
            return True
        except httpx.HTTPStatusError as e:
            logger.error(f"WhatsApp API HTTP error: {e.response.status_code} - {e.response.text}")
        except httpx.HTTPError as e:
            logger.error(f"WhatsApp API error: {e}")
        return False
