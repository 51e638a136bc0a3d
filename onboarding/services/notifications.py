"""
Notification Dispatcher

Sends the templated welcome email through SendGrid and tells the
Minecraft whitelist server about new players. The two calls share nothing.
"""
import logging
from concurrent.futures import Executor, Future
from typing import Dict, Optional

import requests

from onboarding.core.config import Settings
from onboarding.core.exceptions import UpstreamError

logger = logging.getLogger(__name__)

NOT_GIVEN = "<none given>"
NOT_AVAILABLE = "N/A"


def unsw_email(record: Dict, domain: str = "ad.unsw.edu.au") -> Optional[str]:
    unsw_id = record.get("unsw_id")
    return f"{unsw_id}@{domain}" if unsw_id else None


def contact_email(record: Dict, domain: str = "ad.unsw.edu.au") -> Optional[str]:
    """The address we deliver to: UNSW email first, then the given email."""
    return unsw_email(record, domain) or record.get("email")


class NotificationDispatcher:
    """Outbound side effects of a registration"""

    def __init__(
        self,
        settings: Settings,
        http: Optional[requests.Session] = None,
        executor: Optional[Executor] = None,
    ):
        self.settings = settings
        # Without an injected session every call opens its own, so worker
        # threads never share one
        self.http = http
        self.executor = executor

    def _post(self, url: str, **kwargs) -> requests.Response:
        if self.http is not None:
            return self.http.post(url, **kwargs)
        with requests.Session() as session:
            return session.post(url, **kwargs)

    def build_welcome_email(self, member_id: str, record: Dict) -> Dict:
        """SendGrid v3 mail/send body for the welcome template"""
        domain = self.settings.UNSW_EMAIL_DOMAIN

        return {
            "from": {
                "email": self.settings.SENDGRID_FROM_EMAIL,
                "name": self.settings.SENDGRID_FROM_NAME,
            },
            "personalizations": [
                {
                    "to": [{"email": contact_email(record, domain)}],
                    "dynamic_template_data": {
                        "name": f"{record.get('first_name', '')} {record.get('last_name', '')}".strip(),
                        "email": record.get("email") or NOT_AVAILABLE,
                        "unsw_email": unsw_email(record, domain) or NOT_AVAILABLE,
                        "minecraft_username": record.get("minecraft_username") or NOT_GIVEN,
                        "discord_username": record.get("discord_username") or NOT_GIVEN,
                        "user_id": member_id,
                        "verification_code": record.get("verification_code"),
                    },
                }
            ],
            "template_id": self.settings.SENDGRID_TEMPLATE_ID,
        }

    def send_welcome_email(self, member_id: str, record: Dict) -> requests.Response:
        """
        Send the welcome/verification email and wait for SendGrid to accept it.
        Raises UpstreamError if the request fails or is rejected.
        """
        payload = self.build_welcome_email(member_id, record)
        to_email = payload["personalizations"][0]["to"][0]["email"]

        try:
            response = self._post(
                f"{self.settings.SENDGRID_BASE_URL.rstrip('/')}/v3/mail/send",
                json=payload,
                headers={"Authorization": f"Bearer {self.settings.SENDGRID_API_KEY}"},
                timeout=self.settings.HTTP_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"❌ Email to {to_email} for member {member_id} failed: {e}")
            raise UpstreamError(f"Email provider request failed: {e}") from e

        logger.info(f"📧 Email sent to {to_email} for member {member_id} (status {response.status_code})")
        return response

    def notify_whitelist(self, minecraft_username: str) -> bool:
        """Best effort: never raises, returns whether the server accepted it"""
        url = self.settings.WHITELIST_URL
        if not url:
            logger.info(f"No whitelist server configured, skipping {minecraft_username}")
            return False

        try:
            response = self._post(
                url,
                data={"username": minecraft_username},
                timeout=self.settings.HTTP_TIMEOUT_SECONDS,
            )
            response.raise_for_status()
        except requests.RequestException as e:
            logger.error(f"Whitelist request for {minecraft_username} failed: {e}")
            return False

        logger.info(f"Whitelisted {minecraft_username} (status {response.status_code})")
        return True

    def notify_whitelist_in_background(self, minecraft_username: str) -> Future:
        """Fire and forget. The returned future is for logging/tests only."""
        if self.executor is not None:
            return self.executor.submit(self.notify_whitelist, minecraft_username)

        future = Future()
        future.set_result(self.notify_whitelist(minecraft_username))
        return future
