import logging
from typing import Any, Dict, List, Optional, Sequence

from ..core.config import settings

logger = logging.getLogger(__name__)


class ConsoleEmailService:
    """Email sender that writes messages to the log instead of delivering them."""

    def __init__(self, from_email: Optional[str] = None) -> None:
        self.from_email = from_email or settings.email_from
        self.sent_messages: List[Dict[str, Any]] = []

    def send_email(
        self,
        to_email: str,
        subject: str,
        body_html: str,
        *,
        tags: Optional[Sequence[str]] = None,
    ) -> bool:
        self.sent_messages.append(
            {
                "from": self.from_email,
                "to": to_email,
                "subject": subject,
                "body": body_html,
                "tags": list(tags or []),
            }
        )
        logger.info("[EMAIL] from=%s to=%s subject=%s", self.from_email, to_email, subject)
        return True
