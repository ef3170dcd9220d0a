"""Firebase Cloud Messaging push transport."""

import asyncio
import logging
from dataclasses import dataclass

import firebase_admin
from firebase_admin import credentials, messaging
from firebase_admin.exceptions import FirebaseError

from diapets.adapters.push_transport import PushTransport
from diapets.domain.notifications import DeliveryResult
from diapets.errors import TransportFailure, mask_address

logger = logging.getLogger(__name__)

FIREBASE_APP_NAME = "diapets"


@dataclass
class FirebasePushTransport(PushTransport):
    """Push transport that sends one FCM message per device token."""

    credentials_path: str
    project_id: str | None = None
    timeout_seconds: float = 10.0
    app: firebase_admin.App | None = None

    @classmethod
    def create(
        cls,
        credentials_path: str,
        project_id: str | None = None,
        timeout_seconds: float = 10.0,
    ) -> "FirebasePushTransport":
        """Create a transport; the Firebase app is initialised on first send."""
        return cls(
            credentials_path=credentials_path,
            project_id=project_id,
            timeout_seconds=timeout_seconds,
        )

    async def send(
        self, addresses: list[str], title: str, body: str
    ) -> list[DeliveryResult]:
        """Send the notification to every address independently."""
        logger.info("Sending push notification to %d devices", len(addresses))
        results: list[DeliveryResult] = []
        for index, address in enumerate(addresses, start=1):
            logger.info(
                "Sending notification %d/%d to token: %s",
                index,
                len(addresses),
                mask_address(address),
            )
            try:
                await self._send_one(address, title, body)
            except TransportFailure as exc:
                logger.error("%s", exc)
                results.append(
                    DeliveryResult(address=address, delivered=False, error=exc.reason)
                )
                continue
            results.append(DeliveryResult(address=address, delivered=True))

        delivered = sum(1 for result in results if result.delivered)
        logger.info(
            "Push notification delivery completed. Success: %d, Errors: %d",
            delivered,
            len(results) - delivered,
        )
        return results

    async def _send_one(self, address: str, title: str, body: str) -> None:
        message = messaging.Message(
            token=address,
            notification=messaging.Notification(title=title, body=body),
        )
        try:
            message_id = await asyncio.wait_for(
                asyncio.to_thread(messaging.send, message, app=self._get_app()),
                timeout=self.timeout_seconds,
            )
        except TimeoutError as exc:
            raise TransportFailure(
                address, f"timed out after {self.timeout_seconds}s"
            ) from exc
        except (FirebaseError, ValueError) as exc:
            raise TransportFailure(address, str(exc)) from exc
        logger.debug("FCM accepted message %s", message_id)

    async def close(self) -> None:
        """Release the Firebase app if it was initialised."""
        if self.app is not None:
            firebase_admin.delete_app(self.app)
            self.app = None

    def _get_app(self) -> firebase_admin.App:
        if self.app is not None:
            return self.app
        try:
            self.app = firebase_admin.get_app(FIREBASE_APP_NAME)
        except ValueError:
            options: dict[str, object] = {"httpTimeout": self.timeout_seconds}
            if self.project_id:
                options["projectId"] = self.project_id
            self.app = firebase_admin.initialize_app(
                credentials.Certificate(self.credentials_path),
                options=options,
                name=FIREBASE_APP_NAME,
            )
        return self.app
