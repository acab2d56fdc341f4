"""
Contact Dispatcher - fans out escalation alerts to on-duty responders.

DESIGN PRINCIPLES:
- Best-effort, per invocation; nothing is queued or retried
- Each channel attempt is timeout-bounded on its own
- A responder counts as contacted if ANY of their channels succeeded
- Unconfigured channels are skipped with a warning, never fatal
- No on-duty responders is a reportable no-op, not a failure
- A manual dispatch on a never-escalated incident also stamps escalated_at
"""

import asyncio
import logging
from typing import List, Optional, Tuple

from pydantic import ValidationError

from pawtriage.core.exceptions import IncidentNotFoundError
from pawtriage.core.settings import settings
from pawtriage.models.incident import EscalationStatus, Responder
from pawtriage.models.triage import DispatchResult
from pawtriage.services.notifications import (
    NotificationChannelRegistry,
    NotificationPayload,
    get_channel_registry,
)
from pawtriage.services.record_store import INCIDENTS, RESPONDERS, RecordStore, get_record_store
from pawtriage.utils.time_helpers import hours_since, last_action_time, utc_now

logger = logging.getLogger(__name__)


class ContactDispatcher:
    def __init__(
        self,
        store: Optional[RecordStore] = None,
        registry: Optional[NotificationChannelRegistry] = None,
        max_responders: Optional[int] = None,
        channel_timeout: Optional[float] = None,
    ):
        self.store = store or get_record_store()
        self.registry = registry or get_channel_registry()
        self.max_responders = max_responders or settings.MAX_RESPONDERS_PER_DISPATCH
        self.channel_timeout = channel_timeout or settings.CHANNEL_TIMEOUT_SECONDS

    async def _load_responders(self) -> List[Responder]:
        records = await self.store.query(
            RESPONDERS,
            [("availability", "==", "on_duty")],
            limit=self.max_responders,
        )
        responders = []
        for record in records:
            try:
                responders.append(Responder(**record))
            except ValidationError as e:
                logger.warning(f"Skipping malformed responder record {record.get('id')}: {e}")
        return responders

    async def _attempt_channel(
        self,
        channel_name: str,
        recipient: Optional[str],
        payload: NotificationPayload,
        responder_id: str,
    ) -> bool:
        channel = self.registry.get(channel_name)
        if channel is None or not channel.is_configured():
            logger.warning(f"⚠️ Channel '{channel_name}' unavailable, skipping for responder {responder_id}")
            return False
        if not recipient:
            logger.warning(f"⚠️ Responder {responder_id} has no {channel_name} address, skipping")
            return False

        loop = asyncio.get_event_loop()
        try:
            return await asyncio.wait_for(
                loop.run_in_executor(None, channel.send, recipient, payload),
                timeout=self.channel_timeout,
            )
        except asyncio.TimeoutError:
            logger.warning(
                f"⏱️ {channel_name} to responder {responder_id} timed out after {self.channel_timeout}s"
            )
            return False
        except Exception as e:
            logger.error(f"❌ {channel_name} to responder {responder_id} failed: {e}", exc_info=True)
            return False

    async def _contact_responder(
        self, responder: Responder, payload: NotificationPayload
    ) -> Tuple[Responder, bool]:
        contact = responder.contact_info
        recipients = {"sms": contact.phone, "email": contact.email}

        attempts = [
            self._attempt_channel(name, recipients.get(name), payload, responder.id)
            for name in self.registry.channels_for(contact.preferred_method)
        ]
        outcomes = await asyncio.gather(*attempts)
        return responder, any(outcomes)

    async def dispatch(self, incident_id: str) -> DispatchResult:
        """
        Notify on-duty responders about one incident.

        Raises:
            IncidentNotFoundError: incident does not exist
            RecordStoreError: store read or the final write failed
        """
        logger.info(f"📞 Contacting government agents for incident {incident_id}...")

        incident = await self.store.get(INCIDENTS, incident_id)
        if incident is None:
            raise IncidentNotFoundError(incident_id)

        responders = await self._load_responders()
        if not responders:
            logger.warning(f"⚠️ No on-duty government agents found for incident {incident_id}")
            return DispatchResult(incident_id=incident_id, no_responders=True)

        started = last_action_time(incident)
        payload = NotificationPayload(
            incident_id=incident_id,
            severity=incident.get("severity", ""),
            location=(incident.get("location") or {}).get("address", ""),
            hours_since_last_action=hours_since(started) if started else 0,
            priority=incident.get("priority"),
        )

        outcomes = await asyncio.gather(
            *(self._contact_responder(responder, payload) for responder in responders)
        )

        contacted_ids = [responder.id for responder, ok in outcomes if ok]
        result = DispatchResult(
            incident_id=incident_id,
            contacted=len(contacted_ids),
            failed=len(outcomes) - len(contacted_ids),
            contacted_agent_ids=contacted_ids,
        )

        now = utc_now()
        fields = {
            "escalation_status": EscalationStatus.AUTO_CONTACTED.value,
            "auto_contacted_agents": contacted_ids,
            "updated_at": now,
        }
        if not incident.get("escalated_at"):
            fields["escalated_at"] = now

        # auto_contacted is the final escalation state, so this write never regresses it
        await self.store.update(INCIDENTS, incident_id, fields)

        logger.info(f"✅ Contacted {result.contacted} agents, {result.failed} failed")
        return result


_dispatcher: Optional[ContactDispatcher] = None


def get_contact_dispatcher() -> ContactDispatcher:
    """
    Get or create ContactDispatcher singleton instance.
    """
    global _dispatcher
    if _dispatcher is None:
        _dispatcher = ContactDispatcher()
    return _dispatcher
