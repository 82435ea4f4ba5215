from __future__ import annotations

import logging
import threading

import httpx

from mirrormgr.core.config import Settings
from mirrormgr.db.models import CmdVerb, MirrorStatus
from mirrormgr.jobs.errors import RelayDeliveryError
from mirrormgr.jobs.types import ClientCommand

logger = logging.getLogger(__name__)

LOCAL_STATUS_BY_VERB: dict[CmdVerb, MirrorStatus] = {
    CmdVerb.DISABLE: MirrorStatus.DISABLED,
    CmdVerb.STOP: MirrorStatus.PAUSED,
}


def local_status_for(verb: CmdVerb) -> MirrorStatus | None:
    return LOCAL_STATUS_BY_VERB.get(verb)


class CommandRelay:
    """Best-effort delivery of operator commands to mirror workers.

    One POST per command, bounded by the configured timeout, never retried.
    A worker answering with an HTTP error status counts as a failed delivery.
    """

    def __init__(self, settings: Settings, transport: httpx.BaseTransport | None = None):
        self._settings = settings
        self._transport = transport
        self._client: httpx.Client | None = None
        self._client_lock = threading.Lock()

    def worker_url(self, mirror_id: str) -> str:
        return self._settings.worker_url_template.format(mirror_id=mirror_id)

    def _get_client(self) -> httpx.Client:
        with self._client_lock:
            if self._client is None:
                self._client = httpx.Client(
                    timeout=self._settings.relay_timeout_seconds,
                    limits=httpx.Limits(max_keepalive_connections=self._settings.relay_max_idle_connections),
                    transport=self._transport,
                )
            return self._client

    def notify(self, mirror_id: str, command: ClientCommand) -> None:
        url = self.worker_url(mirror_id)
        payload = {"cmd": command.cmd.value, "force": command.force}
        logger.info("Posting command '%s' to <%s>", command.cmd.value, mirror_id)
        try:
            response = self._get_client().post(url, json=payload)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.warning("post command to mirror %s fail: %s", mirror_id, exc)
            raise RelayDeliveryError(f"post command to mirror {mirror_id} fail: {exc}") from exc

    def close(self) -> None:
        with self._client_lock:
            if self._client is not None:
                self._client.close()
                self._client = None
