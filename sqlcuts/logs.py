import json, logging, time, uuid, datetime as dt
from typing import Optional

logger = logging.getLogger("sqlcuts.operations")


def configure_logging(level: str = "INFO"):
    root = logging.getLogger("sqlcuts")
    root.setLevel(level)
    if not root.handlers:
        h = logging.StreamHandler()
        h.setFormatter(logging.Formatter("%(asctime)s %(levelname)s %(name)s: %(message)s"))
        root.addHandler(h)


class LogContext:
    """One record per handled invocation: action, payload, result, latency."""

    def __init__(self, action: str, user: str = "shortcut"):
        self.action = action
        self.user = user
        self.request_id = str(uuid.uuid4())
        self.start = time.perf_counter()
        self.payload = None
        self.entity_type = None
        self.entity_id = None

    def set_entity(self, etype: str, eid: str):
        self.entity_type = etype
        self.entity_id = eid

    def set_payload(self, obj): self.payload = obj

    def record(self, result: str = "OK", err: Optional[str] = None) -> dict:
        elapsed_ms = int((time.perf_counter() - self.start) * 1000)
        return {
            "ts": dt.datetime.now(dt.timezone.utc).isoformat(),
            "user": self.user,
            "action": self.action,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "request_id": self.request_id,
            "payload_json": json.dumps(self.payload, ensure_ascii=False, default=str) if self.payload is not None else None,
            "result": result,
            "err_msg": err,
            "latency_ms": elapsed_ms,
        }

    def write(self, result: str = "OK", err: Optional[str] = None) -> dict:
        rec = self.record(result, err)
        level = logging.INFO if result in ("OK", "NEEDS_VALUE") else logging.WARNING
        logger.log(level, "%s %s result=%s latency_ms=%d%s",
                   rec["action"], rec["request_id"], result, rec["latency_ms"],
                   f" err={err}" if err else "", extra={"operation": rec})
        return rec
