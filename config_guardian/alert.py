import datetime
import logging
import socket

from config_guardian.json_utils import dumps

logger = logging.getLogger("alert")


def send(level, msg, extra=None):
    """
    Raise an alert. Delivery is not wired to any transport yet: the payload
    is printed and logged so an external shipper can pick it up.
    """
    payload = {
        "ts": datetime.datetime.now(datetime.timezone.utc),
        "host": socket.gethostname(),
        "level": level,
        "msg": msg,
        "extra": extra or {}
    }
    line = dumps(payload)
    print("ALERT>", line)
    logger.warning("Alert raised: %s", line)
    return payload


def drift_alert(report, sender=send):
    """Alert on a drift report; reports without drift raise nothing."""
    if not report.has_drift:
        return None
    return sender(
        "warn",
        f"configuration drift detected in {report.directory}",
        {
            "directory": report.directory,
            "checked_at": report.checked_at,
            "drift": [
                {"classification": r.classification, "path": r.path}
                for r in report.records
            ],
        },
    )
