import ssl

from celery import Celery
from celery.signals import worker_ready
from skyreserve.core.config import settings

_CERT_REQS = {
    "required": ssl.CERT_REQUIRED,
    "optional": ssl.CERT_OPTIONAL,
    "none": ssl.CERT_NONE,
}


def redis_ssl_options(url: str, cert_reqs: str = "required") -> dict | None:
    """TLS options for a rediss:// broker/backend; None for plain redis://."""
    if not url or not url.strip().lower().startswith("rediss://"):
        return None
    try:
        return {"ssl_cert_reqs": _CERT_REQS[cert_reqs.strip().lower()]}
    except KeyError:
        raise ValueError(f"REDIS_SSL_CERT_REQS must be one of {', '.join(_CERT_REQS)}") from None


celery = Celery(
    "skyreserve",
    broker=settings.REDIS_URL,
    backend=settings.REDIS_URL,
    include=["skyreserve.tasks.jobs"],
)

celery.conf.timezone = "UTC"

_ssl = redis_ssl_options(settings.REDIS_URL, settings.REDIS_SSL_CERT_REQS)
if _ssl:
    celery.conf.broker_use_ssl = _ssl
    celery.conf.redis_backend_use_ssl = _ssl

# Run the check once when the worker starts, then hourly via beat
@worker_ready.connect
def on_worker_ready(sender, **kwargs):
    from skyreserve.tasks.jobs import check_cancellations
    check_cancellations.delay()

celery.conf.beat_schedule = {
    "check-cancellations-every-hour": {
        "task": "skyreserve.tasks.jobs.check_cancellations",
        "schedule": settings.CANCELLATION_CHECK_INTERVAL_SECONDS,
    },
}
