from skyreserve.tasks.celery_app import celery
from skyreserve.tasks import worker_jobs

@celery.task(name="skyreserve.tasks.jobs.check_cancellations")
def check_cancellations():
    return worker_jobs.check_cancellations()
