# bengal_portal/services/job_service.py
"""
Job lifecycle: creation, edits, status changes, notes and deletion of
service jobs, plus the read-side views the dashboards use.

Every operation loads the whole collection from the repository and every
mutation writes the whole collection back before returning.
"""

import logging
import random
from dataclasses import replace
from datetime import timedelta
from urllib.parse import urlencode

from bengal_portal.errors import ValidationError, NotFoundError
from bengal_portal.models import Job, JobNote, JobStatus, PaymentStatus, Role
from bengal_portal.services.date_utils import (
    utc_now, parse_iso_datetime, parse_job_date, format_date_for_response,
    format_datetime_for_response, days_from_now,
)
from bengal_portal.services.references import generate_reference
from bengal_portal.services.state_machine import JOB_TRANSITIONS
from bengal_portal.services.validation import clean_text, clean_amount, clean_images

logger = logging.getLogger(__name__)

ALL = 'ALL'
INVITE_PARAM = 'code'
INVITE_PATH = '/login/customer'

NOTE_AUTHORS = {
    Role.ADMIN: 'Engineer/Staff',
    Role.CUSTOMER: 'Customer',
}

# Fields a client may send back unchanged with an edit; never written through it.
READ_ONLY_FIELDS = ('id', 'notes')

OPTIONAL_CONTACT_FIELDS = ('customer_email', 'customer_phone', 'customer_address')


def demo_jobs(now=None):
    """Starter jobs used when the jobs collection has never been written."""
    return [
        Job(
            id='j1',
            title='Commercial Kitchen Installation',
            description='Full installation of extraction system and stainless steel worktops.',
            customer_id='u1',
            status=JobStatus.IN_PROGRESS,
            start_date='2024-01-15',
            warranty_end_date='2026-01-15',
            payment_status=PaymentStatus.PAID,
            amount=1250.0,
        ),
        Job(
            id='j2',
            title='Extraction Hood Maintenance',
            description='Biannual grease cleaning and filter replacement.',
            customer_id='u1',
            status=JobStatus.COMPLETED,
            start_date='2024-05-10',
            warranty_end_date=days_from_now(45, now),
            payment_status=PaymentStatus.PAID,
            amount=850.0,
        ),
    ]


def _parse_enum(enum_cls, value, field_name):
    try:
        return enum_cls(value)
    except ValueError:
        allowed = [member.value for member in enum_cls]
        raise ValidationError(f"Invalid {field_name} '{value}'. Must be one of: {allowed}")


def clean_job_fields(fields):
    """
    Convert an incoming camelCase job payload into validated attribute values.

    Raises:
        ValidationError: for unknown fields, bad enum values, unparseable
            dates or a negative/non-numeric amount
    """
    unknown = [k for k in fields if k not in Job.EDITABLE_FIELDS and k not in READ_ONLY_FIELDS]
    if unknown:
        raise ValidationError(f"Unknown job field(s): {', '.join(sorted(unknown))}")

    values = {}
    for key, attr in Job.EDITABLE_FIELDS.items():
        if key not in fields:
            continue
        value = fields[key]

        if attr == 'status':
            value = _parse_enum(JobStatus, value, 'status')
        elif attr == 'payment_status':
            value = _parse_enum(PaymentStatus, value, 'paymentStatus')
        elif attr == 'amount':
            value = clean_amount(value, 'Amount')
        elif attr in ('start_date', 'warranty_end_date'):
            try:
                parse_iso_datetime(value)
            except ValueError:
                raise ValidationError(f"Invalid date for {key}: '{value}'")
            value = value.strip()
        elif attr == 'description':
            value = clean_text(value, key) or ''
        elif attr in OPTIONAL_CONTACT_FIELDS:
            value = clean_text(value, key) or None
        else:
            value = clean_text(value, key)

        values[attr] = value
    return values


def generate_invite_reference(job, base_url):
    """
    Shareable link that logs the job's customer in.

    The link carries nothing but the job id and is not signed: whoever holds
    a job id can open that customer's portal.
    """
    return f"{base_url.rstrip('/')}{INVITE_PATH}?{urlencode({INVITE_PARAM: job.id})}"


class JobLifecycleManager:

    def __init__(self, repository, rng=None):
        self.repository = repository
        self.rng = rng or random.Random()

    # --- Read views -------------------------------------------------------

    def list_jobs(self):
        return self.repository.load()

    def get_job(self, job_id):
        job = next((j for j in self.repository.load() if j.id == job_id), None)
        if job is None:
            raise NotFoundError(f"Job {job_id} not found")
        return job

    def filter_by_status(self, status):
        jobs = self.repository.load()
        if status == ALL:
            return jobs
        status = _parse_enum(JobStatus, status, 'status')
        return [j for j in jobs if j.status == status]

    def filter_expiring_within(self, days, now=None):
        """Jobs whose warranty ends after `now` and no later than `now + days`."""
        now = now or utc_now()
        horizon = now + timedelta(days=days)
        result = []
        for job in self.repository.load():
            try:
                end = parse_iso_datetime(job.warranty_end_date)
            except ValueError:
                logger.warning(f"Skipping job {job.id} with unreadable warranty date '{job.warranty_end_date}'")
                continue
            if now < end <= horizon:
                result.append(job)
        return result

    def jobs_for_customer(self, customer_id):
        return [j for j in self.repository.load() if j.customer_id == customer_id]

    def jobs_starting_on(self, day):
        """Jobs whose start date falls on `day` (a date), for the calendar view."""
        result = []
        for job in self.repository.load():
            try:
                if parse_job_date(job.start_date) == day:
                    result.append(job)
            except ValueError:
                logger.warning(f"Skipping job {job.id} with unreadable start date '{job.start_date}'")
        return result

    # --- Mutations --------------------------------------------------------

    def _index_of(self, jobs, job_id):
        for index, job in enumerate(jobs):
            if job.id == job_id:
                return index
        raise NotFoundError(f"Job {job_id} not found")

    def _new_customer_id(self, jobs):
        taken = {j.customer_id for j in jobs}
        return generate_reference('CUST', taken, lowest=1000, rng=self.rng)

    def create_job(self, fields, today=None):
        values = clean_job_fields(fields)

        if not values.get('title'):
            raise ValidationError("Please enter a job title.")
        if not values.get('customer_name'):
            raise ValidationError("Please enter a Customer Name.")

        jobs = self.repository.load()
        today = today or format_date_for_response(utc_now())

        values.setdefault('start_date', today)
        values.setdefault('warranty_end_date', today)
        if not values.get('customer_id'):
            values['customer_id'] = self._new_customer_id(jobs)

        job_id = generate_reference('J', {j.id for j in jobs}, rng=self.rng)
        job = Job(id=job_id, **values)

        self.repository.save([job] + jobs)
        logger.info(f"Created job {job.id} '{job.title}' for customer {job.customer_id}")
        return job

    def update_job(self, job_id, fields):
        if 'id' in fields and fields['id'] != job_id:
            raise ValidationError("A job's id cannot be changed")

        values = clean_job_fields(fields)
        if 'title' in values and not values['title']:
            raise ValidationError("Please enter a job title.")
        if 'customer_name' in values and not values['customer_name']:
            raise ValidationError("Please enter a Customer Name.")

        jobs = self.repository.load()
        index = self._index_of(jobs, job_id)
        current = jobs[index]

        # A blank customer id in an edit keeps the existing one.
        customer_id = values.pop('customer_id', None)
        if customer_id:
            if customer_id != current.customer_id:
                logger.info(f"Job {job_id} customer reassigned from '{current.customer_id}' to '{customer_id}'")
            values['customer_id'] = customer_id
        elif not current.customer_id:
            values['customer_id'] = self._new_customer_id(jobs)

        jobs[index] = replace(current, **values)
        self.repository.save(jobs)
        logger.info(f"Updated job {job_id}: {sorted(values)}")
        return jobs[index]

    def delete_job(self, job_id, confirmed=False):
        if not confirmed:
            raise ValidationError("Deleting a job must be confirmed")

        jobs = self.repository.load()
        index = self._index_of(jobs, job_id)
        removed = jobs.pop(index)

        self.repository.save(jobs)
        logger.info(f"Job {job_id} ('{removed.title}') deleted permanently")
        return removed

    def set_status(self, job_id, status):
        new_status = _parse_enum(JobStatus, status, 'status')

        jobs = self.repository.load()
        index = self._index_of(jobs, job_id)
        current = jobs[index]
        JOB_TRANSITIONS.check(current.status, new_status)

        if current.status == JobStatus.COMPLETED and new_status != JobStatus.COMPLETED:
            logger.warning(f"Job {job_id} reopened from COMPLETED to {new_status.value}")

        jobs[index] = replace(current, status=new_status)
        self.repository.save(jobs)
        logger.info(f"Job {job_id} status updated from '{current.status.value}' to '{new_status.value}'")
        return jobs[index]

    def set_warranty_end(self, job_id, warranty_end_date):
        return self.update_job(job_id, {'warrantyEndDate': warranty_end_date})

    def append_note(self, job_id, text, author_role, images=None, now=None):
        text = clean_text(text, 'Note text') or ''
        images = clean_images(images)
        if not text and not images:
            raise ValidationError("A note needs text or an image")

        author = NOTE_AUTHORS[_parse_enum(Role, author_role, 'author role')]
        now = now or utc_now()

        jobs = self.repository.load()
        index = self._index_of(jobs, job_id)
        current = jobs[index]

        stamp = int(now.timestamp() * 1000)
        taken = {n.id for n in current.notes}
        while f"N-{stamp}" in taken:
            stamp += 1

        note = JobNote(
            id=f"N-{stamp}",
            text=text,
            timestamp=format_datetime_for_response(now),
            author=author,
            images=images,
        )
        jobs[index] = replace(current, notes=[note] + list(current.notes))
        self.repository.save(jobs)
        logger.info(f"Note {note.id} added to job {job_id} by {author}")
        return note
