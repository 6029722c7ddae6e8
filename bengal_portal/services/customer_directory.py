# bengal_portal/services/customer_directory.py

from bengal_portal.models import CustomerProfile, JobStatus, PaymentStatus, QuoteStatus


def project(jobs):
    """
    One CustomerProfile per distinct customer id, in first-seen order.

    When several jobs share a customer id the contact details of the first
    one win; later jobs never overwrite them.
    """
    profiles = {}
    for job in jobs:
        if not job.customer_id or job.customer_id in profiles:
            continue
        profiles[job.customer_id] = CustomerProfile.from_job(job)
    return list(profiles.values())


def customer_summary(customer_id, jobs, quotes):
    """Figures for a customer's dashboard."""
    my_jobs = [j for j in jobs if j.customer_id == customer_id]
    my_quotes = [q for q in quotes if q.customer_id == customer_id]
    awaiting_payment = [q for q in my_quotes if q.status == QuoteStatus.QUOTED]

    outstanding = sum(j.amount for j in my_jobs if j.payment_status != PaymentStatus.PAID)
    outstanding += sum(q.price or 0 for q in awaiting_payment)

    return {
        'customerId': customer_id,
        'openJobs': len([j for j in my_jobs if j.status != JobStatus.COMPLETED]),
        'outstandingBalance': outstanding,
        'jobs': [j.to_dict() for j in my_jobs],
        'quotes': [q.to_dict() for q in my_quotes],
        'awaitingPayment': [q.to_dict() for q in awaiting_payment],
    }
