# bengal_portal/services/identity_service.py
"""
Works out who is using the portal.

Checked in order, first match wins:

1. an invite code in the request that matches a job id
2. the persisted session
3. an explicit role choice from the login screen

An invite code is consumed on success: it is removed from the request
context so that reloading the page does not log in again.
"""

import re
import logging

from bengal_portal.errors import CorruptSessionError, NotFoundError, ValidationError
from bengal_portal.models import User, Role, DEMO_USERS
from bengal_portal.services.job_service import INVITE_PARAM
from bengal_portal.services.validation import clean_text

logger = logging.getLogger(__name__)

DEFAULT_SERVICE_EMAIL = 'client@bengalwelding.co.uk'
FALLBACK_CUSTOMER_NAME = 'Valued Customer'
EMAIL_PATTERN = r'^[a-zA-Z0-9._%+-]+@[a-zA-Z0-9.-]+\.[a-zA-Z]{2,}$'


class IdentityResolver:

    def __init__(self, session_repository, job_manager, directory=None,
                 service_email=DEFAULT_SERVICE_EMAIL):
        self.session_repository = session_repository
        self.job_manager = job_manager
        self.directory = directory or DEMO_USERS
        self.service_email = service_email

    def resolve(self, request_context=None, role=None):
        """
        Args:
            request_context (dict): mutable request parameters; an invite
                code travels under 'code' and is removed once used
            role (Role or str): role picked on the login screen, if any

        Returns:
            User or None
        """
        code = request_context.get(INVITE_PARAM) if request_context else None
        if code:
            user = self._user_from_invite(code)
            if user is not None:
                request_context.pop(INVITE_PARAM, None)
                return user
            logger.warning(f"Invite code '{code}' matches no job; ignoring it")

        user = self.current()
        if user is not None:
            return user

        if role:
            return self.login_as(role)

        return None

    def _user_from_invite(self, code):
        job = next((j for j in self.job_manager.list_jobs() if j.id == code), None)
        if job is None:
            return None

        user = User(
            id=job.customer_id or f"u-{code}",
            name=job.customer_name or FALLBACK_CUSTOMER_NAME,
            email=self.service_email,
            role=Role.CUSTOMER,
        )
        self.session_repository.save(user)
        logger.info(f"Invite code for job {job.id} resolved to customer {user.id}")
        return user

    def current(self):
        """The persisted session user, or None. A corrupt session counts as none."""
        try:
            return self.session_repository.load()
        except CorruptSessionError as e:
            logger.warning(f"{e.message}; discarding the stored session")
            self.session_repository.clear()
            return None

    def login_as(self, role):
        try:
            role = Role(role)
        except ValueError:
            raise ValidationError(f"Unknown role '{role}'")

        user = self.directory[role]
        self.session_repository.save(user)
        logger.info(f"Logged in as {user.name} ({role.value})")
        return user

    def logout(self):
        """
        Clears the session only. Jobs, quotes and chat history stay on the
        device for whoever logs in next.
        """
        user = self.current()
        self.session_repository.clear()
        logger.info(f"Logged out {user.id if user else 'anonymous session'}")

    def update_profile(self, fields):
        user = self.current()
        if user is None:
            raise NotFoundError("No active session to update")

        cleaned = {}
        for key in User.PROFILE_FIELDS:
            if key in fields:
                cleaned[key] = clean_text(fields[key], key) or None

        if 'name' in cleaned and not cleaned['name']:
            raise ValidationError("Name is required")

        email = cleaned.get('email')
        if 'email' in cleaned:
            if not email:
                raise ValidationError("Email is required")
            if not re.match(EMAIL_PATTERN, email):
                raise ValidationError("Please enter a valid email address")

        updated = user.with_profile(cleaned)
        self.session_repository.save(updated)
        logger.info(f"Profile updated for {updated.id}: {sorted(cleaned)}")
        return updated
