"""Signal handlers for authentication events."""

import logging

from django.contrib.auth.signals import user_logged_in
from django.dispatch import receiver

from .http import client_ip

logger = logging.getLogger(__name__)


@receiver(user_logged_in, dispatch_uid="core.record_login_ip")
def record_login_ip(sender, request, user, **kwargs):
    if request is None:
        return
    user.record_login(client_ip(request))
    logger.info("User %s logged in from %s", user.email, user.last_login_ip)
