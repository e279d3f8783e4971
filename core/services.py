from django.contrib.contenttypes.models import ContentType
import logging

from .models import DomainActivity

logger = logging.getLogger("compete")


class ActivityService:
    @staticmethod
    def log_activity(actor, verb, target, competition=None, metadata=None):
        """
        Logs a domain activity. Call inside the transaction of the change it
        records so both commit or roll back together.
        """
        if metadata is None:
            metadata = {}

        activity = DomainActivity.objects.create(
            actor=actor,
            verb=verb,
            content_type=ContentType.objects.get_for_model(target),
            object_id=target.pk,
            competition=competition,
            metadata=metadata,
        )

        logger.debug(f"Activity logged: verb={verb}, actor={actor.pk}, target={target.pk}")

        return activity
