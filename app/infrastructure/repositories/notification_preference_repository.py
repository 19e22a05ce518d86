"""Persistence helpers for notification preferences."""

from __future__ import annotations

from sqlalchemy.orm import Session

from app.domain.entities import DigestFrequency, NotificationPreferences
from app.infrastructure.models import NotificationPreferenceModel


class NotificationPreferenceRepository:
    """Read and upsert :class:`NotificationPreferences` rows."""

    def __init__(self, session: Session) -> None:
        self.session = session

    def get(self, user_id: str) -> NotificationPreferences | None:
        model = self.session.get(NotificationPreferenceModel, user_id)
        if model is None:
            return None
        return self._to_entity(model)

    def upsert(self, preferences: NotificationPreferences) -> NotificationPreferences:
        model = self.session.get(NotificationPreferenceModel, preferences.user_id)
        if model is None:
            model = NotificationPreferenceModel(user_id=preferences.user_id)
        model.email_enabled = preferences.email
        model.push_enabled = preferences.push
        model.digest = preferences.digest.value
        self.session.add(model)
        self.session.commit()
        self.session.refresh(model)
        return self._to_entity(model)

    @staticmethod
    def _to_entity(model: NotificationPreferenceModel) -> NotificationPreferences:
        return NotificationPreferences(
            user_id=model.user_id,
            email=bool(model.email_enabled),
            push=bool(model.push_enabled),
            digest=DigestFrequency(model.digest),
        )


__all__ = ["NotificationPreferenceRepository"]
