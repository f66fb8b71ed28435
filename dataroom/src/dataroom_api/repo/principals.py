"""Repository for principal records."""

from __future__ import annotations

from typing import Optional

from sqlalchemy import func, select
from sqlalchemy.orm import Session

from dataroom_api.db.models import PrincipalRecord
from dataroom_api.domain.models import Principal


class PrincipalRepository:
    def get(self, principal_id: str, *, session: Session) -> Optional[PrincipalRecord]:
        return session.get(PrincipalRecord, principal_id)

    def get_by_email(self, email: str, *, session: Session) -> Optional[PrincipalRecord]:
        stmt = select(PrincipalRecord).where(func.lower(PrincipalRecord.email) == email.strip().lower())
        return session.execute(stmt).scalar_one_or_none()

    def save(self, record: PrincipalRecord, *, session: Session) -> PrincipalRecord:
        session.add(record)
        return record


def principal_from_record(record: PrincipalRecord) -> Principal:
    return Principal(
        principal_id=record.id,
        email=record.email,
        verified=bool(record.verified),
        display_name=record.display_name,
    )
