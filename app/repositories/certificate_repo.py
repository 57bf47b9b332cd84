# app/repositories/certificate_repo.py
import uuid

from sqlmodel import Session, select

from app.models.certificate import Certificate


class CertificateRepository:
    """
    Data access layer for certificates.

    Append-only: there is no update or delete.
    """

    def save(self, session: Session, certificate: Certificate) -> Certificate:
        """
        Insert a certificate. A duplicate certificate_id raises
        IntegrityError (session rolled back).
        """
        session.add(certificate)
        try:
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(certificate)
        return certificate

    def find_by_id(self, session: Session, certificate_id: str) -> Certificate | None:
        """Exact-match lookup by public certificate identity."""
        stmt = select(Certificate).where(Certificate.certificate_id == certificate_id)
        return session.exec(stmt).first()

    def list_for_user(self, session: Session, user_id: uuid.UUID) -> list[Certificate]:
        stmt = (
            select(Certificate)
            .where(Certificate.user_id == user_id)
            .order_by(Certificate.created_at.desc())
        )
        return list(session.exec(stmt).all())
