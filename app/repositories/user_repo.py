# app/repositories/user_repo.py
import uuid

from sqlmodel import Session, or_, select

from app.models.user import User


class UserRepository:
    """
    Data access layer for User.

    Responsibilities:
      - Pure DB operations (CRUD + queries)
      - No FastAPI, no HTTP, no business logic

    create/update commit immediately; a unique-index violation surfaces as
    sqlalchemy.exc.IntegrityError after the session has been rolled back.
    """

    # ----- Lookups -----

    def get_by_id(self, session: Session, user_id: uuid.UUID) -> User | None:
        """Return a User by primary key, or None if not found."""
        return session.get(User, user_id)

    def get_by_identifier(self, session: Session, identifier: str) -> User | None:
        """
        Match a login identifier against mobile number OR email.
        First match wins.
        """
        stmt = select(User).where(
            or_(User.mobile_no == identifier, User.email == identifier.lower())
        )
        return session.exec(stmt).first()

    def get_by_registration_number(self, session: Session, number: str) -> User | None:
        stmt = select(User).where(User.registration_number == number)
        return session.exec(stmt).first()

    def find_holder(
        self,
        session: Session,
        *,
        email: str | None = None,
        mobile_no: str | None = None,
        exclude_id: uuid.UUID | None = None,
    ) -> User | None:
        """
        Return another user already holding this email or mobile number.

        Args:
            exclude_id: ignore this record (the one being updated)
        """
        conditions = []
        if email is not None:
            conditions.append(User.email == email)
        if mobile_no is not None:
            conditions.append(User.mobile_no == mobile_no)
        if not conditions:
            return None

        stmt = select(User).where(or_(*conditions))
        if exclude_id is not None:
            stmt = stmt.where(User.id != exclude_id)
        return session.exec(stmt).first()

    def list(self, session: Session) -> list[User]:
        """All users, newest first."""
        stmt = select(User).order_by(User.created_at.desc())
        return list(session.exec(stmt).all())

    # ----- Writes -----

    def create(self, session: Session, user: User) -> User:
        """Insert a new User and return the persisted row."""
        return self._commit(session, user)

    def update(self, session: Session, user: User) -> User:
        """Persist changes to an existing User."""
        return self._commit(session, user)

    @staticmethod
    def _commit(session: Session, user: User) -> User:
        session.add(user)
        try:
            session.commit()
        except Exception:
            session.rollback()
            raise
        session.refresh(user)
        return user
