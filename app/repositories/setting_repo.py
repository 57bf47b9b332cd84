# app/repositories/setting_repo.py
from sqlmodel import Session

from app.models.app_setting import AppSetting
from app.models.user import utcnow


class SettingRepository:
    """Key/value access to app_settings."""

    def get(self, session: Session, key: str) -> AppSetting | None:
        return session.get(AppSetting, key)

    def put(self, session: Session, key: str, value: str) -> AppSetting:
        """Insert or overwrite a setting."""
        setting = session.get(AppSetting, key)
        if setting is None:
            setting = AppSetting(key=key, value=value)
        else:
            setting.value = value
            setting.updated_at = utcnow()

        session.add(setting)
        session.commit()
        session.refresh(setting)
        return setting
