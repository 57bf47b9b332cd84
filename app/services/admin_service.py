# app/services/admin_service.py
import json
import logging
from datetime import datetime
from pathlib import Path

from sqlmodel import Session

from app.core.config import get_settings
from app.core.storage_utils import MB, ObjectStorage, validate_image
from app.models.app_setting import LOGO_URL_KEY
from app.repositories.setting_repo import SettingRepository
from app.repositories.user_repo import UserRepository
from app.schemas.admin import BackupResponse, LogoSettings

logger = logging.getLogger(__name__)

MAX_LOGO_BYTES = 5 * MB
LOGO_FOLDER = "logos"

# Microseconds keep two backups taken in the same second apart
BACKUP_TIMESTAMP_FORMAT = "%Y-%m-%d_%H%M%S_%f"


class AdminService:
    """
    Admin panel operations that are not user edits: the certificate logo
    and JSON backups of the user collection.
    """

    def __init__(self, user_repo: UserRepository, setting_repo: SettingRepository):
        self.user_repo = user_repo
        self.setting_repo = setting_repo

    # ----- Logo -----

    def get_logo(self, session: Session) -> LogoSettings:
        setting = self.setting_repo.get(session, LOGO_URL_KEY)
        if setting is None:
            return LogoSettings()
        return LogoSettings(logo_url=setting.value, updated_at=setting.updated_at)

    def set_logo(
        self,
        session: Session,
        storage: ObjectStorage,
        content_type: str | None,
        file_bytes: bytes,
    ) -> LogoSettings:
        """
        Upload a new logo and point the setting at it. The previous logo
        file is left in storage; issued certificates may reference it.
        """
        ext = validate_image(content_type, file_bytes, MAX_LOGO_BYTES)
        url = storage.upload(LOGO_FOLDER, ext, file_bytes, content_type)
        setting = self.setting_repo.put(session, LOGO_URL_KEY, url)
        logger.info("Logo updated: %s", url)
        return LogoSettings(logo_url=setting.value, updated_at=setting.updated_at)

    # ----- Backup -----

    def backup_users(self, session: Session) -> BackupResponse:
        """
        Write every user row to a new timestamped file,
        <BACKUP_DIR>/users_backup_<YYYY-MM-DD_HHMMSS_ffffff>.json.

        Rows are dumped as stored (credential hash included) so the file can
        be restored as-is.
        """
        backup_dir = Path(get_settings().BACKUP_DIR)
        backup_dir.mkdir(parents=True, exist_ok=True)

        now = datetime.now()
        dest = backup_dir / f"users_backup_{now.strftime(BACKUP_TIMESTAMP_FORMAT)}.json"

        users = [u.model_dump(mode="json") for u in self.user_repo.list(session)]
        # "x": never overwrite an earlier backup
        with dest.open("x", encoding="utf-8") as f:
            json.dump(users, f, indent=2, ensure_ascii=False)

        logger.info("Backed up %d users to %s", len(users), dest)
        return BackupResponse(file=dest.name, count=len(users), timestamp=now)
