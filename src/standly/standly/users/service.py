from __future__ import annotations

import hmac
import logging
from dataclasses import dataclass
from typing import Optional

from werkzeug.security import check_password_hash, generate_password_hash

from ..common.validators import require_email, require_min_length, require_non_empty
from ..core.constants import MIN_PASSWORD_LENGTH
from ..core.exceptions import AuthenticationError, NotFoundError, ValidationError
from ..storage.images import CropBox, crop_avatar
from ..storage.local_storage import FileStorage, image_extension
from .model import Profile
from .repository import ProfileRepository

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SessionUser:
    """What we store into Flask session after login."""

    user_id: int
    name: str
    email: str
    role: str
    is_admin: bool


class AuthService:
    """Use case: sign up / sign in, optionally gated by a shared team access code."""

    def __init__(self, profiles: ProfileRepository, *, access_code: str = ""):
        self._profiles = profiles
        self._access_code = (access_code or "").strip()

    def _check_access_code(self, code: Optional[str]) -> None:
        if not self._access_code:
            return
        if not hmac.compare_digest((code or "").strip(), self._access_code):
            raise AuthenticationError("Invalid access code")

    def sign_up(
        self,
        *,
        email: str,
        password: str,
        name: str,
        role: str,
        access_code: Optional[str] = None,
    ) -> int:
        self._check_access_code(access_code)

        email = require_email(email)
        require_min_length(password, "Password", MIN_PASSWORD_LENGTH)
        name = require_non_empty(name, "Name")
        role = require_non_empty(role, "Position")

        if self._profiles.get_by_email(email):
            raise ValidationError("An account with this email already exists")

        user_id = self._profiles.create_profile(
            name=name,
            email=email,
            password_hash=generate_password_hash(password),
            role=role,
            is_admin=False,
        )
        logger.info("Signed up user_id=%s", user_id)
        return user_id

    def sign_in(self, *, email: str, password: str, access_code: Optional[str] = None) -> SessionUser:
        self._check_access_code(access_code)

        profile = self._profiles.get_by_email((email or "").strip().lower())
        if not profile:
            raise AuthenticationError("Invalid email or password")

        try:
            ok = check_password_hash(profile.password_hash, password or "")
        except ValueError:
            # e.g. placeholder hashes like 'CHANGE_ME' or corrupted values
            ok = False

        if not ok:
            raise AuthenticationError("Invalid email or password")

        return SessionUser(
            user_id=profile.user_id,
            name=profile.name,
            email=profile.email,
            role=profile.role,
            is_admin=profile.is_admin,
        )


class ProfileService:
    """Use case: read the team roster and manage one's own profile."""

    def __init__(self, profiles: ProfileRepository, storage: Optional[FileStorage] = None):
        self._profiles = profiles
        self._storage = storage

    def get(self, user_id: int) -> Optional[Profile]:
        return self._profiles.get_by_id(int(user_id))

    def require(self, user_id: int) -> Profile:
        profile = self.get(user_id)
        if not profile:
            raise NotFoundError("User not found")
        return profile

    def get_current_user(self, user_id: Optional[int]) -> Optional[dict]:
        if user_id is None:
            return None
        profile = self.get(user_id)
        return profile.to_view() if profile else None

    def list_all(self) -> list[dict]:
        return [p.to_view() for p in self._profiles.list_all()]

    def update_profile(
        self,
        *,
        user_id: int,
        name: Optional[str] = None,
        role: Optional[str] = None,
        avatar: Optional[str] = None,
    ) -> dict:
        self.require(user_id)

        updates: dict = {}
        if name and name.strip():
            updates["name"] = name.strip()
        if role and role.strip():
            updates["role"] = role.strip()
        if avatar and avatar.strip():
            updates["avatar"] = avatar.strip()

        if updates:
            self._profiles.update_profile(int(user_id), updates)
        return self.require(user_id).to_view()

    def upload_avatar(
        self,
        *,
        user_id: int,
        filename: str,
        data: bytes,
        crop: Optional[dict] = None,
    ) -> dict:
        if self._storage is None:
            raise ValidationError("File uploads are not configured")
        self.require(user_id)

        image_extension(filename)
        png = crop_avatar(data, CropBox.from_dict(crop))
        url = self._storage.save("avatars", f"{user_id}.png", png)
        self._profiles.update_profile(int(user_id), {"avatar": url})
        return self.require(user_id).to_view()
