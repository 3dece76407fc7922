# quithero/services/profile_service.py
import logging

from quithero.core.exceptions import NotFoundError
from quithero.core.schemas.profile import ArchetypeResponse, ProfileUpdate
from quithero.core.schemas.progress import ProfileData
from quithero.models.profile import UserProfile
from quithero.repositories.profile_repository import ProfileRepository
from quithero.services.archetype_service import archetype_info, classify_archetype

logger = logging.getLogger(__name__)


class ProfileService:
    def __init__(self, profile_repository: ProfileRepository):
        self.profile_repository = profile_repository

    async def get_profile(self, user_id: int) -> UserProfile:
        profile = await self.profile_repository.get_by_user_id(user_id)
        if profile is None:
            raise NotFoundError("Profile not found")
        return profile

    async def update_profile(self, user_id: int, update: ProfileUpdate) -> UserProfile:
        """Обновить анкету (только переданные поля)"""
        data = update.model_dump(exclude_unset=True, mode="json")
        # Даты храним как date, а не строкой
        if "quit_date" in data:
            data["quit_date"] = update.quit_date
        profile = await self.profile_repository.upsert(user_id, data)
        logger.info(f"Profile updated for user {user_id}: {sorted(data)}")
        return profile

    async def assign_archetype(self, user_id: int) -> ArchetypeResponse:
        """Определить архетип по анкете и сохранить его"""
        profile = ProfileData.model_validate(await self.get_profile(user_id))
        archetype = classify_archetype(profile.smoking_triggers, profile.emotional_states)
        await self.profile_repository.set_archetype(user_id, archetype.value)
        logger.info(f"User {user_id} assigned archetype {archetype.value}")
        return ArchetypeResponse(archetype=archetype, info=archetype_info(archetype))
