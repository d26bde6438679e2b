import logging
from typing import List

from store_api.errors import NotFound, ValidationError
from store_api.models.database import User, transaction
from store_api.models.repositories import UserRepository
from store_api.services.uploads import ImageStore

logger = logging.getLogger(__name__)


class UserService:
    """Profile management for customers and account management for admins."""

    def __init__(self, users: UserRepository, images: ImageStore):
        self.users = users
        self.images = images

    def get_user(self, user_id: int) -> User:
        user = self.users.get(user_id)
        if user is None:
            raise NotFound("User not found")
        return user

    def update_profile(self, user_id: int, data: dict) -> User:
        user = self.get_user(user_id)
        with transaction(self.users.session):
            for field, value in data.items():
                setattr(user, field, value)
        logger.info("Profile updated: id=%s fields=%s", user.id, sorted(data))
        return user

    def set_profile_image(self, user_id: int, image_file) -> User:
        user = self.get_user(user_id)
        path = self.images.save(image_file, "profiles")
        if path is None:
            raise ValidationError("No image uploaded", errors={"image": ["Image file is required"]})

        with transaction(self.users.session):
            user.profile_image = path
        return user

    def list_users(self) -> List[User]:
        return self.users.list_all()

    def set_blocked(self, actor_id: int, user_id: int, blocked: bool) -> User:
        if user_id == actor_id:
            raise ValidationError("You cannot block your own account")

        user = self.get_user(user_id)
        with transaction(self.users.session):
            user.is_blocked = blocked
        logger.info("User %s: id=%s by admin=%s",
                    "blocked" if blocked else "unblocked", user.id, actor_id)
        return user
