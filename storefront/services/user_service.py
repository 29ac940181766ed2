from datetime import datetime, timezone

from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel
from storefront.repos.user_repo import UserRepo
from storefront.services.identity import Identity


class UserService:
    """Katalog wlascicieli zamowien do osadzania w widoku admina."""

    def __init__(self, db: Session):
        self.repo = UserRepo(db)

    def remember_owner(self, identity: Identity) -> UserModel:
        existing = self.repo.get_user(identity.user_id)
        user = UserModel(
            id=identity.user_id,
            email=identity.email,
            first_name=identity.first_name or (existing.first_name if existing else None),
            last_name=identity.last_name or (existing.last_name if existing else None),
            updated_at=datetime.now(timezone.utc),
        )
        return self.repo.save_user(user)

    def owners_by_id(self, user_ids) -> dict[str, UserModel]:
        return self.repo.get_users(user_ids)
