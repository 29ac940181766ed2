from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.user import UserModel


class UserRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_user(self, user_id: str) -> UserModel | None:
        return self.db.get(UserModel, user_id)

    def get_users(self, user_ids) -> dict[str, UserModel]:
        ids = set(user_ids)
        if not ids:
            return {}
        rows = self.db.execute(select(UserModel).where(UserModel.id.in_(ids))).scalars()
        return {u.id: u for u in rows}

    def save_user(self, user: UserModel) -> UserModel:
        # merge = insert albo update po kluczu, commit robi wywolujacy
        merged = self.db.merge(user)
        self.db.flush()
        return merged
