from typing import Optional

from models.token import AccessToken
from repositories.base import BaseRepository


class TokenRepository(BaseRepository):
    model = AccessToken
    resource_name = "Token"

    def create(self, *, user_id: int, jti: str, name: str = "auth_token") -> AccessToken:
        return super().create({"user_id": user_id, "jti": jti, "name": name})

    def find_by_jti(self, jti: str) -> Optional[AccessToken]:
        return self.query().filter(AccessToken.jti == jti).first()

    def delete_for_user(self, user_id: int) -> int:
        deleted = self.query().filter(AccessToken.user_id == user_id).delete(synchronize_session=False)
        self.db.commit()
        return deleted
