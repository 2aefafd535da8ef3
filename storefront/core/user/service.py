from sqlalchemy import func, or_

from storefront.common.nanoid import NanoIdType
from storefront.core.user.constants import COLLECTION_OWNER_ROLES, TRANSFER_CANDIDATE_LIMIT
from storefront.core.user.domains import TransferCandidate, UserCreate, UserRead
from storefront.core.user.exceptions import UserNotFound
from storefront.core.user.models import User
from storefront.network.database.repository.exceptions import RepositoryObjectNotFound


class UserService:
    @classmethod
    def factory(cls) -> 'UserService':
        return cls()

    def get_user_for_id(self, user_id: NanoIdType) -> UserRead:
        try:
            return User.get(User.id == user_id)
        except RepositoryObjectNotFound:
            raise UserNotFound(message=f'User not found with id: {user_id}')

    def get_user_for_id_or_none(self, user_id: NanoIdType) -> UserRead | None:
        return User.get_or_none(User.id == user_id)

    def get_user_for_email_or_none(self, email: str) -> UserRead | None:
        return User.get_or_none(func.lower(User.email) == email.lower())

    def create_user(self, user: UserCreate) -> UserRead:
        return User.create(user)

    def list_users_for_ids(self, user_ids: set[NanoIdType] | list[NanoIdType]) -> list[UserRead]:
        if not user_ids:
            return []
        return User.list(User.id.in_(user_ids))

    def search_transfer_candidates(
        self,
        search: str | None = None,
        exclude_user_id: NanoIdType | None = None,
    ) -> list[TransferCandidate]:
        """
        Merchants and admins eligible to receive a collection, matched on
        email, username or display name
        """
        clauses = [User.role.in_([role.value for role in COLLECTION_OWNER_ROLES])]
        if exclude_user_id:
            clauses.append(User.id != exclude_user_id)
        if search and search.strip():
            pattern = f'%{search.strip().lower()}%'
            clauses.append(
                or_(
                    func.lower(User.email).like(pattern),
                    func.lower(func.coalesce(User.username, '')).like(pattern),
                    func.lower(func.coalesce(User.display_name, '')).like(pattern),
                )
            )

        users = User.list(*clauses, ordering=['email'], limit=TRANSFER_CANDIDATE_LIMIT)
        return [TransferCandidate.from_user(user) for user in users]
