import hashlib
import hmac
from datetime import datetime, timezone

import jwt
from loguru import logger

from storefront import settings
from storefront.common.nanoid import NanoIdType
from storefront.core.identity.constants import (
    WALLET_TOKEN_EXPIRY_SEPARATOR,
    WALLET_TOKEN_PREFIX,
    WALLET_TOKEN_SIGNATURE_LENGTH,
    WALLET_TOKEN_SIGNATURE_SEPARATOR,
)
from storefront.core.identity.domains import (
    AdminPrincipal,
    BuyerIdentity,
    Principal,
    PublicPrincipal,
    SessionTokenContent,
    UserPrincipal,
)
from storefront.core.identity.exceptions import (
    SessionTokenExpired,
    SessionTokenInvalid,
    WalletTokenExpired,
    WalletTokenInvalid,
)
from storefront.core.user import UserRead, UserRoleEnum, UserService


def _now() -> datetime:
    return datetime.now(tz=timezone.utc)


def _sign_wallet_claim(wallet_address: str, expires_at_ms: int) -> str:
    digest = hmac.new(
        settings.WALLET_TOKEN_SECRET.encode('utf-8'),
        f'{wallet_address}:{expires_at_ms}'.encode('utf-8'),
        hashlib.sha256,
    ).hexdigest()
    return digest[:WALLET_TOKEN_SIGNATURE_LENGTH]


def issue_wallet_token(wallet_address: str, expires_at: datetime | None = None) -> str:
    """
    Issued by the wallet connect flow once the buyer has signed the login message
    """
    expires_at = expires_at or _now() + settings.WALLET_TOKEN_LIFETIME
    expires_at_ms = int(expires_at.timestamp() * 1000)
    signature = _sign_wallet_claim(wallet_address, expires_at_ms)
    return (
        f'{WALLET_TOKEN_PREFIX}{wallet_address}'
        f'{WALLET_TOKEN_EXPIRY_SEPARATOR}{expires_at_ms}'
        f'{WALLET_TOKEN_SIGNATURE_SEPARATOR}{signature}'
    )


class IdentityService:
    """
    Turns request credentials into exactly one Principal for the merchant and
    admin channel, and independently into an optional BuyerIdentity for the
    wallet channel. The two are never combined.
    """

    _JWT_SIGNING_ALGORITHM = settings.SESSION_TOKEN_ALGORITHM

    def __init__(self, user_service: UserService):
        self.user_service = user_service

    @classmethod
    def factory(cls) -> 'IdentityService':
        return cls(user_service=UserService.factory())

    @classmethod
    def principal_for_user(cls, user: UserRead) -> Principal:
        if user.role == UserRoleEnum.ADMIN:
            return AdminPrincipal(id=user.id)
        return UserPrincipal(id=user.id, role=user.role)

    def resolve_principal(self, token: str | None) -> Principal:
        if not token:
            return PublicPrincipal()

        token_content = self.verify_session_token(token)
        user = self.user_service.get_user_for_id_or_none(token_content.sub)
        if user is None:
            # Sessions can outlive the user they were issued for
            logger.warning(f'session token subject {token_content.sub} does not resolve to a user')
            return PublicPrincipal()

        return self.principal_for_user(user)

    @classmethod
    def issue_session_token(cls, user_id: NanoIdType, expires_at: datetime | None = None) -> str:
        """
        Sessions are minted by the credential service, kept here for tooling and tests
        """
        issued_at = _now()
        expires_at = expires_at or issued_at + settings.SESSION_TOKEN_LIFETIME
        return jwt.encode(
            {'sub': user_id, 'exp': int(expires_at.timestamp()), 'iat': int(issued_at.timestamp())},
            settings.SECRET_KEY,
            algorithm=cls._JWT_SIGNING_ALGORITHM,
        )

    @classmethod
    def verify_session_token(cls, token: str) -> SessionTokenContent:
        try:
            decoded_token = jwt.decode(token, settings.SECRET_KEY, algorithms=[cls._JWT_SIGNING_ALGORITHM])
        except jwt.ExpiredSignatureError:
            raise SessionTokenExpired()
        except jwt.InvalidTokenError:
            raise SessionTokenInvalid()

        if not decoded_token.get('sub'):
            raise SessionTokenInvalid(message='Access token has no subject.')

        return SessionTokenContent(sub=decoded_token['sub'], exp=decoded_token['exp'], iat=decoded_token.get('iat'))

    def resolve_buyer(self, wallet_address: str | None, wallet_token: str | None) -> BuyerIdentity | None:
        if not wallet_address or not wallet_token:
            return None

        self.verify_wallet_token(wallet_address=wallet_address, wallet_token=wallet_token)
        return BuyerIdentity(wallet_address=wallet_address)

    @classmethod
    def verify_wallet_token(cls, wallet_address: str, wallet_token: str) -> None:
        if not wallet_token.startswith(WALLET_TOKEN_PREFIX):
            raise WalletTokenInvalid(message='Wallet token has an unknown format.')

        claim, _, signature = wallet_token[len(WALLET_TOKEN_PREFIX) :].rpartition(WALLET_TOKEN_SIGNATURE_SEPARATOR)
        token_address, _, expires_at = claim.rpartition(WALLET_TOKEN_EXPIRY_SEPARATOR)
        if not token_address or not expires_at.isdigit() or not signature:
            raise WalletTokenInvalid(message='Wallet token has an unknown format.')

        # Exact match, addresses are case sensitive on some chains
        if token_address != wallet_address:
            raise WalletTokenInvalid(message='Wallet token was issued for a different address.')

        expected_signature = _sign_wallet_claim(token_address, int(expires_at))
        if not hmac.compare_digest(expected_signature, signature):
            raise WalletTokenInvalid(message='Wallet token signature mismatch.')

        if int(expires_at) <= int(_now().timestamp() * 1000):
            raise WalletTokenExpired()
