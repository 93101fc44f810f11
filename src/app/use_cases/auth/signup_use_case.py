import logging
from datetime import timedelta

from src.app.services.mailer import IMailer
from src.app.services.password import PasswordStrengthChecker, hash_password
from src.app.services.secret_tokens import generate_email_verification_code
from src.app.services.session_service import SessionService
from src.app.services.unit_of_work import UnitOfWork
from src.domain.base import utc_now
from src.domain.entities import AuthStep, Email, EmailVerification, User
from src.libs.result import Error, Result, Return
from .dtos import AuthenticatedSession, SignupCommand

logger = logging.getLogger(__name__)


class SignupUseCase:
    """
    Signup Use Case

    Command/Response Pattern:
    - Input: SignupCommand (validated business intent)
    - Output: Result[AuthenticatedSession]

    Business Logic:
    1. Reject weak or breached passwords
    2. Reject taken usernames and email addresses (case-insensitive)
    3. Hash password with argon2id
    4. Create User and unverified Email
    5. Store a fresh email verification code
    6. Create a Session with no factors verified
    7. Commit atomically, then send the code
    """

    def __init__(
        self,
        uow: UnitOfWork,
        strength_checker: PasswordStrengthChecker,
        mailer: IMailer,
        code_length: int = 8,
        code_lifetime: timedelta = timedelta(minutes=15),
        session_lifetime: timedelta = timedelta(days=30),
    ):
        self.uow = uow
        self.strength_checker = strength_checker
        self.mailer = mailer
        self.code_length = code_length
        self.code_lifetime = code_lifetime
        self.session_lifetime = session_lifetime

    async def execute(self, command: SignupCommand) -> Result[AuthenticatedSession]:
        """
        Execute signup use case

        Returns:
            Result[AuthenticatedSession] whose next step is email verification,
            or Error(WEAK_PASSWORD | USERNAME_TAKEN | EMAIL_TAKEN)
        """
        if not await self.strength_checker.is_strong(command.password):
            return Return.err(Error("WEAK_PASSWORD", "Password is too weak or has been compromised"))

        username = command.username.strip().lower()
        email_address = command.email.strip().lower()

        async with self.uow:
            if await self.uow.users.get_by_username(username):
                return Return.err(Error("USERNAME_TAKEN", "Username is already taken"))
            if await self.uow.emails.get(email_address):
                return Return.err(Error("EMAIL_TAKEN", "Email is already registered"))

            user = User(username=username, password_hash=hash_password(command.password))
            user = await self.uow.users.create(user)

            await self.uow.emails.upsert(
                Email(email=email_address, is_verified=False, user_id=user.id)
            )

            code = generate_email_verification_code(self.code_length)
            await self.uow.email_verifications.replace(
                EmailVerification(
                    email=email_address,
                    code=code,
                    expires_at=utc_now() + self.code_lifetime,
                )
            )

            sessions = SessionService(self.uow.sessions, self.session_lifetime)
            token, _ = await sessions.create_session(user.id)

            await self.uow.commit()

        logger.info(f"User signed up: {user.id}")
        await self.mailer.send_verification_code(email_address, code)

        return Return.ok(
            AuthenticatedSession(session_token=token, next_step=AuthStep.email_verification)
        )
