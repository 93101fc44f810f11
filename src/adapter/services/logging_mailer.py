import logging

from src.app.services.mailer import IMailer

logger = logging.getLogger(__name__)


class LoggingMailer(IMailer):
    """
    Mail transport for development.

    Recipients are logged at info level; codes and links only at debug
    level so they stay out of production logs.
    """

    async def send_verification_code(self, email: str, code: str) -> None:
        logger.info(f"Sending verification code to {email}")
        logger.debug(f"Verification code for {email}: {code}")

    async def send_password_reset_link(self, email: str, link: str) -> None:
        logger.info(f"Sending password reset link to {email}")
        logger.debug(f"Password reset link for {email}: {link}")
