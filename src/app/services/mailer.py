from abc import ABC, abstractmethod


class IMailer(ABC):
    """Outbound email interface - application layer"""

    @abstractmethod
    async def send_verification_code(self, email: str, code: str) -> None:
        pass

    @abstractmethod
    async def send_password_reset_link(self, email: str, link: str) -> None:
        pass
