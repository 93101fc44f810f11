from src.app.services.passkey_challenge_store import PasskeyChallengeStore
from src.libs.result import Result, Return
from .dtos import PasskeyChallengeResponse


class CreatePasskeyChallengeUseCase:
    """Issues a single-use challenge for a passkey ceremony (expires after 5 minutes)"""

    def __init__(self, challenges: PasskeyChallengeStore):
        self.challenges = challenges

    async def execute(self) -> Result[PasskeyChallengeResponse]:
        challenge = await self.challenges.create()
        return Return.ok(PasskeyChallengeResponse(challenge=challenge))
