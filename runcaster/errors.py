"""Domain errors raised by the service layer."""


class RuncasterError(Exception):
    """Base class for service errors."""


class ChallengeNotFoundError(RuncasterError):
    """Raised when a challenge id does not exist."""

    def __init__(self, challenge_id: str):
        super().__init__(f"Challenge not found with ID: {challenge_id}")
        self.challenge_id = challenge_id


class DistributionError(RuncasterError):
    """Raised when a challenge cannot be paid out in its current state."""


class ParticipantNotFoundError(RuncasterError):
    """Raised when a participant id does not exist."""

    def __init__(self, participant_id: str):
        super().__init__(f"Participant not found with ID: {participant_id}")
        self.participant_id = participant_id
