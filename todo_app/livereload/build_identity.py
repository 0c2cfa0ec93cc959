"""
Build identity tag of the running server process.

Pages rendered by this process embed the tag, and the live reload client
reconnects with it. A client presenting any other tag (or none) is
running code from before this process started and must reload.
"""

import uuid
from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class BuildIdentity:
    """
    Immutable per-process identity tag.

    Attributes:
        tag: Random token identifying this server process.
    """

    tag: str

    @classmethod
    def generate(cls) -> "BuildIdentity":
        """Create a new identity with a random UUID4 tag."""
        return cls(tag=str(uuid.uuid4()))

    def is_stale(self, client_tag: str | None) -> bool:
        """
        Check whether a client's last-known tag predates this process.

        Args:
            client_tag: Tag supplied by the client on connect, if any.

        Returns:
            True when the tag is missing or does not match.
        """
        if not client_tag:
            return True
        return client_tag != self.tag


# Created once at process start, never replaced
build_identity = BuildIdentity.generate()
