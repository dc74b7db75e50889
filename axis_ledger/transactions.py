"""
Transaction Identifier Module

Correlation ids handed back on every deposit and withdrawal. The ids are
not retained, so they cannot be looked up afterwards.
"""

import uuid


class TransactionIdIssuer:
    """Issues random (UUID4) transaction identifiers"""

    def next(self) -> str:
        """Return a new identifier, unique with overwhelming probability"""
        return str(uuid.uuid4())
