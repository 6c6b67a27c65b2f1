"""
Exceptions raised by the asset register.
"""


class AssetRegisterError(Exception):
    """Base class for register errors."""

    pass


class AssetNotFoundError(AssetRegisterError):
    """Raised when an asset id does not exist in the repository."""

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"Asset {asset_id} not found")


class AssetExistsError(AssetRegisterError):
    """Raised when inserting an asset whose id is already taken."""

    def __init__(self, asset_id: str):
        self.asset_id = asset_id
        super().__init__(f"Asset {asset_id} already exists")


class IdentifierSpaceExhaustedError(AssetRegisterError):
    """
    Raised when no unused asset id could be found.

    Server-side and retryable; never a client input error.
    """

    def __init__(self, attempts: int):
        self.attempts = attempts
        super().__init__(f"Failed to generate unique asset ID after {attempts} attempts")
