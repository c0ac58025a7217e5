"""Service-layer errors translated into HTTP responses by the API routes."""


class AdIntelError(Exception):
    """Base class for expected service failures."""


class CreativeNotFound(AdIntelError):
    def __init__(self, creative_id: str):
        super().__init__(f"Creative {creative_id} not found")
        self.creative_id = creative_id


class AnalysisLimitReached(AdIntelError):
    def __init__(self, limit: int):
        super().__init__(
            "You have reached your free analysis limit. "
            "Upgrade to Pro for unlimited analyses."
        )
        self.limit = limit


class MetaAccountNotConnected(AdIntelError):
    def __init__(self):
        super().__init__("Meta account not connected")


class MetaTokenExpired(AdIntelError):
    def __init__(self):
        super().__init__("Meta token expired")
