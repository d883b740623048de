from reelfeed.core.base_client import BaseClient
from reelfeed.core.version import __version__


class CatalogClient(BaseClient):
    """
    Client for the catalog backend (/api/search, /api/channel, /api/channel-shorts, /api/video, /api/fvideo).
    """

    def __init__(self, base_url: str, timeout: float = 10.0, max_retries: int = 3):
        headers = {
            "User-Agent": f"Reelfeed/{__version__}",
            "Accept": "application/json",
        }
        super().__init__(base_url=base_url, timeout=timeout, max_retries=max_retries, headers=headers)
