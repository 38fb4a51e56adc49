"""Media host integration (remote asset storage) and temp-file staging."""

from vidtube.media.client import MediaAsset, MediaHostClient, MediaHostError
from vidtube.media.uploads import save_upload, staged_uploads

__all__ = [
    "MediaAsset",
    "MediaHostClient",
    "MediaHostError",
    "save_upload",
    "staged_uploads",
]
