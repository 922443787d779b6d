"""Safe publish of accepted files to a remote content store."""

from codenote.publishing.github import GitHubContentStore, RemoteStoreError
from codenote.publishing.protocols import ContentStore
from codenote.publishing.publisher import RemoteFilePublisher
from codenote.publishing.schemas import PublishResult, ReadResult, WriteResult

__all__ = [
    "ContentStore",
    "GitHubContentStore",
    "PublishResult",
    "ReadResult",
    "RemoteFilePublisher",
    "RemoteStoreError",
    "WriteResult",
]
