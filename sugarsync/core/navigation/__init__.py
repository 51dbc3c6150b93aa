"""Navigation through SugarSync resource documents."""
from .models import (
    ResourceDoc,
    FolderRef,
    CollectionRef,
    FileRef,
    KIND_COLLECTION,
    KIND_FILE,
    LISTING_CONTENTS,
    LISTING_FILES,
    LISTING_COLLECTIONS,
)
from .navigator import ResourceNavigator, MAGIC_BRIEFCASE, RECEIVED_SHARES

__all__ = [
    'ResourceNavigator',
    'ResourceDoc',
    'FolderRef',
    'CollectionRef',
    'FileRef',
    'KIND_COLLECTION',
    'KIND_FILE',
    'LISTING_CONTENTS',
    'LISTING_FILES',
    'LISTING_COLLECTIONS',
    'MAGIC_BRIEFCASE',
    'RECEIVED_SHARES',
]
