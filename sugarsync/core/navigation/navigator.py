"""
Resource navigator.

Walks the SugarSync hypermedia graph: every URL it follows is read from a
link element of a previously fetched document. The only fixed endpoint is
the user resource. Nothing is cached; each call fetches again.
"""
from typing import List, Optional

from ..api.config import APIConfig
from ..api.models import AccessToken
from ..api.transport import AsyncHTTPTransport
from ..exceptions import (
    SugarSyncAmbiguousError,
    SugarSyncNotFoundError,
    SugarSyncRequestError,
)
from ..logging import get_logger
from ..xml_query import elements, text_values
from .models import (
    KIND_COLLECTION,
    KIND_FILE,
    LISTING_COLLECTIONS,
    LISTING_FILES,
    LISTING_LINKS,
    CollectionRef,
    FileRef,
    FolderRef,
    ResourceDoc,
)

MAGIC_BRIEFCASE = 'magicBriefcase'
RECEIVED_SHARES = 'receivedShares'
LISTING_ROOT = 'collectionContents'

# Link element returned for a display-name match, per entry kind
_LINK_FOR_KIND = {
    KIND_COLLECTION: 'ref',
    KIND_FILE: 'fileData',
}

# Names used in not-found / ambiguity messages
_LABEL_FOR_KIND = {
    KIND_COLLECTION: 'folder',
    KIND_FILE: 'file',
}


def _unique_link(
    doc: ResourceDoc,
    child_tag: str,
    name: str,
    link_tag: str,
    label: str
) -> str:
    """
    Find the single child named ``name`` and return one of its links.

    Raises:
        SugarSyncNotFoundError: No child has that display name
        SugarSyncAmbiguousError: More than one child has it
    """
    matches = [
        child for child in elements(doc.body, child_tag)
        if child.findtext('displayName') == name
    ]
    if not matches:
        raise SugarSyncNotFoundError(label, name)
    if len(matches) > 1:
        raise SugarSyncAmbiguousError(label, name, len(matches))

    link = matches[0].findtext(link_tag)
    if not link:
        raise SugarSyncRequestError(
            f"{label.capitalize()} {name} has no <{link_tag}> link in {doc.url}"
        )
    return link


class ResourceNavigator:
    """
    Follows links between SugarSync resource documents.

    Example:
        >>> navigator = ResourceNavigator(transport)
        >>> user = await navigator.user_doc(token)
        >>> folder = await navigator.fetch_doc(
        ...     navigator.resolve_named_link(user, 'magicBriefcase'), token)
        >>> listing = await navigator.listing(folder, token, 'contents')
    """

    def __init__(self, transport: AsyncHTTPTransport, config: Optional[APIConfig] = None):
        """
        Initialize navigator.

        Args:
            transport: HTTP transport
            config: API configuration (defaults to the transport's)
        """
        self._transport = transport
        self._config = config or transport.config
        self._logger = get_logger('sugarsync.navigation')

    async def fetch_doc(self, url: str, token: AccessToken) -> ResourceDoc:
        """
        GET a resource document.

        Raises:
            SugarSyncRequestError: On any non-2xx response
        """
        result = await self._transport.get(url, token)
        if not result.ok:
            raise SugarSyncRequestError(f"GET {url} returned {result.status}", result)
        return ResourceDoc(url=url, body=result.body)

    async def user_doc(self, token: AccessToken) -> ResourceDoc:
        """Fetch the user resource."""
        return await self.fetch_doc(self._config.user_url, token)

    @staticmethod
    def resolve_named_link(doc: ResourceDoc, name: str) -> str:
        """
        Read a named link (e.g. magicBriefcase, receivedShares) off a document.

        Args:
            doc: Document whose root has a ``name`` child
            name: Link element name

        Returns:
            The first text value of that element

        Raises:
            SugarSyncRequestError: If the document has no such link
        """
        values = [value for value in text_values(doc.body, f"{name}/text()") if value]
        if not values:
            raise SugarSyncRequestError(f"No <{name}> link in {doc.url}")
        return values[0]

    @staticmethod
    def find_child_by_display_name(listing_doc: ResourceDoc, name: str, kind: str) -> str:
        """
        Find a listing entry by exact, case-sensitive display name.

        Args:
            listing_doc: A collectionContents document
            name: Display name to match
            kind: 'collection' (returns <ref>) or 'file' (returns <fileData>)

        Returns:
            The entry's link URL

        Raises:
            ValueError: For an unknown kind
            SugarSyncNotFoundError: Nothing matched
            SugarSyncAmbiguousError: Several entries matched
        """
        if kind not in _LINK_FOR_KIND:
            raise ValueError(f"Unknown listing entry kind: {kind}")
        return _unique_link(listing_doc, kind, name, _LINK_FOR_KIND[kind], _LABEL_FOR_KIND[kind])

    async def listing(self, folder_doc: ResourceDoc, token: AccessToken, which: str) -> ResourceDoc:
        """
        Follow one of a folder's listing links.

        Args:
            folder_doc: A folder representation
            token: Access token
            which: 'contents', 'files' or 'collections'

        Returns:
            The listing document

        Raises:
            SugarSyncRequestError: If the link is missing or does not lead to a listing
        """
        if which not in LISTING_LINKS:
            raise ValueError(f"Unknown listing link: {which}")
        folder = FolderRef.from_doc(folder_doc)
        url = folder.link(which)
        if not url:
            raise SugarSyncRequestError(f"No <{which}> link in {folder_doc.url}")
        self._logger.debug(f"Following <{which}> of folder {folder.display_name!r}")
        listing = await self.fetch_doc(url, token)
        if listing.root_tag != LISTING_ROOT:
            raise SugarSyncRequestError(
                f"Expected <{LISTING_ROOT}> from {url}, got <{listing.root_tag}>"
            )
        return listing

    @staticmethod
    def collections(listing_doc: ResourceDoc) -> List[CollectionRef]:
        """All collection entries of a listing, in document order."""
        return [CollectionRef.from_element(e) for e in elements(listing_doc.body, KIND_COLLECTION)]

    @staticmethod
    def files(listing_doc: ResourceDoc) -> List[FileRef]:
        """All file entries of a listing, in document order."""
        return [FileRef.from_element(e) for e in elements(listing_doc.body, KIND_FILE)]

    async def magic_briefcase(self, token: AccessToken) -> ResourceDoc:
        """Fetch the Magic Briefcase folder representation."""
        user = await self.user_doc(token)
        return await self.fetch_doc(self.resolve_named_link(user, MAGIC_BRIEFCASE), token)

    async def shared_folder_doc(self, token: AccessToken, share_name: str) -> ResourceDoc:
        """
        Fetch the folder behind a received share.

        user -> receivedShares -> receivedShare[displayName=NAME]/sharedFolder
        """
        user = await self.user_doc(token)
        shares = await self.fetch_doc(self.resolve_named_link(user, RECEIVED_SHARES), token)
        folder_url = _unique_link(shares, 'receivedShare', share_name, 'sharedFolder', 'share')
        return await self.fetch_doc(folder_url, token)

    async def share_collections(self, token: AccessToken, share_name: str) -> ResourceDoc:
        """The collections listing of a received share."""
        shared_folder = await self.shared_folder_doc(token, share_name)
        return await self.listing(shared_folder, token, LISTING_COLLECTIONS)

    async def share_subfolder_files(
        self,
        token: AccessToken,
        share_name: str,
        folder_name: str
    ) -> ResourceDoc:
        """
        The files listing of a subfolder of a received share.

        shared folder -> collections -> collection[displayName=FOLDER] -> files
        """
        collections = await self.share_collections(token, share_name)
        folder_url = self.find_child_by_display_name(collections, folder_name, KIND_COLLECTION)
        self._logger.info(f"Found {folder_name} in share {share_name}")
        folder = await self.fetch_doc(folder_url, token)
        return await self.listing(folder, token, LISTING_FILES)
