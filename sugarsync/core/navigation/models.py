"""Data models for SugarSync resource documents and listing entries."""
from dataclasses import dataclass
from typing import Optional
import xml.etree.ElementTree as ET

from ..exceptions import XMLQueryError
from ..xml_query import parse_document, text_values

# Listing entry kinds
KIND_COLLECTION = 'collection'
KIND_FILE = 'file'

# Folder links that lead to a listing
LISTING_CONTENTS = 'contents'
LISTING_FILES = 'files'
LISTING_COLLECTIONS = 'collections'
LISTING_LINKS = (LISTING_CONTENTS, LISTING_FILES, LISTING_COLLECTIONS)


@dataclass
class ResourceDoc:
    """
    XML representation of a server resource.

    Attributes:
        url: URL the document was fetched from (its self link)
        body: Raw XML body
    """
    url: str
    body: bytes

    @property
    def root_tag(self) -> Optional[str]:
        """Tag of the document root, or None when the body is not XML."""
        try:
            return parse_document(self.body).tag
        except XMLQueryError:
            return None

    def text_values(self, path_expr: str) -> list:
        """Evaluate a path expression against this document."""
        return text_values(self.body, path_expr)


@dataclass
class CollectionRef:
    """
    A ``<collection>`` entry of a listing.

    Attributes:
        display_name: Name shown to the user
        ref: Link to the collection's representation
        type: Collection type attribute (e.g. "folder", "syncFolder")
        contents: Link to the collection's contents, when listed
    """
    display_name: str
    ref: str
    type: str = ''
    contents: Optional[str] = None

    @property
    def is_folder(self) -> bool:
        return self.type == 'folder'

    @classmethod
    def from_element(cls, element: ET.Element) -> 'CollectionRef':
        return cls(
            display_name=element.findtext('displayName', ''),
            ref=element.findtext('ref', ''),
            type=element.get('type', ''),
            contents=element.findtext('contents'),
        )


@dataclass
class FileRef:
    """
    A ``<file>`` entry of a listing.

    Attributes:
        display_name: File name
        media_type: MIME type reported by the server
        ref: Link to the file's representation
        file_data: Link to the file's bytes
        size: Size in bytes, when listed
    """
    display_name: str
    media_type: str
    ref: str
    file_data: str
    size: Optional[int] = None

    @classmethod
    def from_element(cls, element: ET.Element) -> 'FileRef':
        size = element.findtext('size')
        return cls(
            display_name=element.findtext('displayName', ''),
            media_type=element.findtext('mediaType', ''),
            ref=element.findtext('ref', ''),
            file_data=element.findtext('fileData', ''),
            size=int(size) if size and size.isdigit() else None,
        )


@dataclass
class FolderRef:
    """
    A navigated ``<folder>`` representation.

    Attributes:
        display_name: Folder name
        url: Self link (where the representation was fetched from)
        contents: Link to the full listing
        files: Link to the files-only listing
        collections: Link to the collections-only listing
    """
    display_name: str
    url: str
    contents: Optional[str] = None
    files: Optional[str] = None
    collections: Optional[str] = None

    def link(self, which: str) -> Optional[str]:
        """Get one of the listing links by name."""
        return getattr(self, which) if which in LISTING_LINKS else None

    @classmethod
    def from_doc(cls, doc: ResourceDoc) -> 'FolderRef':
        root = parse_document(doc.body)
        return cls(
            display_name=root.findtext('displayName', ''),
            url=doc.url,
            contents=root.findtext(LISTING_CONTENTS),
            files=root.findtext(LISTING_FILES),
            collections=root.findtext(LISTING_COLLECTIONS),
        )
