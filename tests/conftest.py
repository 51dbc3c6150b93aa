"""Pytest fixtures for SugarSync tests."""
from collections import namedtuple
from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from sugarsync.core.api import APIConfig, AsyncHTTPTransport, HttpResult

GATEWAY = 'https://api.sugarsync.com'

URLS = SimpleNamespace(
    app_authorization=f'{GATEWAY}/app-authorization',
    authorization=f'{GATEWAY}/authorization',
    user=f'{GATEWAY}/user',
    refresh_token=f'{GATEWAY}/app-authorization/R-1234',
    access_token=f'{GATEWAY}/authorization/A-5678',
    briefcase=f'{GATEWAY}/folder/mb',
    briefcase_contents=f'{GATEWAY}/folder/mb/contents',
    briefcase_files=f'{GATEWAY}/folder/mb/files',
    briefcase_collections=f'{GATEWAY}/folder/mb/collections',
    report_data=f'{GATEWAY}/file/f1/data',
    notes_data=f'{GATEWAY}/file/f2/data',
    received_shares=f'{GATEWAY}/user/receivedShares',
    share_folder=f'{GATEWAY}/folder/share1',
    share_collections=f'{GATEWAY}/folder/share1/collections',
    trip=f'{GATEWAY}/folder/trip',
    trip_files=f'{GATEWAY}/folder/trip/files',
    still=f'{GATEWAY}/folder/still',
    still_files=f'{GATEWAY}/folder/still/files',
    clip1_data=f'{GATEWAY}/file/v1/data',
    clip2_data=f'{GATEWAY}/file/v2/data',
    photo_data=f'{GATEWAY}/file/p1/data',
    created_file=f'{GATEWAY}/file/abc',
)

USER_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<user>
  <username>me@example.com</username>
  <nickname>me</nickname>
  <quota>
    <limit>107374182400</limit>
    <usage>53687091200</usage>
  </quota>
  <magicBriefcase>{URLS.briefcase}</magicBriefcase>
  <receivedShares>{URLS.received_shares}</receivedShares>
</user>""".encode()


def folder_xml(name: str, base: str) -> bytes:
    """Folder representation with its three listing links."""
    return f"""<?xml version="1.0" encoding="UTF-8"?>
<folder>
  <displayName>{name}</displayName>
  <dsid>/sc/1/{name}</dsid>
  <collections>{base}/collections</collections>
  <files>{base}/files</files>
  <contents>{base}/contents</contents>
</folder>""".encode()


CONTENTS_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<collectionContents start="0" hasMore="false" end="4">
  <collection type="folder">
    <displayName>Photos</displayName>
    <ref>{GATEWAY}/folder/photos</ref>
    <contents>{GATEWAY}/folder/photos/contents</contents>
  </collection>
  <collection type="syncFolder">
    <displayName>Laptop</displayName>
    <ref>{GATEWAY}/folder/laptop</ref>
  </collection>
  <file>
    <displayName>report.txt</displayName>
    <ref>{GATEWAY}/file/f1</ref>
    <size>12</size>
    <mediaType>text/plain</mediaType>
    <fileData>{URLS.report_data}</fileData>
  </file>
  <collection type="folder">
    <displayName>Docs</displayName>
    <ref>{GATEWAY}/folder/docs</ref>
  </collection>
  <file>
    <displayName>notes.md</displayName>
    <ref>{GATEWAY}/file/f2</ref>
    <mediaType>text/markdown</mediaType>
    <fileData>{URLS.notes_data}</fileData>
  </file>
</collectionContents>""".encode()

EMPTY_CONTENTS_XML = b"""<?xml version="1.0" encoding="UTF-8"?>
<collectionContents start="0" hasMore="false" end="0"/>"""

SHARES_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<receivedShares>
  <receivedShare>
    <displayName>CapCityCreative</displayName>
    <sharedFolder>{URLS.share_folder}</sharedFolder>
  </receivedShare>
  <receivedShare>
    <displayName>Family</displayName>
    <sharedFolder>{GATEWAY}/folder/family</sharedFolder>
  </receivedShare>
</receivedShares>""".encode()

SHARE_COLLECTIONS_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<collectionContents start="0" hasMore="false" end="2">
  <collection type="folder">
    <displayName>trip</displayName>
    <ref>{URLS.trip}</ref>
  </collection>
  <collection type="folder">
    <displayName>still</displayName>
    <ref>{URLS.still}</ref>
  </collection>
</collectionContents>""".encode()

TRIP_FILES_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<collectionContents start="0" hasMore="false" end="3">
  <file>
    <displayName>clip1.mov</displayName>
    <ref>{GATEWAY}/file/v1</ref>
    <size>6</size>
    <mediaType>video/quicktime</mediaType>
    <fileData>{URLS.clip1_data}</fileData>
  </file>
  <file>
    <displayName>photo.jpg</displayName>
    <ref>{GATEWAY}/file/p1</ref>
    <size>5</size>
    <mediaType>image/jpeg</mediaType>
    <fileData>{URLS.photo_data}</fileData>
  </file>
  <file>
    <displayName>clip2.mov</displayName>
    <ref>{GATEWAY}/file/v2</ref>
    <size>6</size>
    <mediaType>video/quicktime</mediaType>
    <fileData>{URLS.clip2_data}</fileData>
  </file>
</collectionContents>""".encode()

STILL_FILES_XML = f"""<?xml version="1.0" encoding="UTF-8"?>
<collectionContents start="0" hasMore="false" end="1">
  <file>
    <displayName>photo.jpg</displayName>
    <ref>{GATEWAY}/file/p1</ref>
    <mediaType>image/jpeg</mediaType>
    <fileData>{URLS.photo_data}</fileData>
  </file>
</collectionContents>""".encode()


Call = namedtuple('Call', ['method', 'url', 'token', 'content_type', 'body'])


class ScriptedTransport:
    """
    In-memory stand-in for AsyncHTTPTransport.

    Responses are registered per (method, url). A route holding several
    responses hands them out in order and then keeps repeating the last one.
    Unregistered routes answer 404. Every request is recorded in ``calls``.
    """

    def __init__(self, config=None):
        self.config = config or APIConfig.default()
        self.routes = {}
        self.calls = []
        self.closed = False

    def add(self, method, url, status=200, body=b'', headers=None):
        self.routes.setdefault((method, url), []).append(
            HttpResult.build(status, headers, body)
        )
        return self

    def set(self, method, url, status=200, body=b'', headers=None):
        """Replace whatever a route currently answers."""
        self.routes[(method, url)] = [HttpResult.build(status, headers, body)]
        return self

    def respond(self, method, url):
        """Next scripted response of a route."""
        queue = self.routes.get((method, url))
        if not queue:
            return HttpResult.build(404, body=b'<error>no route</error>')
        return queue.pop(0) if len(queue) > 1 else queue[0]

    def urls(self, method=None):
        """URLs requested so far, optionally filtered by method."""
        return [c.url for c in self.calls if method is None or c.method == method]

    async def get(self, url, access_token=None):
        self.calls.append(Call('GET', url, access_token, None, None))
        return self.respond('GET', url)

    async def post(self, url, content_type, body, access_token=None, follow_redirects=False):
        self.calls.append(Call('POST', url, access_token, content_type, body))
        return self.respond('POST', url)

    async def put(self, url, content_type, body_stream, access_token, content_length=None):
        if isinstance(body_stream, bytes):
            data = body_stream
        else:
            data = b''.join([chunk async for chunk in body_stream])
        self.calls.append(Call('PUT', url, access_token, content_type, data))
        return self.respond('PUT', url)

    async def get_to_file(self, url, local_path, access_token, chunk_size=None):
        self.calls.append(Call('GET', url, access_token, None, None))
        result = self.respond('GET', url)
        if not result.ok:
            return result
        Path(local_path).write_bytes(result.body)
        return HttpResult(status=result.status, headers=result.headers)

    async def close(self):
        self.closed = True


def script_account(transport: ScriptedTransport, contents: bytes = CONTENTS_XML) -> ScriptedTransport:
    """Register the routes of a complete, healthy account."""
    (transport
        .add('POST', URLS.app_authorization, 201, headers={'Location': URLS.refresh_token})
        .add('POST', URLS.authorization, 201, headers={'Location': URLS.access_token})
        .add('GET', URLS.user, 200, USER_XML)
        .add('GET', URLS.briefcase, 200, folder_xml('Magic Briefcase', URLS.briefcase))
        .add('GET', URLS.briefcase_contents, 200, contents)
        .add('GET', URLS.report_data, 200, b'report bytes')
        .add('GET', URLS.notes_data, 200, b'# notes')
        .add('GET', URLS.received_shares, 200, SHARES_XML)
        .add('GET', URLS.share_folder, 200, folder_xml('CapCityCreative', URLS.share_folder))
        .add('GET', URLS.share_collections, 200, SHARE_COLLECTIONS_XML)
        .add('GET', URLS.trip, 200, folder_xml('trip', URLS.trip))
        .add('GET', URLS.trip_files, 200, TRIP_FILES_XML)
        .add('GET', URLS.still, 200, folder_xml('still', URLS.still))
        .add('GET', URLS.still_files, 200, STILL_FILES_XML)
        .add('GET', URLS.clip1_data, 200, b'movie1')
        .add('GET', URLS.clip2_data, 200, b'movie2')
        .add('GET', URLS.photo_data, 200, b'jpeg!'))
    return transport


@pytest.fixture
def urls():
    """Well-known URLs of the scripted account."""
    return URLS


@pytest.fixture
def xml_docs():
    """Sample resource documents."""
    return {
        'user': USER_XML,
        'folder': folder_xml('Magic Briefcase', URLS.briefcase),
        'contents': CONTENTS_XML,
        'empty_contents': EMPTY_CONTENTS_XML,
        'shares': SHARES_XML,
        'share_collections': SHARE_COLLECTIONS_XML,
        'trip_files': TRIP_FILES_XML,
        'still_files': STILL_FILES_XML,
    }


@pytest.fixture
def transport():
    """Empty scripted transport."""
    return ScriptedTransport()


@pytest.fixture
def account(transport):
    """Scripted transport serving a complete account."""
    return script_account(transport)


@pytest.fixture
def make_response():
    """Factory for mocked aiohttp responses usable as ``async with`` targets."""
    def factory(status=200, headers=None, body=b'', chunks=None, error=None):
        response = MagicMock()
        response.status = status
        response.headers = headers or {}
        response.read = AsyncMock(return_value=body)

        async def iter_chunked(size):
            for chunk in chunks or []:
                yield chunk
            if error is not None:
                raise error

        response.content.iter_chunked = iter_chunked

        ctx = MagicMock()
        ctx.__aenter__ = AsyncMock(return_value=response)
        ctx.__aexit__ = AsyncMock(return_value=False)
        return ctx
    return factory


@pytest.fixture
def http_account(account, make_response):
    """
    Real AsyncHTTPTransport over a mocked aiohttp session.

    The session answers from the scripted account's routes, so downloads go
    through the transport's own streaming code. Bodies arrive in 4-byte chunks.
    """
    def respond(method, url):
        result = account.respond(method, url)
        body = result.body
        return make_response(
            result.status,
            dict(result.headers),
            body,
            chunks=[body[i:i + 4] for i in range(0, len(body), 4)]
        )

    session = MagicMock()
    session.closed = False
    session.close = AsyncMock()
    session.request.side_effect = lambda method, url, **kwargs: respond(method, url)
    session.get.side_effect = lambda url, **kwargs: respond('GET', url)

    transport = AsyncHTTPTransport(account.config)
    transport._session = session
    return transport
