import logging
from unittest.mock import MagicMock

from library import albums_by_title, get_or_create_album, list_media_items, shared_albums_by_title
from models import Album, MediaItem


def make_client(*titles, shared=()):
    client = MagicMock()
    client.iter_albums.side_effect = lambda: iter(
        Album(id=f"id-{i}", title=title) for i, title in enumerate(titles)
    )
    client.iter_shared_albums.side_effect = lambda: iter(
        Album(id=f"sid-{i}", title=title) for i, title in enumerate(shared)
    )
    return client


class TestAlbumsByTitle:
    def test_exact_match(self):
        client = make_client("Skiing", "Skiing 2", "skiing")
        assert [a.title for a in albums_by_title(client, "Skiing")] == ["Skiing"]

    def test_regex_search(self):
        client = make_client("2019 Skiing", "Skiing 2", "Beach")
        result = albums_by_title(client, "Ski", regex=True)
        assert [a.title for a in result] == ["2019 Skiing", "Skiing 2"]

    def test_empty_regex_matches_all(self):
        client = make_client("A", "B")
        assert len(list(albums_by_title(client, "", regex=True))) == 2

    def test_fresh_listing_every_call(self):
        client = make_client("A")
        list(albums_by_title(client, "A"))
        list(albums_by_title(client, "A"))
        assert client.iter_albums.call_count == 2

    def test_shared(self):
        client = make_client("Private", shared=("Shared", "Other"))
        assert [a.id for a in shared_albums_by_title(client, "Shared")] == ["sid-0"]


class TestGetOrCreateAlbum:
    def test_existing_album(self):
        client = make_client("Other", "Skiing", "Skiing")
        album = get_or_create_album(client, "Skiing")
        assert album.id == "id-1"
        client.create_album.assert_not_called()

    def test_creates_missing_album(self):
        client = make_client("Other")
        client.create_album.return_value = Album(id="new", title="Skiing")

        album = get_or_create_album(client, "Skiing")

        assert album.id == "new"
        client.create_album.assert_called_once_with("Skiing")

    def test_logs_creation(self, caplog):
        client = make_client()
        client.create_album.return_value = Album(id="new", title="Skiing")
        with caplog.at_level(logging.DEBUG, logger="library"):
            get_or_create_album(client, "Skiing")
        assert "Creating album Skiing" in caplog.text


class TestListMediaItems:
    def test_delegates_with_album_id(self):
        client = MagicMock()
        client.iter_album_items.return_value = iter([MediaItem(id="1", filename="a.jpg")])

        items = list(list_media_items(client, Album(id="album_1", title="A")))

        assert [i.filename for i in items] == ["a.jpg"]
        client.iter_album_items.assert_called_once_with("album_1")
