from unittest.mock import MagicMock

from files import MediaFile
from models import Album, MediaItem
from reconcile import classify, classify_items


def item(name, description=""):
    return MediaItem(id=f"id-{name}", filename=name, description=description,
                     product_url=f"https://photos.google.com/{name}")


def local(tmp_path, *names):
    return [MediaFile(tmp_path / name) for name in names]


# ── classify_items ───────────────────────────────────────────────────────────

class TestClassifyItems:
    def test_scenario(self, tmp_path):
        files = local(tmp_path, "a.jpg", "b.jpg")
        items = [item("b.jpg"), item("c.jpg")]

        result = classify_items(items, files)

        assert [i.filename for i in result.matching_items] == ["b.jpg"]
        assert [i.filename for i in result.non_matching_items] == ["c.jpg"]
        assert [f.name for f in result.missing_files] == ["a.jpg"]

    def test_partition_covers_all_remote_items(self, tmp_path):
        files = local(tmp_path, "1.jpg", "2.jpg", "3.jpg", "4.jpg")
        items = [item(n) for n in ("2.jpg", "x.jpg", "4.jpg", "y.jpg", "z.jpg")]

        result = classify_items(items, files)

        assert result.remote_count == len(items)
        assert len(result.missing_files) == len(files) - len(result.matching_items)

    def test_empty_album(self, tmp_path):
        files = local(tmp_path, "a.jpg", "b.jpg")
        result = classify_items([], files)
        assert result.matching_items == []
        assert result.non_matching_items == []
        assert [f.name for f in result.missing_files] == ["a.jpg", "b.jpg"]

    def test_no_local_files(self):
        result = classify_items([item("a.jpg")], [])
        assert [i.filename for i in result.non_matching_items] == ["a.jpg"]
        assert result.missing_files == []

    def test_matching_by_name_only(self, tmp_path):
        files = local(tmp_path, "a.jpg")
        result = classify_items([item("a.jpg", "SHA-1:deadbeef; 2020-01-01T00:00:00Z")], files)
        assert len(result.matching_items) == 1
        assert result.missing_files == []

    def test_name_collision_last_file_wins(self, tmp_path):
        first = MediaFile(tmp_path / "one" / "a.jpg")
        second = MediaFile(tmp_path / "two" / "a.jpg")
        result = classify_items([], [first, second])
        assert result.missing_files == [second]

    def test_duplicate_remote_names_both_match(self, tmp_path):
        files = local(tmp_path, "a.jpg")
        result = classify_items([item("a.jpg"), item("a.jpg")], files)
        assert len(result.matching_items) == 2
        assert result.non_matching_items == []
        assert result.missing_files == []

    def test_idempotent(self, tmp_path):
        files = local(tmp_path, "a.jpg", "b.jpg")
        items = [item("b.jpg"), item("c.jpg")]
        assert classify_items(items, files) == classify_items(items, files)


# ── classify ─────────────────────────────────────────────────────────────────

class TestClassify:
    def test_lists_album_once(self, tmp_path):
        client = MagicMock()
        client.iter_album_items.return_value = iter([item("a.jpg")])
        album = Album(id="album_1", title="Album")

        result = classify(client, album, local(tmp_path, "a.jpg", "b.jpg"))

        client.iter_album_items.assert_called_once_with("album_1")
        assert [i.filename for i in result.matching_items] == ["a.jpg"]
        assert [f.name for f in result.missing_files] == ["b.jpg"]
