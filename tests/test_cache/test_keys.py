"""Tests for cache key generation."""

from rmd2html.cache.keys import (
    CHUNK_SIZE,
    cache_filename,
    hash_bytes,
    hash_file,
    hash_text,
    normalize_ext,
    normalize_tag,
)


class TestHashBytes:
    def test_deterministic(self):
        data = b"# Functions\n"
        assert hash_bytes(data) == hash_bytes(data)

    def test_different_data_different_hash(self):
        assert hash_bytes(b"hello") != hash_bytes(b"hello!")

    def test_returns_hex_string(self):
        h = hash_bytes(b"test")
        assert len(h) == 64  # SHA256 hex digest
        assert all(c in "0123456789abcdef" for c in h)

    def test_known_digest(self):
        assert hash_bytes(b"") == (
            "e3b0c44298fc1c149afbf4c8996fb92427ae41e4649b934ca495991b7852b855"
        )


class TestHashFile:
    def test_matches_hash_of_contents(self, tmp_path):
        path = tmp_path / "a.txt"
        path.write_bytes(b"hello")
        assert hash_file(path) == hash_bytes(b"hello")

    def test_large_file_read_in_chunks(self, tmp_path):
        data = b"x" * (CHUNK_SIZE * 3 + 17)
        path = tmp_path / "big.md"
        path.write_bytes(data)
        assert hash_file(path) == hash_bytes(data)

    def test_hash_text_equals_hash_file_for_utf8(self, tmp_path):
        text = "# Überschrift\r\n\nλ-calculus ✓\n"
        path = tmp_path / "chapter.md"
        path.write_bytes(text.encode("utf-8"))
        assert hash_text(text) == hash_file(path)


class TestCacheFilename:
    def test_same_inputs_same_name(self):
        key = hash_bytes(b"abc")
        assert cache_filename(key, ".html") == cache_filename(key, ".html")

    def test_ext_is_dotted(self):
        assert cache_filename("abc", "html") == "abc.html"
        assert cache_filename("abc", ".md") == "abc.md"
        assert cache_filename("abc") == "abc"

    def test_normalize_ext(self):
        assert normalize_ext("") == ""
        assert normalize_ext("md") == ".md"
        assert normalize_ext(".md") == ".md"

    def test_perturbations_give_distinct_names(self):
        base = "# Environments\n\nEvery name lives in an environment.\n"
        variants = {base}
        for i in range(len(base)):
            variants.add(base[:i] + base[i + 1 :])  # deletion
            variants.add(base[:i] + "x" + base[i:])  # insertion
        for i in range(300):
            variants.add(f"{base}{i}")
        names = {cache_filename(hash_text(v), ".html") for v in variants}
        assert len(names) == len(variants)

    def test_tag_goes_between_key_and_ext(self):
        assert cache_filename("abc", ".html", "pandoc") == "abc.pandoc.html"
        assert cache_filename("abc", ".html", "") == "abc.html"

    def test_tag_is_made_filename_safe(self):
        assert normalize_tag("python3.12") == "python3-12"
        assert normalize_tag("my renderer/v2") == "my-renderer-v2"
        assert cache_filename("abc", ".md", "...") == "abc.md"
