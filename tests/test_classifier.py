"""Tests for PathClassifier.

Covers single-file and multi-file depth matching, save-path derivation,
out-of-scope torrents, path mapping syntax and rejected records.
"""

import pytest
from qbt_filesync.classifier import PathClassifier
from qbt_filesync.constants import ClassificationCase
from qbt_filesync.models import TorrentRecord

from tests.conftest import record

TARGET = "/downloads/complete"


@pytest.fixture
def classifier() -> PathClassifier:
    return PathClassifier(TARGET)


class TestDepthHeuristics:
    """Classification without a save path."""

    @pytest.mark.parametrize("name", [
        "movie.mkv",
        "Some.Album.2021",
        "name with spaces.iso",
        ".hidden",
        "..double-dot-prefix",
        "Ünïcødé.flac",
    ])
    def test_single_file_protects_base_name(self, classifier: PathClassifier, name: str) -> None:
        """A content path directly inside the target protects its own base name."""
        result = classifier.classify(record(f"{TARGET}/{name}"))

        assert result.case == ClassificationCase.SINGLE_FILE
        assert result.entry_name == name
        assert result.protects is True

    @pytest.mark.parametrize("folder,file_name", [
        ("Show.S01", "episode1.mkv"),
        ("Album", "01 - Track.flac"),
        ("x", "y"),
    ])
    def test_multi_file_protects_intermediate_folder(self, classifier: PathClassifier,
                                                     folder: str, file_name: str) -> None:
        """A content path two levels below the target protects the folder."""
        result = classifier.classify(record(f"{TARGET}/{folder}/{file_name}"))

        assert result.case == ClassificationCase.MULTI_FILE
        assert result.entry_name == folder

    def test_trailing_separators_are_ignored(self, classifier: PathClassifier) -> None:
        """Trailing slashes on the content path do not change the entry."""
        result = classifier.classify(record(f"{TARGET}/Show.S01/"))

        assert result.case == ClassificationCase.SINGLE_FILE
        assert result.entry_name == "Show.S01"

    def test_dot_segments_are_resolved(self, classifier: PathClassifier) -> None:
        """``.`` and ``..`` segments are normalized before matching."""
        result = classifier.classify(record(f"{TARGET}/./other/../Show.S01/./ep.mkv"))

        assert result.case == ClassificationCase.MULTI_FILE
        assert result.entry_name == "Show.S01"

    def test_target_with_trailing_slash(self) -> None:
        """The target directory is normalized as well."""
        classifier = PathClassifier(TARGET + "//")
        result = classifier.classify(record(f"{TARGET}/movie.mkv"))

        assert result.entry_name == "movie.mkv"

    @pytest.mark.parametrize("content_path", [
        "/downloads/incomplete/movie.mkv",
        "/downloads/movie.mkv",
        "/other/complete/movie.mkv",
        f"{TARGET}/a/b/c.mkv",
        "/",
        "relative/movie.mkv",
    ])
    def test_out_of_scope(self, classifier: PathClassifier, content_path: str) -> None:
        """Torrents saved elsewhere contribute nothing and are not errors."""
        result = classifier.classify(record(content_path))

        assert result.case == ClassificationCase.OUT_OF_SCOPE
        assert result.entry_name is None
        assert result.protects is False

    def test_sibling_with_common_string_prefix_is_out_of_scope(self, classifier: PathClassifier) -> None:
        """Matching is component-wise, not by string prefix."""
        result = classifier.classify(record(f"{TARGET}-old/movie.mkv"))

        assert result.case == ClassificationCase.OUT_OF_SCOPE


class TestSavePath:
    """Classification driven by the torrent's save path."""

    @pytest.mark.parametrize("tail,expected", [
        ("movie.mkv", "movie.mkv"),
        ("Show.S01/episode1.mkv", "Show.S01"),
        ("Show.S01/Season 1/Extras/clip.mkv", "Show.S01"),
        ("a/b/c/d/e/f", "a"),
    ])
    def test_next_segment_after_save_path(self, classifier: PathClassifier, tail: str, expected: str) -> None:
        """The entry is the segment following the save path, at any depth."""
        result = classifier.classify(record(f"{TARGET}/{tail}", save_path=TARGET))

        assert result.case == ClassificationCase.SAVE_PATH
        assert result.entry_name == expected

    def test_save_path_with_trailing_slash(self, classifier: PathClassifier) -> None:
        """qBittorrent often reports save paths with a trailing slash."""
        result = classifier.classify(record(f"{TARGET}/Show.S01/ep.mkv", save_path=TARGET + "/"))

        assert result.case == ClassificationCase.SAVE_PATH
        assert result.entry_name == "Show.S01"

    def test_save_path_below_target_protects_top_folder(self, classifier: PathClassifier) -> None:
        """A category subfolder save path protects the category folder."""
        result = classifier.classify(record(f"{TARGET}/movies/Film/film.mkv", save_path=f"{TARGET}/movies"))

        assert result.case == ClassificationCase.SAVE_PATH
        assert result.entry_name == "movies"

    def test_malformed_save_path_falls_back(self, classifier: PathClassifier) -> None:
        """A save path that does not prefix the content path is ignored."""
        result = classifier.classify(record(f"{TARGET}/Show.S01/ep.mkv", save_path="/somewhere/else"))

        assert result.case == ClassificationCase.MULTI_FILE
        assert result.entry_name == "Show.S01"

    def test_save_path_equal_to_content_path_falls_back(self, classifier: PathClassifier) -> None:
        """A save path that is not a proper prefix is malformed."""
        result = classifier.classify(record(f"{TARGET}/movie.mkv", save_path=f"{TARGET}/movie.mkv"))

        assert result.case == ClassificationCase.SINGLE_FILE
        assert result.entry_name == "movie.mkv"

    def test_save_path_string_prefix_is_not_a_path_prefix(self, classifier: PathClassifier) -> None:
        """``/downloads/comp`` is not a prefix of ``/downloads/complete/...``."""
        result = classifier.classify(record(f"{TARGET}/movie.mkv", save_path="/downloads/comp"))

        assert result.case == ClassificationCase.SINGLE_FILE

    def test_save_path_outside_target(self, classifier: PathClassifier) -> None:
        """A valid save path outside the target leaves the torrent out of scope."""
        result = classifier.classify(record("/downloads/incomplete/movie.mkv", save_path="/downloads/incomplete"))

        assert result.case == ClassificationCase.OUT_OF_SCOPE

    def test_windows_save_path_differing_in_case(self) -> None:
        """Windows paths compare case-insensitively."""
        classifier = PathClassifier("D:\\Downloads")
        result = classifier.classify(record("D:\\Downloads\\Show\\ep.mkv", save_path="d:\\downloads"))

        assert result.case == ClassificationCase.SAVE_PATH
        assert result.entry_name == "Show"

    @pytest.mark.parametrize("save_path", [None, "", "   "])
    def test_blank_save_path_uses_depth(self, classifier: PathClassifier, save_path) -> None:
        result = classifier.classify(record(f"{TARGET}/movie.mkv", save_path=save_path))

        assert result.case == ClassificationCase.SINGLE_FILE


class TestRejected:
    """Records that must never protect anything."""

    @pytest.mark.parametrize("content_path", ["", "   "])
    def test_empty_content_path_rejected(self, classifier: PathClassifier, content_path: str) -> None:
        """An empty content path is an anomaly, not 'protect nothing'."""
        result = classifier.classify(TorrentRecord(name="broken", content_path=content_path))

        assert result.case == ClassificationCase.REJECTED
        assert result.entry_name is None
        assert result.protects is False
        assert "empty" in result.reason

    @pytest.mark.parametrize("content_path", [TARGET, TARGET + "/", TARGET + "/.", TARGET + "/x/.."])
    def test_content_path_equal_to_target_rejected(self, classifier: PathClassifier, content_path: str) -> None:
        """A content path resolving to the target can never protect its name."""
        result = classifier.classify(record(content_path, save_path=TARGET))

        assert result.case == ClassificationCase.REJECTED
        assert result.entry_name is None

    def test_rejected_never_yields_target_name(self, classifier: PathClassifier) -> None:
        for content_path in ("", TARGET, "/downloads/complete/./"):
            result = classifier.classify(record(content_path))
            assert result.entry_name != "complete"


class TestPathSyntax:
    """Path syntax follows the target directory."""

    def test_windows_single_file(self) -> None:
        classifier = PathClassifier("D:\\Downloads")
        result = classifier.classify(record("D:\\Downloads\\movie.mkv"))

        assert result.case == ClassificationCase.SINGLE_FILE
        assert result.entry_name == "movie.mkv"

    def test_windows_multi_file_with_save_path(self) -> None:
        classifier = PathClassifier("D:\\Downloads")
        result = classifier.classify(record("D:\\Downloads\\Show\\ep.mkv", save_path="D:\\Downloads\\"))

        assert result.case == ClassificationCase.SAVE_PATH
        assert result.entry_name == "Show"

    def test_mixed_syntax_is_out_of_scope(self) -> None:
        classifier = PathClassifier(TARGET)
        result = classifier.classify(record("D:\\Downloads\\movie.mkv"))

        assert result.case == ClassificationCase.OUT_OF_SCOPE

    def test_empty_target_rejected(self) -> None:
        with pytest.raises(ValueError):
            PathClassifier("")

    def test_posix_name_with_backslash(self) -> None:
        """A backslash is an ordinary character in a POSIX target's entry names."""
        classifier = PathClassifier(TARGET)
        result = classifier.classify(record(f"{TARGET}/foo\\bar", save_path=TARGET))

        assert result.case == ClassificationCase.SAVE_PATH
        assert result.entry_name == "foo\\bar"

    @pytest.mark.parametrize("content_path,expected", [
        (f"{TARGET}/foo\\bar", "foo\\bar"),
        (f"{TARGET}/C:\\stuff/ep.mkv", "C:\\stuff"),
        (f"{TARGET}/\\\\share", "\\\\share"),
    ])
    def test_posix_names_resembling_windows_paths(self, content_path: str, expected: str) -> None:
        result = PathClassifier(TARGET).classify(record(content_path))

        assert result.protects is True
        assert result.entry_name == expected

    def test_windows_target_case_insensitive(self) -> None:
        classifier = PathClassifier("D:\\Downloads")
        result = classifier.classify(record("d:\\downloads\\Movie.mkv"))

        assert result.case == ClassificationCase.SINGLE_FILE
        assert result.entry_name == "Movie.mkv"


class TestWhitespace:
    """Leading and trailing whitespace belongs to the entry name."""

    @pytest.mark.parametrize("name", ["Movie ", " Movie", "Movie\t", "  "])
    def test_single_file_keeps_whitespace(self, classifier: PathClassifier, name: str) -> None:
        result = classifier.classify(record(f"{TARGET}/{name}"))

        assert result.case == ClassificationCase.SINGLE_FILE
        assert result.entry_name == name

    def test_save_path_keeps_whitespace(self, classifier: PathClassifier) -> None:
        result = classifier.classify(record(f"{TARGET}/Show /ep.mkv", save_path=TARGET))

        assert result.case == ClassificationCase.SAVE_PATH
        assert result.entry_name == "Show "

    def test_target_with_trailing_space_is_distinct(self) -> None:
        """``/downloads/complete `` and ``/downloads/complete`` are different directories."""
        result = PathClassifier(TARGET + " ").classify(record(f"{TARGET}/movie.mkv"))

        assert result.case == ClassificationCase.OUT_OF_SCOPE
