"""
Tests for the template splicer.
"""

from datetime import datetime, timezone
from pathlib import Path
from unittest import mock

import pytest
from dateutil import tz

from release_board.site.splicer import (
    find_region,
    format_timestamp,
    replace_between,
    resolve_timezone,
    stamp_last_updated,
    write_if_changed,
)
from release_board.validation import ConfigurationError, TemplateError


DOC = "head\n<!--CI_TBODY-->\nold rows\n<!--/CI_TBODY-->\ntail\n"


class TestReplaceBetween:

    def test_replaces_only_region_body(self):
        out = replace_between(DOC, "CI_TBODY", "<tr>new</tr>")
        assert out == "head\n<!--CI_TBODY-->\n<tr>new</tr>\n<!--/CI_TBODY-->\ntail\n"

    def test_markers_and_surroundings_preserved(self):
        out = replace_between(DOC, "CI_TBODY", "X")
        before, _, after = DOC.partition("<!--CI_TBODY-->")
        assert out.startswith(before + "<!--CI_TBODY-->")
        assert out.endswith("<!--/CI_TBODY-->" + DOC.partition("<!--/CI_TBODY-->")[2])

    def test_idempotent_outside_region(self):
        once = replace_between(DOC, "CI_TBODY", "<tr>a</tr>")
        twice = replace_between(once, "CI_TBODY", "<tr>a</tr>")
        assert once == twice

    def test_other_regions_untouched(self):
        doc = DOC + "<!--AB_TBODY-->keep<!--/AB_TBODY-->"
        out = replace_between(doc, "CI_TBODY", "X")
        assert out.endswith("<!--AB_TBODY-->keep<!--/AB_TBODY-->")

    def test_missing_start_marker(self):
        with pytest.raises(TemplateError) as exc_info:
            replace_between("<!--/CI_TBODY-->", "CI_TBODY", "X")
        assert exc_info.value.marker == "CI_TBODY"
        assert "CI_TBODY" in str(exc_info.value)

    def test_missing_end_marker(self):
        with pytest.raises(TemplateError, match="CI_TBODY"):
            replace_between("<!--CI_TBODY-->", "CI_TBODY", "X")

    def test_end_before_start(self):
        with pytest.raises(TemplateError, match="CI_TBODY"):
            replace_between("<!--/CI_TBODY--> x <!--CI_TBODY-->", "CI_TBODY", "X")

    @pytest.mark.parametrize("doc", [
        "<!--CI_TBODY--><!--CI_TBODY-->x<!--/CI_TBODY-->",
        "<!--CI_TBODY-->x<!--/CI_TBODY--><!--/CI_TBODY-->",
        "<!--CI_TBODY-->a<!--/CI_TBODY-->\n<!--CI_TBODY-->b<!--/CI_TBODY-->",
    ])
    def test_duplicated_markers_are_fatal(self, doc):
        with pytest.raises(TemplateError, match="CI_TBODY"):
            replace_between(doc, "CI_TBODY", "X")
        assert find_region(doc, "CI_TBODY") is None

    def test_empty_region(self):
        out = replace_between("<!--M--><!--/M-->", "M", "row")
        assert out == "<!--M-->\nrow\n<!--/M-->"

    def test_find_region_offsets(self):
        start, end = find_region(DOC, "CI_TBODY")
        assert DOC[start:end] == "\nold rows\n"


class TestStampLastUpdated:

    NOW = datetime(2026, 10, 19, 13, 5, tzinfo=timezone.utc)

    def test_stamps_in_zone(self):
        doc = "Updated: <!--LAST_UPDATED-->never<!--/LAST_UPDATED-->"
        out = stamp_last_updated(doc, self.NOW, tz.gettz("Europe/London"))
        assert out == "Updated: <!--LAST_UPDATED-->\n19 Oct 2026, 14:05 BST\n<!--/LAST_UPDATED-->"

    def test_noop_without_markers(self):
        doc = "<p>no stamp here</p>"
        assert stamp_last_updated(doc, self.NOW, tz.UTC) == doc

    @pytest.mark.parametrize("doc", [
        "<!--LAST_UPDATED-->a<!--/LAST_UPDATED--><!--LAST_UPDATED-->b<!--/LAST_UPDATED-->",
        "<!--LAST_UPDATED-->only the start",
        "only the end<!--/LAST_UPDATED-->",
    ])
    def test_partial_or_duplicated_markers_are_fatal(self, doc):
        with pytest.raises(TemplateError, match="LAST_UPDATED"):
            stamp_last_updated(doc, self.NOW, tz.UTC)

    def test_naive_time_treated_as_utc(self):
        naive = datetime(2026, 1, 5, 9, 30)
        assert format_timestamp(naive, tz.gettz("UTC")) == "05 Jan 2026, 09:30 UTC"


class TestResolveTimezone:

    def test_known_zone(self):
        assert resolve_timezone("Asia/Kolkata") is not None

    def test_unknown_zone(self):
        with pytest.raises(ConfigurationError, match="Unknown timezone"):
            resolve_timezone("Mars/Olympus_Mons")


class TestWriteIfChanged:

    def test_no_change_no_write(self, tmp_path):
        path = tmp_path / "index.html"
        path.write_text("same")
        mtime = path.stat().st_mtime_ns

        assert write_if_changed(path, "same", "same") is False
        assert path.stat().st_mtime_ns == mtime

    def test_change_writes(self, tmp_path):
        path = tmp_path / "index.html"
        path.write_text("old")

        assert write_if_changed(path, "old", "new") is True
        assert path.read_text() == "new"
        assert not (tmp_path / "index.html.tmp").exists()

    @pytest.mark.parametrize("failing", ["write_text", "replace"])
    def test_failed_write_removes_temp_file(self, tmp_path, failing):
        path = tmp_path / "index.html"
        path.write_text("old")
        real = getattr(Path, failing)

        def broken(self, *args, **kwargs):
            if self.name == "index.html.tmp":
                if failing == "write_text":
                    real(self, "partial", encoding="utf-8")
                raise OSError(28, "No space left on device")
            return real(self, *args, **kwargs)

        with mock.patch.object(Path, failing, broken):
            with pytest.raises(OSError, match="No space left"):
                write_if_changed(path, "old", "new")

        assert path.read_text() == "old"
        assert not (tmp_path / "index.html.tmp").exists()
