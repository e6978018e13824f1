import pytest

from patchapply.patching.errors import PatchErrorType, PatchParseError
from patchapply.patching.models import Add, Context, Remove
from patchapply.patching.parser import parse_multi
from patchapply.patching.paths import new_path_token, old_path_token

SIMPLE_PATCH = """\
--- a/src/main.py
+++ b/src/main.py
@@ -1,3 +1,4 @@
 def foo():
+    print("hello")
     pass

"""

MULTI_FILE_PATCH = """\
--- a/src/main.py
+++ b/src/main.py
@@ -1,2 +1,3 @@
 def foo():
+    print("hello")
     pass
--- a/src/utils.py
+++ b/src/utils.py
@@ -1,2 +1,3 @@
 def bar():
+    return 42
     pass
@@ -10,2 +11,2 @@
 def baz():
-    return 1
+    return 2
"""

NEW_FILE_PATCH = """\
--- /dev/null
+++ b/src/new_file.py
@@ -0,0 +1,2 @@
+def new_func():
+    pass
"""

INSERT_ONLY_PATCH = """\
--- a/notes.txt
+++ b/notes.txt
@@ -2,0 +3,1 @@
+inserted
"""

LABELLED_PATCH = """\
--- original src/main.py
+++ src/main.py modified
@@ -1 +1 @@
-a
+b
"""

TIMESTAMP_PATCH = (
    "--- a/src/main.py\t2024-01-01 10:00:00.000000000 +0000\n"
    "+++ b/src/main.py\t2024-01-02 10:00:00.000000000 +0000\n"
    "@@ -1 +1 @@\n"
    "-a\n"
    "+b\n"
)

NON_NUMERIC_RANGE_PATCH = """\
--- a/src/main.py
+++ b/src/main.py
@@ -x,2 +1,2 @@
 def foo():
-    return 1
+    return 2
"""

SHORT_HUNK_PATCH = """\
--- a/src/main.py
+++ b/src/main.py
@@ -1,4 +1,4 @@
 def foo():
-    return 1
+    return 2
"""

BAD_LINE_PREFIX_PATCH = """\
--- a/src/main.py
+++ b/src/main.py
@@ -1,2 +1,2 @@
?def foo():
-    return 1
+    return 2
"""

BINARY_PATCH = """\
diff --git a/logo.png b/logo.png
index 1111111..2222222 100644
Binary files a/logo.png and b/logo.png differ
"""


class TestParseMulti:
    """Tests for parse_multi."""

    def test_parse_simple_patch(self):
        """Single file, single hunk."""
        patches = parse_multi(SIMPLE_PATCH)

        assert len(patches) == 1
        patch = patches[0]
        assert patch.old_file == "a/src/main.py"
        assert patch.new_file == "b/src/main.py"
        assert len(patch.hunks) == 1

        hunk = patch.hunks[0]
        assert hunk.old_start == 1
        assert hunk.old_count == 3
        assert hunk.new_start == 1
        assert hunk.new_count == 4
        assert hunk.lines == [
            Context("def foo():"),
            Add('    print("hello")'),
            Context("    pass"),
            Context(""),
        ]

    def test_parse_multi_file_patch(self):
        """Files and hunks keep their source order."""
        patches = parse_multi(MULTI_FILE_PATCH)

        assert [p.old_file for p in patches] == ["a/src/main.py", "a/src/utils.py"]
        assert [h.old_start for h in patches[1].hunks] == [1, 10]
        assert patches[1].hunks[1].lines == [
            Context("def baz():"),
            Remove("    return 1"),
            Add("    return 2"),
        ]

    def test_parse_new_file(self):
        """A /dev/null source and an empty range insert at the top."""
        patches = parse_multi(NEW_FILE_PATCH)

        assert patches[0].old_file == "/dev/null"
        assert patches[0].hunks[0].old_start == 1
        assert patches[0].hunks[0].old_count == 0

    def test_zero_count_range_points_past_anchor_line(self):
        """'-2,0' inserts after line 2, so the hunk starts at line 3."""
        hunk = parse_multi(INSERT_ONLY_PATCH)[0].hunks[0]

        assert hunk.old_start == 3
        assert hunk.lines == [Add("inserted")]

    def test_single_line_range_defaults_count(self):
        """A range without a count covers one line."""
        hunk = parse_multi(LABELLED_PATCH)[0].hunks[0]

        assert hunk.old_start == 1
        assert hunk.old_count == 1

    def test_labelled_references_keep_all_tokens(self):
        """References are kept whole; path tokens are picked later."""
        patch = parse_multi(LABELLED_PATCH)[0]

        assert old_path_token(patch.old_file) == "src/main.py"
        assert new_path_token(patch.new_file) == "src/main.py"

    def test_tab_timestamps_are_not_part_of_reference(self):
        """Tab-separated timestamps do not shift the path token."""
        patch = parse_multi(TIMESTAMP_PATCH)[0]

        assert old_path_token(patch.old_file) == "a/src/main.py"
        assert new_path_token(patch.new_file) == "b/src/main.py"

    def test_crlf_patch_lines_are_stripped(self):
        """Hunk content loses its CRLF terminator."""
        patch = parse_multi(SIMPLE_PATCH.replace("\n", "\r\n"))[0]

        assert patch.hunks[0].lines[1] == Add('    print("hello")')
        assert new_path_token(patch.new_file) == "b/src/main.py"

    def test_no_newline_marker_after_removed_line(self):
        """A marker after a removed line flags the old side only."""
        patch = "--- a/f.txt\n+++ b/f.txt\n@@ -1 +1 @@\n-a\n\\ No newline at end of file\n+a\n"

        hunk = parse_multi(patch)[0].hunks[0]

        assert hunk.lines == [Remove("a"), Add("a")]
        assert hunk.old_missing_newline is True
        assert hunk.new_missing_newline is False

    def test_no_newline_marker_after_added_line(self):
        """A marker after an added line flags the new side only."""
        patch = "--- a/f.txt\n+++ b/f.txt\n@@ -1 +1 @@\n-a\n+a\n\\ No newline at end of file\n"

        hunk = parse_multi(patch)[0].hunks[0]

        assert hunk.lines == [Remove("a"), Add("a")]
        assert hunk.old_missing_newline is False
        assert hunk.new_missing_newline is True

    def test_no_newline_marker_after_context_line(self):
        """A marker after a context line flags both sides."""
        patch = "--- a/f.txt\n+++ b/f.txt\n@@ -1,2 +1,2 @@\n-a\n+A\n b\n\\ No newline at end of file\n"

        hunk = parse_multi(patch)[0].hunks[0]

        assert hunk.lines[-1] == Context("b")
        assert hunk.old_missing_newline is True
        assert hunk.new_missing_newline is True


class TestParseErrors:
    """Tests for malformed diff text."""

    def test_text_without_file_sections(self):
        """Prose with no file headers is not a diff."""
        with pytest.raises(PatchParseError, match="No file patches"):
            parse_multi("this is not a diff at all\n")

    def test_empty_text(self):
        """Empty input holds no file patch and is rejected."""
        with pytest.raises(PatchParseError) as excinfo:
            parse_multi("\n")

        assert excinfo.value.error_type == PatchErrorType.PARSE_ERROR

    def test_non_numeric_range(self):
        """A hunk header with a non-numeric range is rejected."""
        with pytest.raises(PatchParseError) as excinfo:
            parse_multi(NON_NUMERIC_RANGE_PATCH)

        assert excinfo.value.error_type == PatchErrorType.PARSE_ERROR
        assert excinfo.value.line_number == 3
        assert "@@ -x,2" in str(excinfo.value)

    def test_hunk_shorter_than_header(self):
        """unidiff diagnostics are carried through."""
        with pytest.raises(PatchParseError, match="shorter than expected"):
            parse_multi(SHORT_HUNK_PATCH)

    def test_bad_line_prefix(self):
        """Hunk lines must start with ' ', '+', '-' or '\\'."""
        with pytest.raises(PatchParseError) as excinfo:
            parse_multi(BAD_LINE_PREFIX_PATCH)

        assert excinfo.value.__cause__ is not None

    def test_hunk_without_file_header(self):
        """A hunk must follow a ---/+++ header."""
        with pytest.raises(PatchParseError):
            parse_multi("@@ -1 +1 @@\n-a\n+b\n")

    def test_binary_patch(self):
        """Binary file sections cannot be replayed line by line."""
        with pytest.raises(PatchParseError, match="Binary"):
            parse_multi(BINARY_PATCH)
